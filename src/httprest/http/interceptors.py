# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request interceptors and the fold that applies them before dispatch.

Interceptors run in registration order; each one receives the previous
interceptor's output and returns a new tuple. An interceptor that wants to reject
a request raises, which aborts the call before anything is sent.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from functools import reduce

from ..config import Configuration
from ..models import (
    HeadersLike,
    RequestContext,
    RequestHeader,
    RequestParameter,
    coerce_headers,
    coerce_parameters,
)


class RequestInterceptor:
    """Base interceptor; both hooks return their input unchanged by default."""

    def modify_headers(
        self, headers: tuple[RequestHeader, ...], context: RequestContext
    ) -> Sequence[RequestHeader]:
        return headers

    def modify_parameters(
        self, parameters: tuple[RequestParameter, ...], context: RequestContext
    ) -> Sequence[RequestParameter]:
        return parameters


class NoopRequestInterceptor(RequestInterceptor):
    pass


class HeaderRequestInterceptor(RequestInterceptor):
    """Appends a static set of headers to every request."""

    def __init__(self, headers: HeadersLike):
        self._headers = coerce_headers(headers)

    @property
    def headers(self) -> tuple[RequestHeader, ...]:
        return self._headers

    def modify_headers(
        self, headers: tuple[RequestHeader, ...], context: RequestContext
    ) -> tuple[RequestHeader, ...]:
        return (*headers, *self._headers)


def apply_header_interceptors(
    interceptors: Iterable[RequestInterceptor], context: RequestContext
) -> tuple[RequestHeader, ...]:
    """Fold the header hooks over an empty header list."""
    return reduce(
        lambda headers, interceptor: tuple(interceptor.modify_headers(headers, context)),
        interceptors,
        (),
    )


def apply_parameter_interceptors(
    interceptors: Iterable[RequestInterceptor],
    parameters: Iterable[RequestParameter],
    context: RequestContext,
) -> tuple[RequestParameter, ...]:
    """Fold the parameter hooks over the request's declared parameters."""
    return reduce(
        lambda params, interceptor: tuple(interceptor.modify_parameters(params, context)),
        interceptors,
        coerce_parameters(parameters),
    )


def build_interceptor_chain(configuration: Configuration) -> tuple[RequestInterceptor, ...]:
    """Static default headers first (when any are configured), then user interceptors."""
    chain: list[RequestInterceptor] = []
    if configuration.request_headers:
        chain.append(HeaderRequestInterceptor(configuration.request_headers))
    chain.extend(configuration.request_interceptors)
    return tuple(chain)


__all__ = [
    "HeaderRequestInterceptor",
    "NoopRequestInterceptor",
    "RequestInterceptor",
    "apply_header_interceptors",
    "apply_parameter_interceptors",
    "build_interceptor_chain",
]
