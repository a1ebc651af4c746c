# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request-side value types: headers, parameters, body descriptors and requests."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Union
from urllib.parse import urlencode


class RequestMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class RequestHeader:
    name: str
    value: str

    def as_tuple(self) -> tuple[str, str]:
        return (self.name, self.value)


@dataclass(frozen=True)
class RequestParameter:
    name: str
    value: str

    def as_tuple(self) -> tuple[str, str]:
        return (self.name, self.value)


ParametersLike = Union[
    Mapping[str, Any],
    Iterable[RequestParameter],
    Iterable[tuple[str, Any]],
    None,
]
HeadersLike = Union[
    Mapping[str, Any],
    Iterable[RequestHeader],
    Iterable[tuple[str, Any]],
    None,
]


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def coerce_parameters(parameters: ParametersLike) -> tuple[RequestParameter, ...]:
    """Normalize a mapping, a sequence of pairs or RequestParameters into a tuple."""
    if not parameters:
        return ()
    if isinstance(parameters, Mapping):
        return tuple(RequestParameter(str(name), _text(value)) for name, value in parameters.items())
    out: list[RequestParameter] = []
    for item in parameters:
        if isinstance(item, RequestParameter):
            out.append(item)
        else:
            name, value = item
            out.append(RequestParameter(str(name), _text(value)))
    return tuple(out)


def coerce_headers(headers: HeadersLike) -> tuple[RequestHeader, ...]:
    """Normalize a mapping, a sequence of pairs or RequestHeaders into a tuple."""
    if not headers:
        return ()
    if isinstance(headers, Mapping):
        return tuple(RequestHeader(str(name), _text(value)) for name, value in headers.items())
    out: list[RequestHeader] = []
    for item in headers:
        if isinstance(item, RequestHeader):
            out.append(item)
        else:
            name, value = item
            out.append(RequestHeader(str(name), _text(value)))
    return tuple(out)


@dataclass(frozen=True)
class NoBodyContent:
    """No request body is sent."""

    def __str__(self) -> str:
        return ""


@dataclass(frozen=True)
class UrlEncodedFormBodyContent:
    """URL-encoded form parameters, sent in the query string for GET and the body otherwise."""

    parameters: tuple[RequestParameter, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", coerce_parameters(self.parameters))

    def add_parameter(self, name: str | RequestParameter, value: Any = None) -> UrlEncodedFormBodyContent:
        """Return a copy with one more parameter appended."""
        parameter = name if isinstance(name, RequestParameter) else RequestParameter(str(name), _text(value))
        return replace(self, parameters=(*self.parameters, parameter))

    def __str__(self) -> str:
        return urlencode([p.as_tuple() for p in self.parameters])


@dataclass(frozen=True)
class RawBodyContent:
    """Opaque content whose textual form is sent verbatim. Bytes are decoded as UTF-8."""

    content: Any

    def __post_init__(self) -> None:
        if isinstance(self.content, (bytes, bytearray)):
            object.__setattr__(self, "content", bytes(self.content).decode("utf-8"))

    def __str__(self) -> str:
        return _text(self.content)


BodyContent = Union[NoBodyContent, UrlEncodedFormBodyContent, RawBodyContent]


def _coerce_body(body: BodyContent | ParametersLike | str) -> BodyContent:
    if body is None:
        return UrlEncodedFormBodyContent()
    if isinstance(body, (NoBodyContent, UrlEncodedFormBodyContent, RawBodyContent)):
        return body
    if isinstance(body, (str, bytes)):
        return RawBodyContent(body)
    return UrlEncodedFormBodyContent(coerce_parameters(body))


@dataclass(frozen=True)
class Request:
    """
    A request against the configured API host.

    The body variant decides the serialization path: form parameters go to the
    query string for GET and to a form-encoded body for POST/PUT, raw content is
    sent as-is, and DELETE never carries a body.
    """

    method: RequestMethod
    endpoint: str
    body: BodyContent = field(default_factory=UrlEncodedFormBodyContent)

    @classmethod
    def get(cls, endpoint: str, parameters: ParametersLike = None) -> Request:
        return cls(RequestMethod.GET, endpoint, UrlEncodedFormBodyContent(coerce_parameters(parameters)))

    @classmethod
    def post(cls, endpoint: str, body: BodyContent | ParametersLike | str = None) -> Request:
        return cls(RequestMethod.POST, endpoint, _coerce_body(body))

    @classmethod
    def put(cls, endpoint: str, body: BodyContent | ParametersLike | str = None) -> Request:
        return cls(RequestMethod.PUT, endpoint, _coerce_body(body))

    @classmethod
    def delete(cls, endpoint: str) -> Request:
        return cls(RequestMethod.DELETE, endpoint, NoBodyContent())


@dataclass(frozen=True)
class RequestContext:
    """Per-call details handed to every interceptor."""

    url: str
    method: RequestMethod


__all__ = [
    "BodyContent",
    "HeadersLike",
    "NoBodyContent",
    "ParametersLike",
    "RawBodyContent",
    "Request",
    "RequestContext",
    "RequestHeader",
    "RequestMethod",
    "RequestParameter",
    "UrlEncodedFormBodyContent",
    "coerce_headers",
    "coerce_parameters",
]
