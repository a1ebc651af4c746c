# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed RestClient implementation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode

import httpx

from ..config import Configuration, load_configuration
from ..errors import translate_transport_exception
from ..models import (
    BodyContent,
    NoBodyContent,
    RawBodyContent,
    Request,
    RequestContext,
    RequestMethod,
    UrlEncodedFormBodyContent,
)
from .auth import TransportContext, build_transport_context
from .client import RestClient
from .headers import to_header_pairs
from .interceptors import (
    RequestInterceptor,
    apply_header_interceptors,
    apply_parameter_interceptors,
    build_interceptor_chain,
)
from .response import ResponseHandler, RestResponseHandler
from .tls import HttpsContextBuilder
from .url import construct_api_url, with_query_parameters

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

_TRANSPORT_ERRORS = (httpx.HTTPError, httpx.StreamError, OSError)


def _has_header(headers: list[tuple[str, str]], name: str) -> bool:
    lower = name.lower()
    return any(key.lower() == lower for key, _ in headers)


class HttpxRestClient(RestClient):
    """
    Synchronous REST client over a single httpx.Client.

    The interceptor chain, credential store and SSL context are built once from
    the configuration. Call ``close()`` (or use the client as a context manager)
    to release the underlying connection pool.

    An explicit ``transport`` receives every request; the configured proxy is
    not mounted in that case.
    """

    def __init__(
        self,
        configuration: Configuration | None = None,
        *,
        response_handler: ResponseHandler[Any] | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.configuration = configuration or load_configuration()
        self.response_handler: ResponseHandler[Any] = response_handler or RestResponseHandler()
        self.interceptors: tuple[RequestInterceptor, ...] = build_interceptor_chain(self.configuration)
        self.https_context = HttpsContextBuilder(self.configuration)
        self.transport_context: TransportContext = build_transport_context(self.configuration)
        logger.debug("Initializing client with %r", self.configuration)

        self._client: httpx.Client | None = httpx.Client(
            timeout=self.configuration.request_timeout,
            verify=self.https_context.create_ssl_context(),
            proxy=self.transport_context.proxy if transport is None else None,
            auth=self.transport_context.auth(),
            transport=transport,
        )
        self._builders: dict[RequestMethod, Callable[[str, BodyContent, RequestContext], httpx.Request]] = {
            RequestMethod.GET: self._build_get,
            RequestMethod.POST: self._build_with_body,
            RequestMethod.PUT: self._build_with_body,
            RequestMethod.DELETE: self._build_delete,
        }

    @property
    def closed(self) -> bool:
        return self._client is None

    def submit_request(self, request: Request, response_handler: ResponseHandler[Any] | None = None) -> Any:
        client = self._require_client()
        handler = response_handler or self.response_handler

        builder = self._builders.get(request.method)
        if builder is None:
            raise ValueError(f"Unknown request method: {request.method!r}")

        url = construct_api_url(self.configuration.api_host, request.endpoint)
        context = RequestContext(url=url, method=RequestMethod(request.method))
        httpx_request = builder(url, request.body, context)
        logger.debug("Executing request %s %s", httpx_request.method, httpx_request.url)

        try:
            response = client.send(httpx_request)
        except _TRANSPORT_ERRORS as exc:
            logger.debug("Request %s %s failed: %s", httpx_request.method, httpx_request.url, exc)
            raise translate_transport_exception(exc) from exc

        try:
            return handler.handle(response)
        except _TRANSPORT_ERRORS as exc:
            raise translate_transport_exception(exc) from exc
        finally:
            response.close()

    def _headers(self, context: RequestContext) -> list[tuple[str, str]]:
        return to_header_pairs(apply_header_interceptors(self.interceptors, context))

    def _build_get(self, url: str, body: BodyContent, context: RequestContext) -> httpx.Request:
        client = self._require_client()
        if isinstance(body, UrlEncodedFormBodyContent):
            parameters = apply_parameter_interceptors(self.interceptors, body.parameters, context)
            url = with_query_parameters(url, parameters)
        return client.build_request("GET", url, headers=self._headers(context))

    def _build_with_body(self, url: str, body: BodyContent, context: RequestContext) -> httpx.Request:
        client = self._require_client()
        headers = self._headers(context)
        content: bytes | None = None
        if isinstance(body, UrlEncodedFormBodyContent):
            parameters = apply_parameter_interceptors(self.interceptors, body.parameters, context)
            content = urlencode([p.as_tuple() for p in parameters]).encode("utf-8")
            if not _has_header(headers, "Content-Type"):
                headers.append(("Content-Type", FORM_CONTENT_TYPE))
        elif isinstance(body, RawBodyContent):
            content = str(body).encode("utf-8")
            if not _has_header(headers, "Content-Type"):
                headers.append(("Content-Type", TEXT_CONTENT_TYPE))
        elif not isinstance(body, NoBodyContent):
            raise TypeError(f"Unsupported body content: {type(body).__name__}")
        logger.debug("Request body for %s %s: %s", context.method.value, url, body)
        return client.build_request(context.method.value, url, headers=headers, content=content)

    def _build_delete(self, url: str, body: BodyContent, context: RequestContext) -> httpx.Request:
        client = self._require_client()
        return client.build_request("DELETE", url, headers=self._headers(context))

    def _require_client(self) -> httpx.Client:
        if self._client is None:
            raise RuntimeError("Client is closed")
        return self._client

    def close(self) -> None:
        client, self._client = self._client, None
        if client is None:
            return
        try:
            client.close()
        except Exception as exc:  # noqa: BLE001
            logger.error("Error closing: %s", exc, exc_info=True)

    def __enter__(self) -> HttpxRestClient:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["FORM_CONTENT_TYPE", "HttpxRestClient", "TEXT_CONTENT_TYPE"]
