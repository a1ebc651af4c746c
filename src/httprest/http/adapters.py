# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Test double implementing the RestClient protocol."""

from __future__ import annotations

from typing import Any

import httpx

from ..models import Request, RequestMethod
from .client import RestClient
from .response import ResponseHandler, RestResponseHandler

STUB_HOST = "http://stub.invalid"


class StubRestClient(RestClient):
    """Deterministic, programmable RestClient for tests.

    Programmed responses are keyed by method and endpoint and go through the
    response handler, so error statuses raise exactly as they would over HTTP.
    Unprogrammed requests answer 404.
    """

    def __init__(self, response_handler: ResponseHandler[Any] | None = None):
        self._responses: dict[tuple[RequestMethod, str], tuple[int, str, dict[str, str]]] = {}
        self.response_handler: ResponseHandler[Any] = response_handler or RestResponseHandler()
        self.requests: list[Request] = []
        self.closed = False

    def add(
        self,
        method: RequestMethod | str,
        endpoint: str,
        *,
        status_code: int = 200,
        body: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        self._responses[(RequestMethod(method), endpoint)] = (status_code, body, dict(headers or {}))

    def submit_request(self, request: Request, response_handler: ResponseHandler[Any] | None = None) -> Any:
        self.requests.append(request)
        status_code, body, headers = self._responses.get(
            (RequestMethod(request.method), request.endpoint),
            (404, "No stubbed response configured", {}),
        )
        response = httpx.Response(
            status_code,
            text=body,
            headers=headers,
            request=httpx.Request(RequestMethod(request.method).value, f"{STUB_HOST}{request.endpoint}"),
        )
        return (response_handler or self.response_handler).handle(response)

    def close(self) -> None:
        self.closed = True


__all__ = ["StubRestClient"]
