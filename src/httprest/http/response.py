# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Response model and the pluggable handlers that turn raw responses into results."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeVar

import httpx

from ..errors import InvalidRequestError
from .headers import header_value, normalize_headers

T_co = TypeVar("T_co", covariant=True)


@dataclass
class RestResponse:
    """Successful response: status code, text body and lowercase-keyed headers."""

    status_code: int
    body: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    url: str | None = None

    def header(self, name: str, default: str = "") -> str:
        return header_value(self.headers, name, default)

    def json(self) -> Any:
        return json.loads(self.body)

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> RestResponse:
        try:
            url: str | None = str(response.url)
        except RuntimeError:
            # responses built without a request carry no URL
            url = None
        return cls(
            status_code=response.status_code,
            body=response.text,
            headers=normalize_headers(response.headers),
            url=url,
        )


class ResponseHandler(Protocol[T_co]):
    """Turns a raw httpx response into a result, or raises."""

    def handle(self, response: httpx.Response) -> T_co: ...


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class RestResponseHandler:
    """2xx becomes a RestResponse; anything else raises the matching InvalidRequestError."""

    def handle(self, response: httpx.Response) -> RestResponse:
        if is_success(response.status_code):
            return RestResponse.from_httpx(response)
        raise InvalidRequestError.factory(response.text, response.status_code)


__all__ = ["ResponseHandler", "RestResponse", "RestResponseHandler", "is_success"]
