# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""REST client abstraction and factory."""

from __future__ import annotations

from typing import Any, Protocol

from ..config import Configuration, load_configuration
from ..models import Request
from .response import ResponseHandler


class RestClient(Protocol):
    """Minimal protocol for submitting REST requests."""

    def submit_request(self, request: Request, response_handler: ResponseHandler[Any] | None = None) -> Any: ...

    def close(self) -> None:  # pragma: no cover - optional for stubs
        ...


def create_default_rest_client(configuration: Configuration | None = None) -> RestClient:
    """Factory for the default httpx-backed client."""
    from .httpx_client import HttpxRestClient

    return HttpxRestClient(configuration or load_configuration())
