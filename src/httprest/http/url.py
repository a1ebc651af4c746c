# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers shared by the dispatcher and the auth setup."""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import unquote_plus, urlencode, urlsplit, urlunsplit

from ..errors import ConfigurationError
from ..models import RequestParameter

_DEFAULT_PORTS = {"http": 80, "https": 443}


def construct_api_url(api_host: str, endpoint: str) -> str:
    """Join the configured host and an endpoint path verbatim."""
    return f"{api_host}{endpoint or ''}"


def with_query_parameters(url: str, parameters: Iterable[RequestParameter]) -> str:
    """
    Merge parameters into the URL's query string.

    A parameter replaces every existing query value with the same name; repeated
    names among the parameters keep only the last value. Existing pairs that no
    parameter names are kept byte-for-byte in their original position.
    """
    params = list(parameters)
    if not params:
        return url
    parts = urlsplit(url)
    latest: dict[str, str] = {}
    for param in params:
        latest[param.name] = param.value

    merged: list[str] = []
    emitted: set[str] = set()
    for segment in parts.query.split("&"):
        if not segment:
            continue
        name = unquote_plus(segment.split("=", 1)[0])
        if name not in latest:
            merged.append(segment)
        elif name not in emitted:
            merged.append(urlencode([(name, latest[name])]))
            emitted.add(name)
    for name, value in latest.items():
        if name not in emitted:
            merged.append(urlencode([(name, value)]))
            emitted.add(name)

    return urlunsplit(parts._replace(query="&".join(merged)))


def host_and_port(url: str) -> tuple[str, int]:
    """Return the lowercase hostname and the explicit or scheme-default port."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as exc:
        raise ConfigurationError(f"Malformed URL {url!r}: {exc}") from exc
    if not parts.hostname:
        raise ConfigurationError(f"Malformed URL {url!r}: no hostname")
    if port is None:
        port = _DEFAULT_PORTS.get(parts.scheme.lower(), -1)
    return parts.hostname.lower(), port


__all__ = ["construct_api_url", "host_and_port", "with_query_parameters"]
