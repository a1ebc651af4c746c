# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header utilities.

HTTP header field names are case-insensitive (RFC 9110). Outgoing headers are an
ordered list of pairs so that repeated names survive the interceptor chain;
response headers are exposed as a lowercase-keyed dict.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from ..models import RequestHeader


def _coerce_headers_mapping(headers: Any) -> Mapping[object, object] | None:
    """
    Coerce "dict-like" header containers into a Mapping.

    Accepts plain dicts, httpx.Headers and iterables of pairs.
    """
    if not headers:
        return None
    if isinstance(headers, Mapping):
        return headers

    items = getattr(headers, "items", None)
    if callable(items):
        return dict(items())
    return dict(headers)


def normalize_headers(headers: Any) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping."""
    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return {}
    out: dict[str, str] = {}
    for key, value in coerced.items():
        if key is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        out[name] = "" if value is None else str(value)
    return out


def header_value(headers: Mapping[object, object] | None, name: str, default: str = "") -> str:
    """Return a header value using case-insensitive key matching."""
    if not headers or not name:
        return default

    lower = str(name).lower()
    for key, value in headers.items():
        if key is None:
            continue
        if str(key).lower() == lower:
            return default if value is None else str(value).strip()

    return default


def to_header_pairs(headers: Iterable[RequestHeader]) -> list[tuple[str, str]]:
    """Render RequestHeaders as the ordered pair list httpx accepts."""
    return [header.as_tuple() for header in headers]


__all__ = ["header_value", "normalize_headers", "to_header_pairs"]
