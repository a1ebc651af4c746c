# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum

import httpx


class RestError(Exception):
    """Base class for every error surfaced by httprest."""


class ConfigurationError(RestError, ValueError):
    """Raised when a configuration is missing a required field or is malformed."""


class RestConnectionError(RestError):
    """Transport-level failure: socket, TLS handshake or protocol negotiation."""


class ResultParsingError(RestError):
    """Failure while reading or decoding a response after the connection was established."""


class InvalidRequestError(RestError):
    """The server rejected the request with a non-success status code."""

    def __init__(self, message: str, status_code: int = -1):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @classmethod
    def factory(cls, message: str, status_code: int) -> InvalidRequestError:
        """Pick the error class matching an HTTP status code."""
        if status_code == 401:
            return UnauthorizedRequestError(message, status_code)
        if status_code == 404:
            return ResourceNotFoundError(message, status_code)
        return InvalidRequestError(message, status_code)


class UnauthorizedRequestError(InvalidRequestError):
    """HTTP 401."""


class ResourceNotFoundError(InvalidRequestError):
    """HTTP 404."""

    def __init__(self, message: str, status_code: int = 404):
        super().__init__(message, status_code)


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    DNS_ERROR = "DNS_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


CONNECTION_CATEGORIES = frozenset(
    {
        ErrorCategory.SSL_ERROR,
        ErrorCategory.CONNECTION_ERROR,
        ErrorCategory.PROTOCOL_ERROR,
        ErrorCategory.DNS_ERROR,
    }
)


def _root_cause(exc: BaseException) -> BaseException:
    seen: set[int] = set()
    current = exc
    while current.__cause__ is not None or current.__context__ is not None:
        if id(current) in seen:
            break
        seen.add(id(current))
        current = current.__cause__ or current.__context__  # type: ignore[assignment]
    return current


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map httpx/ssl/socket exceptions to ErrorCategory.

    Connect and pool timeouts count as connection failures; read and write
    timeouts happen after the connection was established and stay TIMEOUT.
    Read, write and close errors caused by a socket or TLS failure are
    connection failures; without such a cause they are parse failures.
    """
    if isinstance(exc, (httpx.ConnectTimeout, httpx.PoolTimeout)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, httpx.ConnectError):
        cause = _root_cause(exc)
        if isinstance(cause, (ssl_module.SSLError, ssl_module.CertificateError)):
            return ErrorCategory.SSL_ERROR
        if isinstance(cause, (socket.gaierror, socket.herror)):
            return ErrorCategory.DNS_ERROR
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (httpx.ProtocolError, httpx.ProxyError, httpx.UnsupportedProtocol)):
        return ErrorCategory.PROTOCOL_ERROR

    if isinstance(exc, (httpx.ReadError, httpx.WriteError, httpx.CloseError)):
        # A reset or broken pipe underneath is a socket failure, not a bad payload.
        cause = _root_cause(exc)
        if isinstance(cause, (ssl_module.SSLError, ssl_module.CertificateError)):
            return ErrorCategory.SSL_ERROR
        if isinstance(cause, OSError):
            return ErrorCategory.CONNECTION_ERROR
        return ErrorCategory.PARSE_ERROR

    if isinstance(exc, (httpx.DecodingError, httpx.StreamError)):
        return ErrorCategory.PARSE_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (UnicodeDecodeError, OSError)):
        return ErrorCategory.PARSE_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def translate_transport_exception(exc: BaseException) -> RestError:
    """Wrap a transport exception into RestConnectionError or ResultParsingError."""
    message = str(exc) or type(exc).__name__
    if categorize_exception(exc) in CONNECTION_CATEGORIES:
        return RestConnectionError(message)
    return ResultParsingError(message)


__all__ = [
    "CONNECTION_CATEGORIES",
    "ConfigurationError",
    "ErrorCategory",
    "InvalidRequestError",
    "ResourceNotFoundError",
    "RestConnectionError",
    "RestError",
    "ResultParsingError",
    "UnauthorizedRequestError",
    "categorize_exception",
    "translate_transport_exception",
]
