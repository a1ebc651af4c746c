# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential store, preemptive auth cache and the httpx auth flow built on them."""

from __future__ import annotations

import logging
from base64 import b64encode
from collections.abc import Generator
from dataclasses import dataclass, field

import httpx

from ..config import Configuration
from .url import host_and_port

logger = logging.getLogger(__name__)

BASIC_SCHEME = "basic"


@dataclass(frozen=True)
class AuthScope:
    host: str
    port: int

    @classmethod
    def from_url(cls, url: str | httpx.URL) -> AuthScope:
        host, port = host_and_port(str(url))
        return cls(host, port)


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str | None = field(default=None, repr=False)

    def basic_auth_header(self) -> str:
        token = b64encode(f"{self.username}:{self.password or ''}".encode()).decode("ascii")
        return f"Basic {token}"


class CredentialsProvider:
    """Credentials keyed by host/port."""

    def __init__(self) -> None:
        self._credentials: dict[AuthScope, Credentials] = {}

    def set_credentials(self, scope: AuthScope, credentials: Credentials) -> None:
        self._credentials[scope] = credentials

    def get_credentials(self, scope: AuthScope) -> Credentials | None:
        return self._credentials.get(scope)

    def __contains__(self, scope: object) -> bool:
        return scope in self._credentials

    def __len__(self) -> int:
        return len(self._credentials)


class AuthCache:
    """Hosts whose auth scheme is known up front, so no 401 round trip is needed."""

    def __init__(self) -> None:
        self._schemes: dict[AuthScope, str] = {}

    def put(self, scope: AuthScope, scheme: str = BASIC_SCHEME) -> None:
        self._schemes[scope] = scheme

    def get(self, scope: AuthScope) -> str | None:
        return self._schemes.get(scope)

    def __contains__(self, scope: object) -> bool:
        return scope in self._schemes


@dataclass
class TransportContext:
    credentials: CredentialsProvider
    auth_cache: AuthCache
    proxy: httpx.Proxy | None = None

    def auth(self) -> PreemptiveBasicAuth | None:
        if not len(self.credentials):
            return None
        return PreemptiveBasicAuth(self.credentials, self.auth_cache)


def build_transport_context(configuration: Configuration) -> TransportContext:
    """Assemble proxy and basic-auth credentials once, at client setup."""
    credentials = CredentialsProvider()
    auth_cache = AuthCache()
    proxy: httpx.Proxy | None = None

    proxy_config = configuration.proxy_configuration
    if proxy_config is not None:
        proxy_auth: tuple[str, str] | None = None
        if proxy_config.is_proxy_authentication_enabled:
            scope = AuthScope(proxy_config.proxy_host.lower(), proxy_config.proxy_port)
            proxy_credentials = Credentials(proxy_config.proxy_username or "", proxy_config.proxy_password)
            credentials.set_credentials(scope, proxy_credentials)
            auth_cache.put(scope)
            proxy_auth = (proxy_credentials.username, proxy_credentials.password or "")
        proxy = httpx.Proxy(proxy_config.proxy_url, auth=proxy_auth)
        logger.debug("Using proxy %s", proxy_config.describe())

    if configuration.basic_auth_username is not None:
        scope = AuthScope.from_url(configuration.api_host)
        credentials.set_credentials(
            scope,
            Credentials(configuration.basic_auth_username, configuration.basic_auth_password),
        )
        auth_cache.put(scope)

    return TransportContext(credentials=credentials, auth_cache=auth_cache, proxy=proxy)


class PreemptiveBasicAuth(httpx.Auth):
    """
    Basic auth driven by the credential store.

    Hosts present in the auth cache get the Authorization header on the first
    attempt. Other hosts with known credentials answer a Basic 401 challenge once.
    """

    def __init__(self, credentials: CredentialsProvider, auth_cache: AuthCache):
        self._credentials = credentials
        self._auth_cache = auth_cache

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        scope = AuthScope.from_url(request.url)
        creds = self._credentials.get_credentials(scope)
        if creds is None or "Authorization" in request.headers:
            yield request
            return

        if self._auth_cache.get(scope) == BASIC_SCHEME:
            request.headers["Authorization"] = creds.basic_auth_header()
            yield request
            return

        response = yield request
        challenge = response.headers.get("WWW-Authenticate", "")
        if response.status_code == 401 and challenge.lower().startswith(BASIC_SCHEME):
            request.headers["Authorization"] = creds.basic_auth_header()
            yield request


__all__ = [
    "AuthCache",
    "AuthScope",
    "Credentials",
    "CredentialsProvider",
    "PreemptiveBasicAuth",
    "TransportContext",
    "build_transport_context",
]
