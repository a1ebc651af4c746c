# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Client configuration: builder, proxy settings and environment loading."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import ConfigurationError
from .models import RequestHeader

if TYPE_CHECKING:
    from .http.interceptors import RequestInterceptor

DEFAULT_REQUEST_TIMEOUT = 300.0
DEFAULT_PROXY_SCHEME = "http"
_MASK = "******"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int | None) -> int | None:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _str_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def normalize_api_host(api_host: str | None) -> str:
    """Prefix ``http://`` when the host carries no scheme."""
    if api_host is None or not str(api_host).strip():
        raise ConfigurationError("api_host parameter cannot be empty")
    host = str(api_host).strip()
    if host.startswith("http://") or host.startswith("https://"):
        return host
    return f"http://{host}"


@dataclass(frozen=True)
class ProxyConfiguration:
    """Proxy host, port, scheme and optional credentials."""

    proxy_host: str
    proxy_port: int
    proxy_scheme: str = DEFAULT_PROXY_SCHEME
    proxy_username: str | None = None
    proxy_password: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.proxy_host:
            raise ConfigurationError("proxy_host parameter cannot be empty")
        if not self.proxy_scheme:
            raise ConfigurationError("proxy_scheme parameter cannot be empty")
        object.__setattr__(self, "proxy_scheme", self.proxy_scheme.lower())
        object.__setattr__(self, "proxy_port", int(self.proxy_port))

    @property
    def is_proxy_authentication_enabled(self) -> bool:
        return self.proxy_username is not None

    @property
    def proxy_url(self) -> str:
        return f"{self.proxy_scheme}://{self.proxy_host}:{self.proxy_port}"

    def describe(self) -> str:
        """Render the proxy for logs, hiding the password."""
        auth = f"{self.proxy_username}:XXXXXXX@" if self.proxy_username is not None else ""
        return f"{self.proxy_scheme}://{auth}{self.proxy_host}:{self.proxy_port}"

    @classmethod
    def builder(cls) -> ProxyConfigurationBuilder:
        return ProxyConfigurationBuilder()


class ProxyConfigurationBuilder:
    def __init__(self) -> None:
        self._proxy_host: str | None = None
        self._proxy_port: int = 0
        self._proxy_scheme: str = DEFAULT_PROXY_SCHEME
        self._proxy_username: str | None = None
        self._proxy_password: str | None = None

    def use_proxy(self, proxy_host: str, proxy_port: int, proxy_scheme: str = DEFAULT_PROXY_SCHEME) -> ProxyConfigurationBuilder:
        self._proxy_host = proxy_host
        self._proxy_port = proxy_port
        self._proxy_scheme = proxy_scheme
        return self

    def use_proxy_authentication(self, proxy_username: str, proxy_password: str | None) -> ProxyConfigurationBuilder:
        self._proxy_username = proxy_username
        self._proxy_password = proxy_password
        return self

    def build(self) -> ProxyConfiguration:
        if self._proxy_host is None:
            raise ConfigurationError("proxy_host parameter cannot be empty")
        return ProxyConfiguration(
            proxy_host=self._proxy_host,
            proxy_port=self._proxy_port,
            proxy_scheme=self._proxy_scheme,
            proxy_username=self._proxy_username,
            proxy_password=self._proxy_password,
        )


@dataclass(frozen=True)
class Configuration:
    """
    Immutable settings consumed by a RestClient.

    Instances are produced by ConfigurationBuilder (or ``Configuration.from_env``)
    and are never mutated afterwards.
    """

    api_host: str
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    basic_auth_username: str | None = None
    basic_auth_password: str | None = None
    ignore_invalid_ssl_certificates: bool = False
    trust_store_file: Path | None = None
    trust_store_password: str | None = None
    key_store_file: Path | None = None
    key_store_password: str | None = None
    proxy_configuration: ProxyConfiguration | None = None
    request_headers: tuple[RequestHeader, ...] = ()
    request_interceptors: tuple[RequestInterceptor, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "api_host", normalize_api_host(self.api_host))

    @classmethod
    def builder(cls, api_host: str) -> ConfigurationBuilder:
        return ConfigurationBuilder(api_host)

    @classmethod
    def from_env(cls) -> Configuration:
        """Create a configuration from environment variables (evaluated at call time)."""
        builder = ConfigurationBuilder(os.getenv("HTTPREST_API_HOST"))
        builder.use_request_timeout(_float_env("HTTPREST_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT))

        username = _str_env("HTTPREST_BASIC_AUTH_USERNAME")
        if username is not None:
            builder.use_basic_auth(username, os.getenv("HTTPREST_BASIC_AUTH_PASSWORD"))
        if _bool_env("HTTPREST_INSECURE_SSL", False):
            builder.use_insecure_ssl_certificates()

        trust_store = _str_env("HTTPREST_TRUST_STORE")
        if trust_store is not None:
            builder.use_trust_store(trust_store, os.getenv("HTTPREST_TRUST_STORE_PASSWORD"))
        key_store = _str_env("HTTPREST_KEY_STORE")
        if key_store is not None:
            builder.use_key_store(key_store, os.getenv("HTTPREST_KEY_STORE_PASSWORD"))

        proxy_host = _str_env("HTTPREST_PROXY_HOST")
        if proxy_host is not None:
            proxy = ProxyConfiguration.builder().use_proxy(
                proxy_host,
                _int_env("HTTPREST_PROXY_PORT", 0) or 0,
                _str_env("HTTPREST_PROXY_SCHEME") or DEFAULT_PROXY_SCHEME,
            )
            proxy_username = _str_env("HTTPREST_PROXY_USERNAME")
            if proxy_username is not None:
                proxy.use_proxy_authentication(proxy_username, os.getenv("HTTPREST_PROXY_PASSWORD"))
            builder.use_proxy(proxy.build())

        return builder.build()

    def __repr__(self) -> str:
        parts = [f"api_host={self.api_host!r}", f"request_timeout={self.request_timeout!r}"]
        if self.proxy_configuration is not None:
            parts.append(f"proxy_configuration={self.proxy_configuration.describe()!r}")
        parts.append(f"ignore_invalid_ssl_certificates={self.ignore_invalid_ssl_certificates!r}")
        if self.trust_store_file is not None:
            parts.append(f"trust_store_file={str(self.trust_store_file)!r}")
            if self.trust_store_password is not None:
                parts.append(f"trust_store_password={_MASK!r}")
        if self.key_store_file is not None:
            parts.append(f"key_store_file={str(self.key_store_file)!r}")
            if self.key_store_password is not None:
                parts.append(f"key_store_password={_MASK!r}")
        if self.basic_auth_username is not None:
            parts.append(f"basic_auth_username={self.basic_auth_username!r}")
            parts.append(f"basic_auth_password={_MASK!r}")
        return "Configuration(" + ", ".join(parts) + ")"

    __str__ = __repr__


class ConfigurationBuilder:
    """Mutable builder; every setter returns the builder so calls can be chained."""

    def __init__(self, api_host: str | None):
        self._api_host = normalize_api_host(api_host)
        self._request_timeout = DEFAULT_REQUEST_TIMEOUT
        self._basic_auth_username: str | None = None
        self._basic_auth_password: str | None = None
        self._ignore_invalid_ssl_certificates = False
        self._trust_store_file: Path | None = None
        self._trust_store_password: str | None = None
        self._key_store_file: Path | None = None
        self._key_store_password: str | None = None
        self._proxy_configuration: ProxyConfiguration | None = None
        self._request_headers: list[RequestHeader] = []
        self._request_interceptors: list[RequestInterceptor] = []

    @property
    def api_host(self) -> str:
        return self._api_host

    def use_basic_auth(self, username: str, password: str | None) -> ConfigurationBuilder:
        self._basic_auth_username = username
        self._basic_auth_password = password
        return self

    def use_proxy(self, proxy_configuration: ProxyConfiguration) -> ConfigurationBuilder:
        self._proxy_configuration = proxy_configuration
        return self

    def use_insecure_ssl_certificates(self) -> ConfigurationBuilder:
        """Skip all validation of server certificates. Insecure."""
        self._ignore_invalid_ssl_certificates = True
        return self

    def use_trust_store(self, trust_store_file: str | os.PathLike[str], password: str | None = None) -> ConfigurationBuilder:
        """PEM bundle of CA certificates used to validate the server, e.g. for self-signed hosts."""
        if trust_store_file is None:
            raise ConfigurationError("trust_store_file parameter cannot be None")
        self._trust_store_file = Path(trust_store_file)
        self._trust_store_password = password
        return self

    def use_key_store(self, key_store_file: str | os.PathLike[str], password: str | None = None) -> ConfigurationBuilder:
        """PEM file holding the client certificate and private key, for hosts requiring client certs."""
        if key_store_file is None:
            raise ConfigurationError("key_store_file parameter cannot be None")
        self._key_store_file = Path(key_store_file)
        self._key_store_password = password
        return self

    def use_request_timeout(self, seconds: float) -> ConfigurationBuilder:
        self._request_timeout = float(seconds)
        return self

    def use_request_interceptor(self, interceptor: RequestInterceptor) -> ConfigurationBuilder:
        if interceptor is None:
            raise ConfigurationError("interceptor parameter cannot be None")
        self._request_interceptors.append(interceptor)
        return self

    def with_request_header(self, name: str, value: str) -> ConfigurationBuilder:
        self._request_headers.append(RequestHeader(name, value))
        return self

    def build(self) -> Configuration:
        return Configuration(
            api_host=self._api_host,
            request_timeout=self._request_timeout,
            basic_auth_username=self._basic_auth_username,
            basic_auth_password=self._basic_auth_password,
            ignore_invalid_ssl_certificates=self._ignore_invalid_ssl_certificates,
            trust_store_file=self._trust_store_file,
            trust_store_password=self._trust_store_password,
            key_store_file=self._key_store_file,
            key_store_password=self._key_store_password,
            proxy_configuration=self._proxy_configuration,
            request_headers=tuple(self._request_headers),
            request_interceptors=tuple(self._request_interceptors),
        )


def load_configuration() -> Configuration:
    """Load a Configuration from environment variables."""
    return Configuration.from_env()


__all__ = [
    "Configuration",
    "ConfigurationBuilder",
    "DEFAULT_REQUEST_TIMEOUT",
    "ProxyConfiguration",
    "ProxyConfigurationBuilder",
    "load_configuration",
    "normalize_api_host",
]
