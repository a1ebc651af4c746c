# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import base64
import ssl
from pathlib import Path

import httpx
import pytest

from httprest.config import ConfigurationBuilder, ProxyConfiguration
from httprest.errors import ConfigurationError
from httprest.http.auth import (
    AuthCache,
    AuthScope,
    Credentials,
    CredentialsProvider,
    PreemptiveBasicAuth,
    build_transport_context,
)
from httprest.http.httpx_client import HttpxRestClient
from httprest.http.tls import HttpsContextBuilder
from httprest.http.url import host_and_port, with_query_parameters
from httprest.models import RequestParameter

FIXTURES = Path(__file__).parent / "fixtures"
# Self-signed certificate; client.pem adds its private key encrypted with CLIENT_PEM_PASSWORD.
CA_PEM = FIXTURES / "ca.pem"
CLIENT_PEM = FIXTURES / "client.pem"
CLIENT_PEM_PASSWORD = "changeit"


def test_https_context_builder_requires_configuration():
    with pytest.raises(ConfigurationError):
        HttpsContextBuilder(None)  # type: ignore[arg-type]


def test_strict_policy_validates_chain_and_hostname():
    builder = HttpsContextBuilder(ConfigurationBuilder("https://localhost").build())
    context = builder.create_ssl_context()

    assert builder.hostname_verification_enabled() is True
    assert context.verify_mode == ssl.CERT_REQUIRED
    assert context.check_hostname is True


def test_insecure_policy_accepts_any_certificate():
    builder = HttpsContextBuilder(ConfigurationBuilder("https://localhost").use_insecure_ssl_certificates().build())
    context = builder.create_ssl_context()

    assert builder.hostname_verification_enabled() is False
    assert context.verify_mode == ssl.CERT_NONE
    assert context.check_hostname is False


def test_missing_store_files_are_configuration_errors(tmp_path):
    missing = tmp_path / "missing.pem"

    trust = HttpsContextBuilder(ConfigurationBuilder("https://localhost").use_trust_store(missing).build())
    with pytest.raises(ConfigurationError, match="Trust store"):
        trust.create_ssl_context()

    key = HttpsContextBuilder(
        ConfigurationBuilder("https://localhost").use_insecure_ssl_certificates().use_key_store(missing, "pw").build()
    )
    with pytest.raises(ConfigurationError, match="Key store"):
        key.create_ssl_context()


def test_invalid_trust_store_contents_are_configuration_errors(tmp_path):
    bogus = tmp_path / "bogus.pem"
    bogus.write_text("-----BEGIN CERTIFICATE-----\nnot a certificate\n-----END CERTIFICATE-----\n")

    builder = HttpsContextBuilder(ConfigurationBuilder("https://localhost").use_trust_store(bogus).build())
    with pytest.raises(ConfigurationError):
        builder.create_ssl_context()


def test_key_store_with_encrypted_key_loads_client_certificate():
    builder = HttpsContextBuilder(
        ConfigurationBuilder("https://localhost").use_key_store(CLIENT_PEM, CLIENT_PEM_PASSWORD).build()
    )
    context = builder.create_ssl_context()
    assert context.verify_mode == ssl.CERT_REQUIRED


def test_key_store_with_wrong_password_is_configuration_error():
    builder = HttpsContextBuilder(ConfigurationBuilder("https://localhost").use_key_store(CLIENT_PEM, "wrong").build())
    with pytest.raises(ConfigurationError, match="Unable to build SSL context"):
        builder.create_ssl_context()


@pytest.mark.parametrize("insecure", [False, True])
def test_trust_store_is_loaded_in_both_policies(insecure):
    config_builder = ConfigurationBuilder("https://localhost").use_trust_store(CA_PEM)
    if insecure:
        config_builder.use_insecure_ssl_certificates()
    context = HttpsContextBuilder(config_builder.build()).create_ssl_context()

    assert context.cert_store_stats()["x509_ca"] == 1
    assert context.verify_mode == (ssl.CERT_NONE if insecure else ssl.CERT_REQUIRED)


def test_host_and_port_defaults_from_scheme():
    assert host_and_port("http://Example.com/path") == ("example.com", 80)
    assert host_and_port("https://example.com") == ("example.com", 443)
    assert host_and_port("https://example.com:8443") == ("example.com", 8443)
    with pytest.raises(ConfigurationError):
        host_and_port("http://")
    with pytest.raises(ConfigurationError):
        host_and_port("http://example.com:notaport")


def test_with_query_parameters_replaces_existing_names():
    url = with_query_parameters(
        "http://example.com/items?x=1&y=2&x=3",
        [RequestParameter("x", "9"), RequestParameter("z", "a b")],
    )
    assert url == "http://example.com/items?x=9&y=2&z=a+b"
    assert with_query_parameters("http://example.com/items?x=1", []) == "http://example.com/items?x=1"


def test_with_query_parameters_keeps_untouched_pairs_verbatim():
    url = with_query_parameters("http://example.com/items?flag&sig=a%20b&page=1", [RequestParameter("page", "2")])
    assert url == "http://example.com/items?flag&sig=a%20b&page=2"

    added = with_query_parameters("http://example.com/items?flag&a+b=c", [RequestParameter("a b", "d")])
    assert added == "http://example.com/items?flag&a+b=d"


def test_transport_context_registers_basic_auth_for_api_host():
    configuration = ConfigurationBuilder("https://api.example.com/base").use_basic_auth("user", "pw").build()
    context = build_transport_context(configuration)

    scope = AuthScope("api.example.com", 443)
    assert context.credentials.get_credentials(scope) == Credentials("user", "pw")
    assert scope in context.auth_cache
    assert context.proxy is None
    assert isinstance(context.auth(), PreemptiveBasicAuth)


def test_transport_context_registers_proxy_credentials():
    proxy = ProxyConfiguration("Proxy.Local", 3128, "http", "bob", "secret")
    configuration = ConfigurationBuilder("example.com").use_proxy(proxy).build()
    context = build_transport_context(configuration)

    scope = AuthScope("proxy.local", 3128)
    assert context.credentials.get_credentials(scope) == Credentials("bob", "secret")
    assert context.auth_cache.get(scope) == "basic"
    assert context.proxy is not None
    assert context.proxy.url.host == "proxy.local"
    assert context.proxy.url.port == 3128
    assert context.proxy.auth == ("bob", "secret")


def test_transport_context_without_credentials_has_no_auth():
    configuration = ConfigurationBuilder("example.com").use_proxy(ProxyConfiguration("proxy.local", 8080)).build()
    context = build_transport_context(configuration)

    assert len(context.credentials) == 0
    assert context.auth() is None
    assert context.proxy is not None
    assert context.proxy.auth is None


def test_client_with_proxy_initializes_and_closes():
    proxy = ProxyConfiguration("proxy.local", 3128, proxy_username="bob", proxy_password="secret")
    client = HttpxRestClient(ConfigurationBuilder("example.com").use_proxy(proxy).build())
    assert client.transport_context.proxy is not None
    client.close()
    assert client.closed is True


def test_basic_auth_answers_challenge_for_uncached_host():
    credentials = CredentialsProvider()
    credentials.set_credentials(AuthScope("example.com", 80), Credentials("user", "pw"))
    seen: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("authorization"))
        if "authorization" not in request.headers:
            return httpx.Response(401, headers={"WWW-Authenticate": 'Basic realm="api"'})
        return httpx.Response(200, text="welcome")

    with httpx.Client(auth=PreemptiveBasicAuth(credentials, AuthCache()), transport=httpx.MockTransport(handler)) as client:
        response = client.get("http://example.com/secure")

    assert response.status_code == 200
    assert seen == [None, "Basic " + base64.b64encode(b"user:pw").decode()]


def test_basic_auth_leaves_other_hosts_alone():
    credentials = CredentialsProvider()
    credentials.set_credentials(AuthScope("example.com", 80), Credentials("user", "pw"))
    cache = AuthCache()
    cache.put(AuthScope("example.com", 80))
    seen: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("authorization"))
        return httpx.Response(401, headers={"WWW-Authenticate": "Basic"})

    with httpx.Client(auth=PreemptiveBasicAuth(credentials, cache), transport=httpx.MockTransport(handler)) as client:
        response = client.get("http://other.example.com/secure")

    assert response.status_code == 401
    assert seen == [None]
