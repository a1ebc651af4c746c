# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import StubRestClient
from .auth import (
    AuthCache,
    AuthScope,
    Credentials,
    CredentialsProvider,
    PreemptiveBasicAuth,
    TransportContext,
    build_transport_context,
)
from .client import RestClient, create_default_rest_client
from .headers import header_value, normalize_headers
from .httpx_client import HttpxRestClient
from .interceptors import (
    HeaderRequestInterceptor,
    NoopRequestInterceptor,
    RequestInterceptor,
    apply_header_interceptors,
    apply_parameter_interceptors,
    build_interceptor_chain,
)
from .response import ResponseHandler, RestResponse, RestResponseHandler
from .tls import HttpsContextBuilder

__all__ = [
    "AuthCache",
    "AuthScope",
    "Credentials",
    "CredentialsProvider",
    "HeaderRequestInterceptor",
    "HttpsContextBuilder",
    "HttpxRestClient",
    "NoopRequestInterceptor",
    "PreemptiveBasicAuth",
    "RequestInterceptor",
    "ResponseHandler",
    "RestClient",
    "RestResponse",
    "RestResponseHandler",
    "StubRestClient",
    "TransportContext",
    "apply_header_interceptors",
    "apply_parameter_interceptors",
    "build_interceptor_chain",
    "build_transport_context",
    "create_default_rest_client",
    "header_value",
    "normalize_headers",
]
