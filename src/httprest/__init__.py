# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
httprest package entrypoint.

A configuration-driven wrapper around httpx that standardizes REST API access:
default headers, proxying, TLS trust and key material, basic auth and an ordered
interceptor chain that can rewrite headers and parameters before dispatch.
"""

from .config import (
    Configuration,
    ConfigurationBuilder,
    ProxyConfiguration,
    load_configuration,
)
from .errors import (
    ConfigurationError,
    InvalidRequestError,
    ResourceNotFoundError,
    RestConnectionError,
    RestError,
    ResultParsingError,
    UnauthorizedRequestError,
)
from .http import (
    HeaderRequestInterceptor,
    HttpxRestClient,
    RequestInterceptor,
    ResponseHandler,
    RestClient,
    RestResponse,
    RestResponseHandler,
    StubRestClient,
    create_default_rest_client,
)
from .log import setup_logging
from .models import (
    NoBodyContent,
    RawBodyContent,
    Request,
    RequestContext,
    RequestHeader,
    RequestMethod,
    RequestParameter,
    UrlEncodedFormBodyContent,
)
from .version import __version__

__all__ = [
    "Configuration",
    "ConfigurationBuilder",
    "ConfigurationError",
    "HeaderRequestInterceptor",
    "HttpxRestClient",
    "InvalidRequestError",
    "NoBodyContent",
    "ProxyConfiguration",
    "RawBodyContent",
    "Request",
    "RequestContext",
    "RequestHeader",
    "RequestInterceptor",
    "RequestMethod",
    "RequestParameter",
    "ResourceNotFoundError",
    "ResponseHandler",
    "RestClient",
    "RestConnectionError",
    "RestError",
    "RestResponse",
    "RestResponseHandler",
    "ResultParsingError",
    "StubRestClient",
    "UnauthorizedRequestError",
    "UrlEncodedFormBodyContent",
    "create_default_rest_client",
    "load_configuration",
    "setup_logging",
    "__version__",
]
