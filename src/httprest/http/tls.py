# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""SSL context assembly from a Configuration."""

from __future__ import annotations

import logging
import ssl
from pathlib import Path

import certifi

from ..config import Configuration
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


def _require_file(path: Path, label: str) -> str:
    if not path.is_file():
        raise ConfigurationError(f"{label} file not found: {path}")
    return str(path)


class HttpsContextBuilder:
    """
    Builds the certificate-validation policy for a client.

    Strict mode verifies the chain and the hostname against the configured trust
    store, or the certifi bundle when none is set. Insecure mode accepts any
    server certificate. A configured key store is presented as the client
    certificate in both modes.
    """

    def __init__(self, configuration: Configuration):
        if configuration is None:
            raise ConfigurationError("configuration parameter cannot be None")
        self.configuration = configuration

    def hostname_verification_enabled(self) -> bool:
        return not self.configuration.ignore_invalid_ssl_certificates

    def create_ssl_context(self) -> ssl.SSLContext:
        config = self.configuration
        try:
            if config.ignore_invalid_ssl_certificates:
                logger.warning("SSL certificate validation is disabled for %s", config.api_host)
                context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
                context.check_hostname = False
                context.verify_mode = ssl.CERT_NONE
                if config.trust_store_file is not None:
                    context.load_verify_locations(cafile=_require_file(config.trust_store_file, "Trust store"))
            else:
                cafile = (
                    _require_file(config.trust_store_file, "Trust store")
                    if config.trust_store_file is not None
                    else certifi.where()
                )
                context = ssl.create_default_context(cafile=cafile)

            if config.key_store_file is not None:
                context.load_cert_chain(
                    certfile=_require_file(config.key_store_file, "Key store"),
                    password=config.key_store_password,
                )
        except ssl.SSLError as exc:
            raise ConfigurationError(f"Unable to build SSL context: {exc}") from exc
        return context


__all__ = ["HttpsContextBuilder"]
