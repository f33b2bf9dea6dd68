# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Client Configuration for httpapi client

This module provides the configuration applied to every request a client
composes: the target host, default headers and the default timeout.
"""

from dataclasses import dataclass, field
from urllib.parse import urlsplit

from .exceptions import ConfigurationError


@dataclass
class HttpApiConfig:
    """
    Configuration shared by the requests of one client.

    The host is optional; requests composed without one have no URI until
    the routing layer sets it, and appending query parameters fails.
    """

    http_host: str | None = None
    """Absolute base URL requests are resolved against."""

    timeout: float | None = None
    """Default per-request timeout in seconds, enforced by the transport."""

    headers: dict[str, str] = field(default_factory=dict)
    """Headers added to every composed request."""

    metrics_enabled: bool = True
    """Enable dispatcher and call metrics."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.http_host is not None:
            parts = urlsplit(self.http_host)
            if parts.scheme not in ("http", "https") or not parts.netloc:
                raise ConfigurationError(
                    f"http_host must be an absolute http or https URL, got {self.http_host!r}"
                )
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")


__all__ = ["HttpApiConfig"]
