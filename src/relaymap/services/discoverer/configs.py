"""Discoverer configuration models.

See Also:
    [Discoverer][relaymap.services.discoverer.Discoverer]: The service class
        that consumes this configuration.
    [RelayMapConfig][relaymap.services.configs.RelayMapConfig]: Top-level
        config that embeds it under ``discoverer:``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DiscovererConfig(BaseModel):
    """Per-pass discovery settings.

    Every field defaults to the plain broadcast behavior: 10 s per bootstrap
    relay, up to 1000 relay list events each, no signature or URL checks
    beyond the ``ws://``/``wss://`` prefix.

    Examples:
        ```yaml
        discoverer:
          timeout: 5
          limit_per_connection: 500
          strict_urls: true
        ```
    """

    model_config = ConfigDict(extra="forbid")

    timeout: float = Field(
        default=10.0,
        gt=0.0,
        le=300.0,
        description="Seconds allowed per bootstrap relay, connect included",
    )
    limit_per_connection: int = Field(
        default=1000,
        ge=1,
        le=100_000,
        description="Relay list events requested from each bootstrap relay",
    )
    verify_signatures: bool = Field(
        default=False,
        description="Drop relay list events whose id or signature does not verify",
    )
    strict_urls: bool = Field(
        default=False,
        description="Drop announced URLs that are not valid RFC 3986 public relay URLs",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Verify TLS certificates of bootstrap relays (default transport only)",
    )
