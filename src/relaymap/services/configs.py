"""Top-level relaymap configuration.

One YAML file configures a whole run: the bootstrap relays, the
discoverer, the selector, and metrics exposition. Every section is
optional and falls back to its defaults.

Examples:
    ```yaml
    bootstrap:
      - wss://relay.damus.io
      - wss://nos.lol
    discoverer:
      timeout: 5
    selector:
      n: 8
    metrics:
      enabled: true
      textfile: /var/lib/node_exporter/relaymap.prom
    ```

See Also:
    [DiscovererConfig][relaymap.services.discoverer.DiscovererConfig],
    [SelectorConfig][relaymap.services.selector.SelectorConfig],
    [MetricsConfig][relaymap.core.metrics.MetricsConfig]: Section models.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from relaymap.core.exceptions import ConfigurationError
from relaymap.core.metrics import MetricsConfig
from relaymap.core.yaml import load_yaml
from relaymap.models.relay import is_relay_url

from .discoverer.configs import DiscovererConfig
from .selector import SelectorConfig


DEFAULT_BOOTSTRAP: tuple[str, ...] = (
    "wss://relay.damus.io",
    "wss://relay.snort.social",
    "wss://nos.lol",
)


class RelayMapConfig(BaseModel):
    """Configuration for one discovery-and-selection run."""

    model_config = ConfigDict(extra="forbid")

    bootstrap: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BOOTSTRAP),
        description="Bootstrap relays queried for relay lists",
    )
    discoverer: DiscovererConfig = Field(default_factory=DiscovererConfig)
    selector: SelectorConfig = Field(default_factory=SelectorConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @field_validator("bootstrap")
    @classmethod
    def _validate_bootstrap(cls, v: list[str]) -> list[str]:
        invalid = [url for url in v if not is_relay_url(url)]
        if invalid:
            raise ValueError(f"bootstrap URLs must start with ws:// or wss://: {invalid}")
        return v

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Validate a configuration mapping.

        Raises:
            ConfigurationError: If the mapping does not match the schema.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> Self:
        """Load and validate a YAML configuration file.

        Raises:
            ConfigurationError: If the file is missing, malformed, or invalid.
        """
        try:
            data = load_yaml(config_path)
        except FileNotFoundError as e:
            raise ConfigurationError(str(e)) from e
        return cls.from_dict(data)
