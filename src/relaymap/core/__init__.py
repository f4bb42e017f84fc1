"""Infrastructure shared by the services: logging, exceptions, YAML, metrics.

Attributes:
    Logger: Structured key=value / JSON logger.
    StructuredFormatter: Root-handler formatter that renders structured fields.
    RelayMapError: Base of the exception hierarchy.
    ConfigurationError: Invalid configuration file or flags.
    ConnectivityError: Relay unreachable or handshake failure.
    RelayTimeoutError: Relay connection attempt timed out.
    MetricsConfig: Textfile exposition settings.
    load_yaml: Safe YAML mapping loader.
    write_metrics: Write Prometheus metrics to a textfile.

See Also:
    [relaymap.core.metrics][]: Metric singletons recorded during discovery.
"""

from .exceptions import ConfigurationError, ConnectivityError, RelayMapError, RelayTimeoutError
from .logger import Logger, StructuredFormatter, format_kv_pairs
from .metrics import MetricsConfig, write_metrics
from .yaml import load_yaml


__all__ = [
    "ConfigurationError",
    "ConnectivityError",
    "Logger",
    "MetricsConfig",
    "RelayMapError",
    "RelayTimeoutError",
    "StructuredFormatter",
    "format_kv_pairs",
    "load_yaml",
    "write_metrics",
]
