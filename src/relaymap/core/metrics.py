"""
Prometheus metrics for discovery passes.

Module-level metric objects are process-wide singletons recorded by the
[Discoverer][relaymap.services.discoverer.Discoverer]. Discovery runs as a
batch job rather than a long-lived server, so exposition goes through the
node exporter textfile collector: [write_metrics][relaymap.core.metrics.write_metrics]
dumps the default registry to a ``.prom`` file after a run.

Architecture:
    BOOTSTRAP_OUTCOMES:          How each bootstrap connection finalized.
    DISCOVERY_COUNTER:           Message and relay totals (labelled by ``name``).
    DISCOVERY_DURATION_SECONDS:  Wall time of a whole ``discover`` call.
"""

from __future__ import annotations

from pathlib import Path

from prometheus_client import REGISTRY, Counter, Histogram, write_to_textfile
from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class MetricsConfig(BaseModel):
    """Configuration for textfile metrics exposition.

    Nothing is written unless ``enabled`` is True and ``textfile`` is set.
    """

    enabled: bool = Field(default=False, description="Write metrics after each run")
    textfile: Path | None = Field(
        default=None, description="Destination .prom file for the textfile collector"
    )


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

# outcome: eose | timeout | closed | error | connect_failed
BOOTSTRAP_OUTCOMES = Counter(
    "relaymap_bootstrap_outcomes",
    "Bootstrap relay connections by how they finalized",
    ["outcome"],
)

# name: messages_ignored | events_accepted | events_rejected | relays_discovered
DISCOVERY_COUNTER = Counter(
    "relaymap_discovery",
    "Discovery totals (cumulative)",
    ["name"],
)

DISCOVERY_DURATION_SECONDS = Histogram(
    "relaymap_discovery_duration_seconds",
    "Duration of one discovery pass in seconds",
    buckets=(0.5, 1, 2.5, 5, 10, 15, 30, 60, 120),
)


def write_metrics(config: MetricsConfig) -> bool:
    """Write the default registry to ``config.textfile``.

    Args:
        config: Metrics configuration.

    Returns:
        True if a file was written, False when exposition is disabled.

    Raises:
        OSError: If the file cannot be written.
    """
    if not config.enabled or config.textfile is None:
        return False
    config.textfile.parent.mkdir(parents=True, exist_ok=True)
    write_to_textfile(str(config.textfile), REGISTRY)
    return True
