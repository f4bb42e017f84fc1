"""Discoverer service package.

Re-exports all public symbols::

    from relaymap.services.discoverer import Discoverer, DiscovererConfig, discover
"""

from .configs import DiscovererConfig
from .service import (
    BootstrapResult,
    Discoverer,
    Outcome,
    SubscriptionIdFactory,
    counter_subscription_ids,
    discover,
)


__all__ = [
    "BootstrapResult",
    "Discoverer",
    "DiscovererConfig",
    "Outcome",
    "SubscriptionIdFactory",
    "counter_subscription_ids",
    "discover",
]
