"""Discovery and selection services.

Attributes:
    Discoverer: Concurrent broadcast discovery of relays from bootstrap
        relays' NIP-65 relay lists.
    discover: One-call wrapper around ``Discoverer``.
    closest: Nearest-N relay selection by XOR distance.
    rank: Full distance ranking behind ``closest``.
    RelayMapConfig: Top-level YAML configuration.

Examples:
    ```python
    from relaymap.services import closest, discover

    relays = await discover(["wss://relay.damus.io", "wss://nos.lol"])
    closest("npub1...", relays, n=8)
    ```
"""

from .configs import DEFAULT_BOOTSTRAP, RelayMapConfig
from .discoverer import Discoverer, DiscovererConfig, discover
from .selector import SelectorConfig, closest, rank


__all__ = [
    "DEFAULT_BOOTSTRAP",
    "Discoverer",
    "DiscovererConfig",
    "RelayMapConfig",
    "SelectorConfig",
    "closest",
    "discover",
    "rank",
]
