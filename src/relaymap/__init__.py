r"""relaymap -- Deterministic Nostr relay selection by XOR distance.

Maps any identifier (an npub or any other string) to a reproducible set of
Nostr relays without central coordination, in two stages:

1. **Discovery** -- bootstrap relays are queried in parallel for NIP-65
   relay list events; every announced ``ws://``/``wss://`` URL is collected
   and hashed with SHA-256.
2. **Selection** -- the identifier is hashed the same way and the relays
   with the smallest XOR distance to it are returned.

Architecture follows a layered DAG; imports flow strictly downward:

```text
              services         Discoverer, selector, run configuration
             /   |   \
          utils nips  |        Digest/transport, NIP-01/NIP-65 wire format
             \   |   /
               core            Logging, exceptions, YAML, metrics
                 |
              models           Frozen dataclasses (zero I/O)
```

Note:
    Top-level imports (``from relaymap import closest``) use lazy loading
    and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("relaymap")

__all__ = [
    "Discoverer",
    "DiscovererConfig",
    "DiscoveryResult",
    "Logger",
    "RelayMapConfig",
    "RelayRecord",
    "SelectorConfig",
    "closest",
    "discover",
    "rank",
    "sha256_digest",
    "xor_distance",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "Discoverer": ("relaymap.services", "Discoverer"),
    "DiscovererConfig": ("relaymap.services", "DiscovererConfig"),
    "DiscoveryResult": ("relaymap.models", "DiscoveryResult"),
    "Logger": ("relaymap.core", "Logger"),
    "RelayMapConfig": ("relaymap.services", "RelayMapConfig"),
    "RelayRecord": ("relaymap.models", "RelayRecord"),
    "SelectorConfig": ("relaymap.services", "SelectorConfig"),
    "closest": ("relaymap.services", "closest"),
    "discover": ("relaymap.services", "discover"),
    "rank": ("relaymap.services", "rank"),
    "sha256_digest": ("relaymap.utils.digest", "sha256_digest"),
    "xor_distance": ("relaymap.utils.digest", "xor_distance"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'relaymap' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
