"""Pure frozen dataclasses with zero I/O for relay records and discovery results.

The models layer is the foundation of the dependency DAG. It has **no
dependencies** on any other relaymap package. Validation happens in
``__post_init__`` so invalid instances never escape the constructor.

Attributes:
    RelayRecord: Relay URL, as announced, paired with its placement digest.
    DiscoveryResult: Immutable URL-keyed set of records produced by one
        discovery pass.
    EventKind: Nostr event kinds consumed during discovery.
    MessageType: NIP-01 wire message labels.
    NetworkType: Host classification used by strict URL validation.

See Also:
    [relaymap.models.relay][]: Record model and URL checks.
    [relaymap.models.discovery][]: Discovery result model.
    [relaymap.models.constants][]: Shared enumerations.
"""

from .constants import RELAY_URL_SCHEMES, EventKind, MessageType, NetworkType
from .discovery import DiscoveryResult
from .relay import RelayRecord, detect_network, is_relay_url, validate_relay_url


__all__ = [
    "RELAY_URL_SCHEMES",
    "DiscoveryResult",
    "EventKind",
    "MessageType",
    "NetworkType",
    "RelayRecord",
    "detect_network",
    "is_relay_url",
    "validate_relay_url",
]
