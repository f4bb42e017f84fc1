"""Nostr protocol pieces consumed during discovery.

Attributes:
    nip01: ``REQ`` serialization, relay message decoding, and optional
        event signature verification via nostr-sdk.
    nip65: Relay URL extraction from kind 10002 relay list events.

See Also:
    [Discoverer][relaymap.services.discoverer.Discoverer]: Drives the
        subscription these modules encode and decode.
"""

from .nip01 import RelayMessage, build_req, parse_relay_message, verify_event
from .nip65 import extract_relay_urls, is_relay_list


__all__ = [
    "RelayMessage",
    "build_req",
    "extract_relay_urls",
    "is_relay_list",
    "parse_relay_message",
    "verify_event",
]
