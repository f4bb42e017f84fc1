"""Shared constants for the models layer.

Defines enumerations used across the models, nips, and services layers.
Placing them here avoids circular dependencies between the layers.

See Also:
    [relaymap.models.relay][]: Uses [NetworkType][relaymap.models.constants.NetworkType]
        for strict relay URL validation.
    [relaymap.nips.nip65][]: Matches events against
        [EventKind.RELAY_LIST][relaymap.models.constants.EventKind].
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


RELAY_URL_SCHEMES: tuple[str, ...] = ("ws://", "wss://")


class NetworkType(StrEnum):
    """Network type enum for relay host classification.

    Attributes:
        CLEARNET: Public internet host (domain name or public IP).
        TOR: Tor hidden service identified by a ``.onion`` hostname.
        I2P: I2P eepsite identified by a ``.i2p`` hostname.
        LOKI: Lokinet service identified by a ``.loki`` hostname.
        LOCAL: Private or reserved IP address, or ``localhost``.
        UNKNOWN: Hostname that could not be classified.

    Warning:
        ``LOCAL`` and ``UNKNOWN`` hosts are rejected by
        [validate_relay_url][relaymap.models.relay.validate_relay_url].
    """

    CLEARNET = "clearnet"
    TOR = "tor"
    I2P = "i2p"
    LOKI = "loki"
    LOCAL = "local"
    UNKNOWN = "unknown"


class EventKind(IntEnum):
    """Nostr event kinds consumed during discovery.

    Attributes:
        RELAY_LIST: Kind 10002 -- NIP-65 relay list metadata, the
            self-published record listing a user's relays in ``r`` tags.
    """

    RELAY_LIST = 10_002


class MessageType(StrEnum):
    """NIP-01 message type labels (first element of every wire message).

    Attributes:
        REQ: Client subscription request.
        EVENT: Relay delivering an event for a subscription.
        EOSE: Relay signalling the end of stored events for a subscription.
        CLOSED: Relay closing a subscription.
        NOTICE: Human-readable relay notice.
    """

    REQ = "REQ"
    EVENT = "EVENT"
    EOSE = "EOSE"
    CLOSED = "CLOSED"
    NOTICE = "NOTICE"
