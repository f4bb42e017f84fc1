"""NIP-01 message framing for the discovery subscription.

Only the subset needed to read relay lists is implemented: building a
``REQ`` and decoding the ``EVENT``/``EOSE`` replies to it. Every other
relay message (``NOTICE``, ``CLOSED``, ``OK``, ``AUTH``) decodes to a
[RelayMessage][relaymap.nips.nip01.RelayMessage] that callers ignore.

See Also:
    [relaymap.nips.nip65][relaymap.nips.nip65]: Extracts relay URLs from
        the events delivered here.
"""

from __future__ import annotations

import json
import logging
from typing import Any, NamedTuple

from nostr_sdk import Event as NostrEvent
from nostr_sdk import NostrSdkError

from relaymap.models.constants import MessageType


logger = logging.getLogger(__name__)


class RelayMessage(NamedTuple):
    """A decoded relay-to-client message.

    Attributes:
        type: Message label (``"EVENT"``, ``"EOSE"``, ...).
        subscription_id: Subscription the message is addressed to, or
            ``None`` for messages that carry none (e.g. ``NOTICE``).
        payload: The event object for ``EVENT`` messages, otherwise ``None``.
    """

    type: str
    subscription_id: str | None
    payload: dict[str, Any] | None = None


def build_req(subscription_id: str, filters: dict[str, Any]) -> str:
    """Serialize a ``["REQ", <subscription_id>, <filter>]`` message."""
    return json.dumps([MessageType.REQ.value, subscription_id, filters], separators=(",", ":"))


def parse_relay_message(raw: str | bytes) -> RelayMessage | None:
    """Decode one relay message.

    Args:
        raw: Frame payload as received from the connection.

    Returns:
        The decoded message, or ``None`` for binary frames, invalid JSON,
        or JSON that is not a ``[type, ...]`` array. ``EVENT`` messages
        without a subscription id string or an event object are also
        rejected.
    """
    if not isinstance(raw, str):
        return None
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, RecursionError):
        return None

    if not isinstance(data, list) or not data or not isinstance(data[0], str):
        return None

    label = data[0]
    subscription_id = data[1] if len(data) > 1 and isinstance(data[1], str) else None

    if label == MessageType.EVENT:
        if subscription_id is None or len(data) < 3 or not isinstance(data[2], dict):  # noqa: PLR2004
            return None
        return RelayMessage(label, subscription_id, data[2])

    return RelayMessage(label, subscription_id)


def verify_event(event: dict[str, Any]) -> bool:
    """Check an event's id and Schnorr signature with nostr-sdk.

    Args:
        event: Raw event object as delivered in an ``EVENT`` message.

    Returns:
        ``True`` only if the event parses and both id and signature verify.
    """
    try:
        return NostrEvent.from_json(json.dumps(event)).verify()
    except (NostrSdkError, ValueError) as e:
        logger.debug("event_verify_failed error=%s", str(e))
        return False
