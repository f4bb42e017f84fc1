"""NIP-65 relay list parsing.

A kind 10002 event announces its author's relays as ``r`` tags::

    ["r", "wss://relay.damus.io"]
    ["r", "wss://nos.lol", "write"]

[extract_relay_urls][relaymap.nips.nip65.extract_relay_urls] returns the
announced URLs of such an event; the optional read/write marker is ignored.
"""

from __future__ import annotations

from typing import Any

from relaymap.models.constants import EventKind
from relaymap.models.relay import is_relay_url, validate_relay_url


RELAY_TAG = "r"


def is_relay_list(event: dict[str, Any]) -> bool:
    """Return ``True`` if *event* has kind 10002."""
    kind = event.get("kind")
    return isinstance(kind, int) and not isinstance(kind, bool) and kind == EventKind.RELAY_LIST


def extract_relay_urls(event: dict[str, Any], *, strict: bool = False) -> list[str]:
    """Extract relay URLs from the ``r`` tags of a relay list event.

    Args:
        event: Raw event object.
        strict: Also require each URL to pass
            [validate_relay_url][relaymap.models.relay.validate_relay_url].

    Returns:
        URLs in tag order (possibly with duplicates). Empty if the event is
        not a relay list or its ``tags`` field is malformed. Tags that are
        not lists, have fewer than two fields, or carry a non-WebSocket
        value are skipped.
    """
    if not is_relay_list(event):
        return []

    tags = event.get("tags")
    if not isinstance(tags, list):
        return []

    urls: list[str] = []
    for tag in tags:
        if not isinstance(tag, list) or len(tag) < 2 or tag[0] != RELAY_TAG:  # noqa: PLR2004
            continue
        url = tag[1]
        if not is_relay_url(url):
            continue
        if strict and validate_relay_url(url) is None:
            continue
        urls.append(url)
    return urls
