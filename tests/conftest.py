"""
Pytest configuration and shared fixtures for relaymap tests.

Provides:
- ``FakeRelay``: scripted behavior of one bootstrap relay
- ``FakeConnection`` / ``FakeTransport``: in-memory Transport implementation
- Relay list event and record factories
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any

import pytest

from relaymap.core.exceptions import ConnectivityError
from relaymap.models import RelayRecord
from relaymap.utils.digest import sha256_digest


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Fake Transport
# ============================================================================


def relay_list_event(*urls: str, kind: int = 10002, extra_tags: list[Any] | None = None) -> dict:
    """Build an unsigned relay list event announcing *urls* as ``r`` tags."""
    tags: list[Any] = [["r", url] for url in urls]
    tags.extend(extra_tags or [])
    return {
        "id": "0" * 64,
        "pubkey": "1" * 64,
        "created_at": 1_700_000_000,
        "kind": kind,
        "tags": tags,
        "content": "",
        "sig": "2" * 128,
    }


@dataclass
class FakeRelay:
    """Scripted bootstrap relay.

    After the REQ is received the relay emits ``raw_messages``, then one
    ``EVENT`` per entry of ``events`` and, if ``eose`` is set, an ``EOSE``.
    Once the script is exhausted it behaves per ``after``:
    ``"hang"`` (never answers), ``"close"`` (recv returns None) or
    ``"error"`` (recv raises ConnectivityError).
    """

    events: list[dict] = field(default_factory=list)
    raw_messages: list[str | bytes] = field(default_factory=list)
    eose: bool = True
    after: str = "hang"
    connect_error: Exception | None = None
    connect_delay: float = 0.0


class FakeConnection:
    """In-memory Connection driven by a FakeRelay script."""

    def __init__(self, relay: FakeRelay) -> None:
        self.relay = relay
        self.sent: list[str] = []
        self.close_calls = 0
        self._queue: list[str | bytes] = []

    @property
    def subscription_id(self) -> str | None:
        return json.loads(self.sent[0])[1] if self.sent else None

    async def send(self, message: str) -> None:
        self.sent.append(message)
        sub_id = json.loads(message)[1]
        self._queue.extend(self.relay.raw_messages)
        self._queue.extend(json.dumps(["EVENT", sub_id, event]) for event in self.relay.events)
        if self.relay.eose:
            self._queue.append(json.dumps(["EOSE", sub_id]))

    async def recv(self) -> str | bytes | None:
        await asyncio.sleep(0)
        if self._queue:
            return self._queue.pop(0)
        if self.relay.after == "close":
            return None
        if self.relay.after == "error":
            raise ConnectivityError("connection reset")
        await asyncio.Event().wait()
        return None

    async def close(self) -> None:
        self.close_calls += 1


class FakeTransport:
    """Transport mapping URLs to FakeRelay scripts.

    URLs without a script fail to connect with ``ConnectivityError``.
    """

    def __init__(self, relays: dict[str, FakeRelay] | None = None) -> None:
        self.relays = relays or {}
        self.connections: dict[str, FakeConnection] = {}
        self.connect_calls: list[str] = []

    async def connect(self, url: str, timeout: float) -> FakeConnection:  # noqa: ASYNC109
        self.connect_calls.append(url)
        relay = self.relays.get(url)
        if relay is None:
            raise ConnectivityError(f"Connection failed: {url}")
        if relay.connect_delay:
            await asyncio.sleep(relay.connect_delay)
        if relay.connect_error is not None:
            raise relay.connect_error
        connection = FakeConnection(relay)
        self.connections[url] = connection
        return connection


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Empty FakeTransport; tests register relays on ``.relays``."""
    return FakeTransport()


# ============================================================================
# Record Fixtures
# ============================================================================


def make_record(url: str) -> RelayRecord:
    """RelayRecord with the default SHA-256 digest."""
    return RelayRecord(url, sha256_digest(url))


@pytest.fixture
def sample_urls() -> list[str]:
    """A handful of distinct relay URLs."""
    return [
        "wss://relay.damus.io",
        "wss://nos.lol",
        "wss://relay.snort.social",
        "wss://relay.primal.net",
        "wss://nostr.wine",
        "ws://abc123.onion",
    ]


@pytest.fixture
def sample_records(sample_urls: list[str]) -> list[RelayRecord]:
    """RelayRecords for ``sample_urls``."""
    return [make_record(url) for url in sample_urls]
