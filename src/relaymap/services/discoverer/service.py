"""Relay discovery by broadcast over bootstrap relays.

Each bootstrap relay is asked, in parallel, for stored NIP-65 relay list
events (kind 10002). Every ``r`` tag carrying a ``ws://``/``wss://`` URL is
collected; the union over all bootstrap relays is deduplicated, hashed once
per URL, and returned as a
[DiscoveryResult][relaymap.models.discovery.DiscoveryResult].

Per bootstrap relay, one task runs the following lifecycle:

1. Connect through the injected [Transport][relaymap.utils.transport.Transport].
2. Send ``["REQ", <sub_id>, {"kinds": [10002], "limit": N}]``.
3. Collect URLs from ``EVENT`` messages for ``<sub_id>``; anything
   undecodable or addressed elsewhere is skipped.
4. Finish on ``EOSE`` for ``<sub_id>``, on close, on error, or when the
   per-relay timeout expires. URLs gathered so far are always kept.
5. Release the connection exactly once.

No single bootstrap relay can fail the pass: connection errors become an
empty contribution and timeouts are a normal way to finish. Tasks share no
state and are joined with ``asyncio.TaskGroup``, so a pass lasts as long as
its slowest relay, which is bounded by ``timeout``.

Examples:
    ```python
    from relaymap.services.discoverer import discover

    result = await discover(
        ["wss://relay.damus.io", "wss://nos.lol"],
        timeout=5.0,
        limit_per_connection=500,
    )
    len(result)
    ```
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import time
from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import Any, NamedTuple, Self

from relaymap.core.exceptions import ConnectivityError
from relaymap.core.logger import Logger
from relaymap.core.metrics import (
    BOOTSTRAP_OUTCOMES,
    DISCOVERY_COUNTER,
    DISCOVERY_DURATION_SECONDS,
)
from relaymap.models.constants import EventKind, MessageType
from relaymap.models.discovery import DiscoveryResult
from relaymap.models.relay import RelayRecord
from relaymap.nips.nip01 import build_req, parse_relay_message, verify_event
from relaymap.nips.nip65 import extract_relay_urls, is_relay_list
from relaymap.utils.digest import DigestFunction, sha256_digest
from relaymap.utils.transport import AiohttpTransport, Connection, Transport

from .configs import DiscovererConfig


SubscriptionIdFactory = Callable[[], str]


def counter_subscription_ids(prefix: str = "discover") -> SubscriptionIdFactory:
    """Return a generator of ``<prefix>-1``, ``<prefix>-2``, ... subscription ids."""
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


class Outcome(StrEnum):
    """How a bootstrap relay task finished."""

    EOSE = "eose"
    TIMEOUT = "timeout"
    CLOSED = "closed"
    ERROR = "error"
    CONNECT_FAILED = "connect_failed"


class BootstrapResult(NamedTuple):
    """Contribution of one bootstrap relay to a discovery pass."""

    url: str
    outcome: Outcome
    relay_urls: frozenset[str]


class Discoverer:
    """Broadcast relay discovery over a set of bootstrap relays.

    Attributes:
        config: [DiscovererConfig][relaymap.services.discoverer.DiscovererConfig]
            in effect.

    Args:
        config: Discovery settings (defaults when ``None``).
        transport: Connection factory. Defaults to an
            [AiohttpTransport][relaymap.utils.transport.AiohttpTransport]
            honoring ``config.verify_ssl``.
        digest: Digest applied to every discovered URL.
        subscription_ids: Source of subscription ids, one per bootstrap relay.
    """

    def __init__(
        self,
        config: DiscovererConfig | None = None,
        *,
        transport: Transport | None = None,
        digest: DigestFunction = sha256_digest,
        subscription_ids: SubscriptionIdFactory | None = None,
    ) -> None:
        self._config = config if config is not None else DiscovererConfig()
        self._transport = transport or AiohttpTransport(verify_ssl=self._config.verify_ssl)
        self._digest = digest
        self._subscription_ids = subscription_ids or counter_subscription_ids()
        self._logger = Logger("discoverer")

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> Self:
        """Create a Discoverer from a configuration dictionary.

        Raises:
            pydantic.ValidationError: If ``data`` is not a valid
                [DiscovererConfig][relaymap.services.discoverer.DiscovererConfig].
        """
        return cls(DiscovererConfig(**data), **kwargs)

    @property
    def config(self) -> DiscovererConfig:
        return self._config

    async def discover(self, bootstrap_urls: Iterable[str]) -> DiscoveryResult:
        """Run one discovery pass.

        Args:
            bootstrap_urls: Relays to query. Duplicates are queried once.

        Returns:
            Every relay URL announced by any bootstrap relay, each paired
            with its digest. Empty when ``bootstrap_urls`` is empty.
        """
        urls = list(dict.fromkeys(bootstrap_urls))
        self._logger.info(
            "discovery_started",
            bootstrap=len(urls),
            timeout_s=self._config.timeout,
            limit=self._config.limit_per_connection,
        )

        start = time.monotonic()
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(self._query_relay(url)) for url in urls]
        results = [task.result() for task in tasks]

        found: set[str] = set()
        for result in results:
            found |= result.relay_urls
        discovery = DiscoveryResult.from_records(RelayRecord(url, self._digest(url)) for url in found)

        duration = time.monotonic() - start
        DISCOVERY_DURATION_SECONDS.observe(duration)
        DISCOVERY_COUNTER.labels(name="relays_discovered").inc(len(discovery))
        self._logger.info(
            "discovery_completed",
            relays=len(discovery),
            responsive=sum(1 for r in results if r.outcome != Outcome.CONNECT_FAILED),
            bootstrap=len(urls),
            duration_s=round(duration, 3),
        )
        return discovery

    async def _query_relay(self, url: str) -> BootstrapResult:
        """Collect relay URLs from one bootstrap relay, never raising for I/O failures."""
        accumulated: set[str] = set()
        subscription_id = self._subscription_ids()
        connection: Connection | None = None
        outcome = Outcome.CONNECT_FAILED

        try:
            async with asyncio.timeout(self._config.timeout):
                connection = await self._transport.connect(url, self._config.timeout)
                outcome = await self._consume(connection, subscription_id, accumulated)
        except TimeoutError:
            outcome = Outcome.TIMEOUT
            self._logger.debug("bootstrap_timeout", relay=url, urls=len(accumulated))
        except (ConnectivityError, OSError) as e:
            if connection is None:
                self._logger.warning("bootstrap_connect_failed", relay=url, error=str(e))
            else:
                outcome = Outcome.ERROR
                self._logger.warning(
                    "bootstrap_connection_error", relay=url, error=str(e), urls=len(accumulated)
                )
        finally:
            if connection is not None:
                await self._release(connection)

        BOOTSTRAP_OUTCOMES.labels(outcome=outcome).inc()
        if outcome in (Outcome.EOSE, Outcome.CLOSED):
            self._logger.debug(f"bootstrap_{outcome}", relay=url, urls=len(accumulated))
        return BootstrapResult(url, outcome, frozenset(accumulated))

    async def _consume(
        self,
        connection: Connection,
        subscription_id: str,
        accumulated: set[str],
    ) -> Outcome:
        """Send the relay list REQ and read replies until EOSE or close."""
        req_filter = {
            "kinds": [EventKind.RELAY_LIST.value],
            "limit": self._config.limit_per_connection,
        }
        await connection.send(build_req(subscription_id, req_filter))

        while True:
            raw = await connection.recv()
            if raw is None:
                return Outcome.CLOSED

            message = parse_relay_message(raw)
            if message is None or message.subscription_id != subscription_id:
                DISCOVERY_COUNTER.labels(name="messages_ignored").inc()
                continue

            if message.type == MessageType.EOSE:
                return Outcome.EOSE
            if message.type == MessageType.EVENT and message.payload is not None:
                self._collect(message.payload, accumulated)
            else:
                DISCOVERY_COUNTER.labels(name="messages_ignored").inc()

    def _collect(self, event: dict[str, Any], accumulated: set[str]) -> None:
        if not is_relay_list(event):
            DISCOVERY_COUNTER.labels(name="messages_ignored").inc()
            return
        if self._config.verify_signatures and not verify_event(event):
            DISCOVERY_COUNTER.labels(name="events_rejected").inc()
            return
        accumulated.update(extract_relay_urls(event, strict=self._config.strict_urls))
        DISCOVERY_COUNTER.labels(name="events_accepted").inc()

    async def _release(self, connection: Connection) -> None:
        # Teardown errors carry no information for the pass
        with contextlib.suppress(ConnectivityError, OSError):
            await connection.close()


async def discover(
    bootstrap_urls: Iterable[str],
    *,
    transport: Transport | None = None,
    digest: DigestFunction = sha256_digest,
    subscription_ids: SubscriptionIdFactory | None = None,
    **options: Any,
) -> DiscoveryResult:
    """Run one discovery pass with a throwaway [Discoverer][relaymap.services.discoverer.Discoverer].

    Args:
        bootstrap_urls: Relays to query.
        transport: Connection factory (aiohttp by default).
        digest: Digest applied to every discovered URL.
        subscription_ids: Source of subscription ids.
        **options: [DiscovererConfig][relaymap.services.discoverer.DiscovererConfig]
            fields, e.g. ``timeout=5.0, limit_per_connection=500``.

    Returns:
        The deduplicated [DiscoveryResult][relaymap.models.discovery.DiscoveryResult].

    Raises:
        pydantic.ValidationError: If ``options`` are invalid (checked
            before any connection is made).
    """
    discoverer = Discoverer(
        DiscovererConfig(**options),
        transport=transport,
        digest=digest,
        subscription_ids=subscription_ids,
    )
    return await discoverer.discover(bootstrap_urls)
