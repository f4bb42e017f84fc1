"""Closest-relay selection by XOR distance.

Given a lookup target (any string, typically an npub) and a set of
[RelayRecord][relaymap.models.relay.RelayRecord], the target is hashed with
the same digest as the relay URLs and relays are ranked by
[xor_distance][relaymap.utils.digest.xor_distance] to it.

Ties on distance are broken by ascending URL, so the ranking is a total,
reproducible order that never depends on input order.

Examples:
    ```python
    from relaymap.services.selector import closest

    closest("npub1...", result, n=8)
    # ['wss://...', 'wss://...', ...]
    ```
"""

from __future__ import annotations

import heapq
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from relaymap.models.relay import RelayRecord
from relaymap.utils.digest import DigestFunction, sha256_digest, xor_distance


DEFAULT_N = 8


class SelectorConfig(BaseModel):
    """Selection settings (``selector:`` section of the config file)."""

    model_config = ConfigDict(extra="forbid")

    n: int = Field(default=DEFAULT_N, ge=0, le=10_000, description="Relays returned per target")


def _ranked_keys(
    target: str,
    candidates: Iterable[RelayRecord],
    digest: DigestFunction,
) -> Iterable[tuple[int, str]]:
    if not isinstance(target, str):
        raise TypeError(f"target must be a str, not {type(target).__name__}")
    target_digest = digest(target)
    return ((xor_distance(target_digest, record.digest), record.url) for record in candidates)


def rank(
    target: str,
    candidates: Iterable[RelayRecord],
    *,
    digest: DigestFunction = sha256_digest,
) -> list[tuple[str, int]]:
    """Rank every candidate by distance to *target*.

    Args:
        target: Lookup identifier.
        candidates: Relay records (a DiscoveryResult or any iterable).
        digest: Digest function; must be the one used for the records.

    Returns:
        ``(url, distance)`` pairs ordered by ascending distance, then URL.

    Raises:
        ValueError: If a record digest differs in length from the target digest.
    """
    return [(url, distance) for distance, url in sorted(_ranked_keys(target, candidates, digest))]


def closest(
    target: str,
    candidates: Iterable[RelayRecord],
    *,
    n: int = DEFAULT_N,
    digest: DigestFunction = sha256_digest,
) -> list[str]:
    """Return the URLs of the *n* relays closest to *target*.

    Args:
        target: Lookup identifier.
        candidates: Relay records (a DiscoveryResult or any iterable).
            Never modified.
        n: Maximum number of URLs to return.
        digest: Digest function; must be the one used for the records.

    Returns:
        ``min(n, len(candidates))`` URLs ordered by ascending distance,
        ties broken by ascending URL.

    Raises:
        ValueError: If ``n`` is negative or digest lengths differ.
    """
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    if n == 0:
        return []
    return [url for _, url in heapq.nsmallest(n, _ranked_keys(target, candidates, digest))]
