"""
Deduplicated result of a relay discovery pass.

See Also:
    [Discoverer][relaymap.services.discoverer.Discoverer]: Produces
        instances of this model.
    [closest][relaymap.services.selector.closest]: Consumes them.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .relay import RelayRecord


@dataclass(frozen=True, slots=True)
class DiscoveryResult:
    """Immutable set of [RelayRecord][relaymap.models.relay.RelayRecord], keyed by URL.

    At most one record exists per URL. The set is unordered by contract;
    iteration follows ascending URL order so that output is reproducible.

    Attributes:
        records: Read-only mapping of URL to record.

    Examples:
        ```python
        result = DiscoveryResult.from_records([a, b])
        len(result)                 # 2
        "wss://relay.damus.io" in result
        merged = result.merge(previous)
        ```
    """

    records: Mapping[str, RelayRecord] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for url, record in self.records.items():
            if url != record.url:
                raise ValueError(f"Record keyed as {url!r} has url {record.url!r}")
        object.__setattr__(self, "records", MappingProxyType(dict(self.records)))

    @classmethod
    def from_records(cls, records: Iterable[RelayRecord]) -> DiscoveryResult:
        """Build a result from records, keeping the first record seen per URL."""
        by_url: dict[str, RelayRecord] = {}
        for record in records:
            by_url.setdefault(record.url, record)
        return cls(by_url)

    @property
    def urls(self) -> frozenset[str]:
        """All relay URLs in the result."""
        return frozenset(self.records)

    def merge(self, other: DiscoveryResult) -> DiscoveryResult:
        """Return the union of two results; on equal URLs this result's record wins."""
        return DiscoveryResult.from_records([*self, *other])

    def __iter__(self) -> Iterator[RelayRecord]:
        return (self.records[url] for url in sorted(self.records))

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, RelayRecord):
            return self.records.get(item.url) == item
        if isinstance(item, str):
            return item in self.records
        return False

    def __hash__(self) -> int:
        return hash(frozenset(self.records.items()))
