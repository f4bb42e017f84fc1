"""
Unit tests for nips.nip65 module.

Tests:
- is_relay_list() kind matching
- extract_relay_urls() tag filtering
- extract_relay_urls() strict mode
"""

import pytest

from relaymap.nips.nip65 import extract_relay_urls, is_relay_list
from tests.conftest import relay_list_event


# ============================================================================
# is_relay_list Tests
# ============================================================================


class TestIsRelayList:
    """Tests for is_relay_list()."""

    def test_kind_10002(self) -> None:
        assert is_relay_list({"kind": 10002}) is True

    @pytest.mark.parametrize("kind", [1, 3, 10001, "10002", 10002.0, True, None])
    def test_other_kinds(self, kind: object) -> None:
        assert is_relay_list({"kind": kind}) is False

    def test_missing_kind(self) -> None:
        assert is_relay_list({}) is False


# ============================================================================
# extract_relay_urls Tests
# ============================================================================


class TestExtractRelayUrls:
    """Tests for extract_relay_urls()."""

    def test_basic(self) -> None:
        event = relay_list_event("wss://relay.damus.io", "ws://abc123.onion")
        assert extract_relay_urls(event) == ["wss://relay.damus.io", "ws://abc123.onion"]

    def test_markers_ignored(self) -> None:
        event = relay_list_event(
            extra_tags=[["r", "wss://nos.lol", "write"], ["r", "wss://relay.snort.social", "read"]]
        )
        assert extract_relay_urls(event) == ["wss://nos.lol", "wss://relay.snort.social"]

    def test_duplicates_kept_in_order(self) -> None:
        event = relay_list_event("wss://nos.lol", "wss://nos.lol")
        assert extract_relay_urls(event) == ["wss://nos.lol", "wss://nos.lol"]

    def test_url_kept_verbatim(self) -> None:
        event = relay_list_event("wss://Relay.Damus.io/")
        assert extract_relay_urls(event) == ["wss://Relay.Damus.io/"]

    def test_non_relay_tags_skipped(self) -> None:
        event = relay_list_event(
            "wss://nos.lol",
            extra_tags=[
                ["p", "wss://not-a-relay-tag.example.com"],
                ["r"],
                ["r", 42],
                ["r", "https://relay.damus.io"],
                ["r", "relay.damus.io"],
                "r",
                {"r": "wss://x.example.com"},
                [],
            ],
        )
        assert extract_relay_urls(event) == ["wss://nos.lol"]

    def test_wrong_kind(self) -> None:
        event = relay_list_event("wss://nos.lol", kind=3)
        assert extract_relay_urls(event) == []

    def test_no_tags(self) -> None:
        event = relay_list_event()
        assert extract_relay_urls(event) == []

    def test_malformed_tags_field(self) -> None:
        event = relay_list_event()
        event["tags"] = "wss://nos.lol"
        assert extract_relay_urls(event) == []

    def test_missing_tags_field(self) -> None:
        assert extract_relay_urls({"kind": 10002}) == []

    def test_strict_filters_local_and_invalid(self) -> None:
        event = relay_list_event(
            "wss://relay.damus.io",
            "ws://localhost:7777",
            "ws://192.168.1.5",
            "wss://relay.damus.io/?x=1",
            "wss://nohost",
        )
        assert extract_relay_urls(event) == [
            "wss://relay.damus.io",
            "ws://localhost:7777",
            "ws://192.168.1.5",
            "wss://relay.damus.io/?x=1",
            "wss://nohost",
        ]
        assert extract_relay_urls(event, strict=True) == ["wss://relay.damus.io"]
