"""
Relay records and relay URL checks.

A [RelayRecord][relaymap.models.relay.RelayRecord] pairs a relay URL, exactly
as it was announced, with the digest used to place it in XOR-distance space.
Two levels of URL checking are provided:

* [is_relay_url][relaymap.models.relay.is_relay_url] -- the scheme prefix
  test applied to every announced URL (``ws://`` or ``wss://``).
* [validate_relay_url][relaymap.models.relay.validate_relay_url] -- an
  opt-in RFC 3986 check that also rejects local, private, and unparseable
  hosts.
"""

from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Network, IPv6Network, ip_address, ip_network
from typing import Any, Final

from rfc3986 import uri_reference
from rfc3986.exceptions import UnpermittedComponentError, ValidationError
from rfc3986.validators import Validator

from .constants import RELAY_URL_SCHEMES, NetworkType


_NETWORK_TLDS: Final[dict[str, NetworkType]] = {
    ".onion": NetworkType.TOR,
    ".i2p": NetworkType.I2P,
    ".loki": NetworkType.LOKI,
}

# IANA private/reserved IP ranges.
# References:
#   https://www.iana.org/assignments/iana-ipv4-special-registry/
#   https://www.iana.org/assignments/iana-ipv6-special-registry/
_LOCAL_NETWORKS: Final[list[IPv4Network | IPv6Network]] = [
    # IPv4
    ip_network("0.0.0.0/8"),
    ip_network("10.0.0.0/8"),
    ip_network("100.64.0.0/10"),
    ip_network("127.0.0.0/8"),
    ip_network("169.254.0.0/16"),
    ip_network("172.16.0.0/12"),
    ip_network("192.0.0.0/24"),
    ip_network("192.0.2.0/24"),
    ip_network("192.168.0.0/16"),
    ip_network("198.18.0.0/15"),
    ip_network("198.51.100.0/24"),
    ip_network("203.0.113.0/24"),
    ip_network("224.0.0.0/4"),
    ip_network("240.0.0.0/4"),
    # IPv6
    ip_network("::1/128"),
    ip_network("::/128"),
    ip_network("::ffff:0:0/96"),
    ip_network("2001:db8::/32"),
    ip_network("fc00::/7"),
    ip_network("fe80::/10"),
    ip_network("ff00::/8"),
]


def is_relay_url(value: Any) -> bool:
    """Return ``True`` if *value* is a string starting with ``ws://`` or ``wss://``.

    Strings that cannot be encoded as UTF-8 (lone surrogates decoded from
    ``\\ud800``-style JSON escapes) are rejected, since they cannot be digested.
    """
    if not isinstance(value, str) or not value.startswith(RELAY_URL_SCHEMES):
        return False
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def detect_network(host: str) -> NetworkType:
    """Classify a hostname into a network type.

    Checks overlay network TLDs first, then tests whether the host is a
    known local/private IP, and finally validates standard domain name
    format.

    Args:
        host: Hostname or IP address string (IPv6 brackets allowed).

    Returns:
        The detected NetworkType. ``UNKNOWN`` for empty or invalid
        hostnames, ``LOCAL`` for private/reserved IPs and ``localhost``.
    """
    if not host:
        return NetworkType.UNKNOWN

    host_bare = host.lower().strip("[]")

    for tld, network in _NETWORK_TLDS.items():
        if host_bare.endswith(tld):
            return network

    if host_bare in ("localhost", "localhost.localdomain"):
        return NetworkType.LOCAL

    try:
        ip = ip_address(host_bare)
        is_local = any(ip in net for net in _LOCAL_NETWORKS)
        return NetworkType.LOCAL if is_local else NetworkType.CLEARNET
    except ValueError:
        pass

    if "." not in host_bare:
        return NetworkType.UNKNOWN

    labels = host_bare.split(".")
    valid = all(
        label and not label.startswith("-") and not label.endswith("-") for label in labels
    )
    return NetworkType.CLEARNET if valid else NetworkType.UNKNOWN


def validate_relay_url(raw: Any) -> str | None:
    """Strictly validate an announced relay URL.

    The URL must carry a ``ws``/``wss`` scheme and a host, be valid per
    RFC 3986, contain no query string, fragment, or null byte, and resolve
    to a public (clearnet or overlay) host.

    Args:
        raw: Potential relay URL.

    Returns:
        The URL exactly as given when valid, ``None`` otherwise. The string
        is not normalized so that its digest matches the one computed by
        peers that skip strict validation.
    """
    if not is_relay_url(raw) or "\x00" in raw:
        return None

    uri = uri_reference(raw).normalize()
    validator = (
        Validator()
        .require_presence_of("scheme", "host")
        .allow_schemes("ws", "wss")
        .check_validity_of("scheme", "host", "port", "path")
    )
    try:
        validator.validate(uri)
    except (UnpermittedComponentError, ValidationError):
        return None

    if uri.query or uri.fragment:
        return None

    network = detect_network(uri.host or "")
    if network in (NetworkType.LOCAL, NetworkType.UNKNOWN):
        return None
    return raw


@dataclass(frozen=True, slots=True)
class RelayRecord:
    """Immutable relay URL with its placement digest.

    Attributes:
        url: Relay URL exactly as announced (``ws://`` or ``wss://``).
        digest: Digest of ``url`` (32 bytes with the default SHA-256).

    Raises:
        ValueError: If ``url`` lacks a WebSocket scheme or ``digest`` is
            not non-empty bytes.

    Examples:
        ```python
        from relaymap.utils.digest import sha256_digest

        url = "wss://relay.damus.io"
        record = RelayRecord(url, sha256_digest(url))
        record.digest.hex()[:8]
        ```
    """

    url: str
    digest: bytes

    def __post_init__(self) -> None:
        if not is_relay_url(self.url):
            raise ValueError(f"Relay URL must start with ws:// or wss://: {self.url!r}")
        if not isinstance(self.digest, bytes) or not self.digest:
            raise ValueError("Relay digest must be non-empty bytes")
