"""Digest function and XOR distance metric.

Relay URLs and lookup targets are hashed with the same
[DigestFunction][relaymap.utils.digest.DigestFunction] so that both live in
one keyspace; closeness is the XOR of two digests read as a big-endian
unsigned integer (the Kademlia metric).

Examples:
    ```python
    from relaymap.utils.digest import sha256_digest, xor_distance

    a = sha256_digest("wss://relay.damus.io")
    b = sha256_digest("npub1...")
    xor_distance(a, b) == xor_distance(b, a)   # True
    xor_distance(a, a)                          # 0
    ```
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from typing import Final


DigestFunction = Callable[[str], bytes]

DIGEST_SIZE: Final[int] = hashlib.sha256().digest_size


def sha256_digest(value: str) -> bytes:
    """Return the 32-byte SHA-256 digest of the UTF-8 encoding of *value*."""
    return hashlib.sha256(value.encode("utf-8")).digest()


def xor_distance(a: bytes, b: bytes) -> int:
    """XOR distance between two equal-length digests.

    Args:
        a: First digest.
        b: Second digest.

    Returns:
        ``a XOR b`` interpreted as a big-endian unsigned integer.

    Raises:
        ValueError: If the digests differ in length.
    """
    if len(a) != len(b):
        raise ValueError(f"Digest length mismatch: {len(a)} != {len(b)}")
    return int.from_bytes(a, "big") ^ int.from_bytes(b, "big")
