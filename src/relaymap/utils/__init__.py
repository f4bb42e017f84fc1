"""Digest, distance, and WebSocket transport utilities.

Attributes:
    digest: SHA-256 digest function and XOR distance metric shared by the
        discoverer (relay URLs) and the selector (lookup targets).
    transport: ``Transport``/``Connection`` protocols injected into the
        discoverer, plus the aiohttp-backed default implementation.

Note:
    The utils layer imports only from [relaymap.models][relaymap.models]
    and [relaymap.core.exceptions][relaymap.core.exceptions], never from
    [relaymap.services][relaymap.services].

Examples:
    ```python
    from relaymap.utils.digest import sha256_digest, xor_distance
    from relaymap.utils.transport import AiohttpTransport
    ```
"""
