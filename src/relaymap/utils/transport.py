"""WebSocket transport capability for relay discovery.

The [Discoverer][relaymap.services.discoverer.Discoverer] never opens sockets
itself: it receives a [Transport][relaymap.utils.transport.Transport] and
talks to each relay through the [Connection][relaymap.utils.transport.Connection]
it returns. Tests inject in-memory fakes; production uses
[AiohttpTransport][relaymap.utils.transport.AiohttpTransport].

Attributes:
    Transport: Protocol -- ``connect(url, timeout)`` returning a Connection.
    Connection: Protocol -- ``send``, ``recv`` and idempotent ``close``.
    AiohttpTransport: aiohttp-based implementation, one ``ClientSession``
        per connection.

Note:
    ``Connection.recv()`` returns ``None`` once the peer has closed the
    socket or the socket errored. Errors while opening a connection or
    sending are raised as
    [ConnectivityError][relaymap.core.exceptions.ConnectivityError] (or
    [RelayTimeoutError][relaymap.core.exceptions.RelayTimeoutError] for
    connect timeouts).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import ssl
from typing import Final, Protocol

import aiohttp

from relaymap.core.exceptions import ConnectivityError, RelayTimeoutError


DEFAULT_CLOSE_TIMEOUT: Final[float] = 5.0
DEFAULT_MAX_MSG_SIZE: Final[int] = 4 * 1024 * 1024

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """A single open WebSocket connection to a relay."""

    async def send(self, message: str) -> None: ...

    async def recv(self) -> str | bytes | None: ...

    async def close(self) -> None: ...


class Transport(Protocol):
    """Factory for [Connection][relaymap.utils.transport.Connection] objects."""

    async def connect(self, url: str, timeout: float) -> Connection: ...  # noqa: ASYNC109


class AiohttpConnection:
    """aiohttp WebSocket wrapped as a [Connection][relaymap.utils.transport.Connection].

    Owns both the WebSocket and its ``ClientSession``; ``close()`` releases
    both exactly once, however many times it is called.
    """

    def __init__(
        self,
        ws: aiohttp.ClientWebSocketResponse,
        session: aiohttp.ClientSession,
        close_timeout: float = DEFAULT_CLOSE_TIMEOUT,
    ) -> None:
        self._ws = ws
        self._session = session
        self._close_timeout = close_timeout
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, message: str) -> None:
        """Send a text frame.

        Raises:
            ConnectivityError: If the socket is closed or the write fails.
        """
        try:
            await self._ws.send_str(message)
        except (aiohttp.ClientError, OSError) as e:
            raise ConnectivityError(f"Send failed: {e}") from e

    async def recv(self) -> str | bytes | None:
        """Wait for the next data frame.

        Ping and pong frames are skipped (aiohttp answers pings itself).

        Returns:
            Text or binary payload, or ``None`` if the connection closed
            or errored.
        """
        while True:
            msg = await self._ws.receive()
            if msg.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                return msg.data
            if msg.type in (aiohttp.WSMsgType.PING, aiohttp.WSMsgType.PONG):
                continue
            if msg.type == aiohttp.WSMsgType.ERROR:
                logger.debug("ws_error error=%s", self._ws.exception())
            # CLOSE, CLOSING, CLOSED, ERROR -> connection terminated
            return None

    async def close(self) -> None:
        """Close the WebSocket and its session, with timeouts to prevent hanging."""
        if self._closed:
            return
        self._closed = True
        # aiohttp can raise ClientError, ServerDisconnectedError, etc. during teardown
        with contextlib.suppress(Exception):
            await asyncio.wait_for(self._ws.close(), timeout=self._close_timeout)
        with contextlib.suppress(Exception):
            await asyncio.wait_for(self._session.close(), timeout=self._close_timeout)


class AiohttpTransport:
    """[Transport][relaymap.utils.transport.Transport] backed by aiohttp.

    Each ``connect()`` creates its own ``ClientSession`` so that connections
    share no state and can be torn down independently.

    Args:
        verify_ssl: Verify TLS certificates. When False, an SSL context
            with ``CERT_NONE`` is used.
        close_timeout: Seconds allowed for each close step.
        max_msg_size: Largest accepted frame in bytes.

    Warning:
        ``verify_ssl=False`` disables certificate and hostname checks. It
        only affects which relays are reachable; announced URLs are never
        trusted beyond their scheme.
    """

    def __init__(
        self,
        *,
        verify_ssl: bool = True,
        close_timeout: float = DEFAULT_CLOSE_TIMEOUT,
        max_msg_size: int = DEFAULT_MAX_MSG_SIZE,
    ) -> None:
        self._verify_ssl = verify_ssl
        self._close_timeout = close_timeout
        self._max_msg_size = max_msg_size

    def _ssl_context(self) -> ssl.SSLContext | bool:
        if self._verify_ssl:
            return True
        ctx = ssl.create_default_context()
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
        return ctx

    async def connect(self, url: str, timeout: float) -> AiohttpConnection:  # noqa: ASYNC109
        """Open a WebSocket connection to *url*.

        Args:
            url: Relay URL (``ws://`` or ``wss://``).
            timeout: Seconds allowed for the TCP/TLS/WebSocket handshake.

        Returns:
            Open [AiohttpConnection][relaymap.utils.transport.AiohttpConnection].

        Raises:
            RelayTimeoutError: If the handshake times out.
            ConnectivityError: On DNS, TCP, TLS, or handshake failure.
            asyncio.CancelledError: If cancelled (the session is closed first).
        """
        connector = aiohttp.TCPConnector(ssl=self._ssl_context())
        session = aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=None, connect=timeout, sock_connect=timeout),
        )

        try:
            ws = await session.ws_connect(
                url,
                timeout=aiohttp.ClientWSTimeout(ws_close=self._close_timeout),
                max_msg_size=self._max_msg_size,
            )
        except TimeoutError:
            await session.close()
            logger.debug("ws_connect_timeout url=%s", url)
            raise RelayTimeoutError(f"Connection timeout: {url}") from None
        except asyncio.CancelledError:
            await session.close()
            raise
        except (aiohttp.ClientError, ssl.SSLError, OSError, ValueError) as e:
            # ValueError: aiohttp rejects some malformed URLs before connecting
            await session.close()
            logger.debug("ws_connect_failed url=%s error=%s", url, str(e))
            raise ConnectivityError(f"Connection failed: {url} ({e})") from e

        return AiohttpConnection(ws, session, close_timeout=self._close_timeout)
