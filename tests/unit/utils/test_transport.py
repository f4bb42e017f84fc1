"""
Unit tests for utils.transport module.

Tests:
- AiohttpConnection.send() error mapping
- AiohttpConnection.recv() frame handling
- AiohttpConnection.close() idempotence and error suppression
- AiohttpTransport.connect() success and failure mapping
- AiohttpTransport SSL context selection
"""

import asyncio
import ssl
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from relaymap.core.exceptions import ConnectivityError, RelayTimeoutError
from relaymap.utils.transport import AiohttpConnection, AiohttpTransport


def _msg(msg_type: aiohttp.WSMsgType, data: object = None) -> SimpleNamespace:
    return SimpleNamespace(type=msg_type, data=data)


def _connection(*messages: SimpleNamespace) -> tuple[AiohttpConnection, AsyncMock, AsyncMock]:
    ws = AsyncMock()
    ws.receive = AsyncMock(side_effect=list(messages))
    ws.exception = MagicMock(return_value=None)
    session = AsyncMock()
    return AiohttpConnection(ws, session, close_timeout=0.1), ws, session


def _mock_session(ws: object = None, error: BaseException | None = None) -> MagicMock:
    session = MagicMock()
    session.ws_connect = AsyncMock(return_value=ws, side_effect=error)
    session.close = AsyncMock()
    return session


# =============================================================================
# AiohttpConnection Tests
# =============================================================================


class TestAiohttpConnectionSend:
    """AiohttpConnection.send()."""

    async def test_send_text(self):
        conn, ws, _ = _connection()
        await conn.send('["REQ","discover-1",{}]')
        ws.send_str.assert_awaited_once_with('["REQ","discover-1",{}]')

    async def test_client_error_mapped(self):
        conn, ws, _ = _connection()
        ws.send_str.side_effect = aiohttp.ClientConnectionError("reset")
        with pytest.raises(ConnectivityError, match="Send failed"):
            await conn.send("x")

    async def test_os_error_mapped(self):
        conn, ws, _ = _connection()
        ws.send_str.side_effect = ConnectionResetError("reset")
        with pytest.raises(ConnectivityError):
            await conn.send("x")


class TestAiohttpConnectionRecv:
    """AiohttpConnection.recv()."""

    async def test_text(self):
        conn, _, _ = _connection(_msg(aiohttp.WSMsgType.TEXT, '["EOSE","s"]'))
        assert await conn.recv() == '["EOSE","s"]'

    async def test_binary(self):
        conn, _, _ = _connection(_msg(aiohttp.WSMsgType.BINARY, b"\x00"))
        assert await conn.recv() == b"\x00"

    async def test_ping_pong_skipped(self):
        conn, _, _ = _connection(
            _msg(aiohttp.WSMsgType.PING),
            _msg(aiohttp.WSMsgType.PONG),
            _msg(aiohttp.WSMsgType.TEXT, "hello"),
        )
        assert await conn.recv() == "hello"

    @pytest.mark.parametrize(
        "msg_type",
        [
            aiohttp.WSMsgType.CLOSE,
            aiohttp.WSMsgType.CLOSING,
            aiohttp.WSMsgType.CLOSED,
            aiohttp.WSMsgType.ERROR,
        ],
    )
    async def test_terminal_frames_return_none(self, msg_type):
        conn, _, _ = _connection(_msg(msg_type))
        assert await conn.recv() is None


class TestAiohttpConnectionClose:
    """AiohttpConnection.close()."""

    async def test_closes_ws_and_session(self):
        conn, ws, session = _connection()
        await conn.close()

        ws.close.assert_awaited_once()
        session.close.assert_awaited_once()
        assert conn.closed is True

    async def test_idempotent(self):
        conn, ws, session = _connection()
        await conn.close()
        await conn.close()

        assert ws.close.await_count == 1
        assert session.close.await_count == 1

    async def test_ws_close_error_suppressed(self):
        conn, ws, session = _connection()
        ws.close.side_effect = aiohttp.ClientError("teardown")
        await conn.close()

        session.close.assert_awaited_once()

    async def test_hanging_close_bounded(self):
        conn, ws, session = _connection()

        async def hang():
            await asyncio.sleep(10)

        ws.close.side_effect = hang
        await asyncio.wait_for(conn.close(), timeout=2)

        session.close.assert_awaited_once()


# =============================================================================
# AiohttpTransport Tests
# =============================================================================


class TestAiohttpTransportSsl:
    """AiohttpTransport SSL context selection."""

    def test_verify_default(self):
        assert AiohttpTransport()._ssl_context() is True

    def test_insecure_context(self):
        ctx = AiohttpTransport(verify_ssl=False)._ssl_context()
        assert isinstance(ctx, ssl.SSLContext)
        assert ctx.check_hostname is False
        assert ctx.verify_mode == ssl.CERT_NONE


class TestAiohttpTransportConnect:
    """AiohttpTransport.connect()."""

    async def test_success(self):
        ws = AsyncMock()
        session = _mock_session(ws=ws)
        with (
            patch("relaymap.utils.transport.aiohttp.TCPConnector"),
            patch("relaymap.utils.transport.aiohttp.ClientSession", return_value=session),
        ):
            conn = await AiohttpTransport(max_msg_size=1024).connect("wss://nos.lol", 5.0)

        assert isinstance(conn, AiohttpConnection)
        args, kwargs = session.ws_connect.call_args
        assert args == ("wss://nos.lol",)
        assert kwargs["max_msg_size"] == 1024
        session.close.assert_not_awaited()

    async def test_timeout(self):
        session = _mock_session(error=TimeoutError())
        with (
            patch("relaymap.utils.transport.aiohttp.TCPConnector"),
            patch("relaymap.utils.transport.aiohttp.ClientSession", return_value=session),
            pytest.raises(RelayTimeoutError, match="wss://nos.lol"),
        ):
            await AiohttpTransport().connect("wss://nos.lol", 1.0)

        session.close.assert_awaited_once()

    @pytest.mark.parametrize(
        "error",
        [
            aiohttp.ClientConnectionError("refused"),
            ssl.SSLError("bad cert"),
            OSError("unreachable"),
            ValueError("bad url"),
        ],
    )
    async def test_failure_mapped(self, error):
        session = _mock_session(error=error)
        with (
            patch("relaymap.utils.transport.aiohttp.TCPConnector"),
            patch("relaymap.utils.transport.aiohttp.ClientSession", return_value=session),
            pytest.raises(ConnectivityError, match="Connection failed") as exc_info,
        ):
            await AiohttpTransport().connect("wss://nos.lol", 1.0)

        assert not isinstance(exc_info.value, RelayTimeoutError)
        assert exc_info.value.__cause__ is error
        session.close.assert_awaited_once()

    async def test_cancelled_closes_session(self):
        session = _mock_session(error=asyncio.CancelledError())
        with (
            patch("relaymap.utils.transport.aiohttp.TCPConnector"),
            patch("relaymap.utils.transport.aiohttp.ClientSession", return_value=session),
            pytest.raises(asyncio.CancelledError),
        ):
            await AiohttpTransport().connect("wss://nos.lol", 1.0)

        session.close.assert_awaited_once()

    async def test_connector_ssl_argument(self):
        session = _mock_session(ws=AsyncMock())
        with (
            patch("relaymap.utils.transport.aiohttp.TCPConnector") as connector,
            patch("relaymap.utils.transport.aiohttp.ClientSession", return_value=session),
        ):
            await AiohttpTransport(verify_ssl=False).connect("wss://nos.lol", 1.0)

        assert isinstance(connector.call_args.kwargs["ssl"], ssl.SSLContext)
