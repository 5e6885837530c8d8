"""
tests.test_connection
~~~~~~~~~~~~~~~~~~~~~

WebSocketConnection outbox: ordering, failure handling, back-pressure.
"""
from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from chatrooms.services.connection import WebSocketConnection


def mock_websocket(send_side_effect=None) -> MagicMock:
    websocket = MagicMock()
    websocket.send_json = AsyncMock(side_effect=send_side_effect)
    return websocket


class TestWebSocketConnection:

    @pytest.mark.asyncio
    async def test_payloads_are_sent_in_order(self) -> None:
        websocket = mock_websocket()
        connection = WebSocketConnection(websocket)
        connection.start()

        connection.deliver({"type": "a"})
        connection.deliver({"type": "b"})
        await asyncio.wait_for(connection.drain(), timeout=1)

        assert [c.args[0] for c in websocket.send_json.call_args_list] == [
            {"type": "a"}, {"type": "b"},
        ]
        await connection.close()

    @pytest.mark.asyncio
    async def test_deliver_does_not_wait_for_slow_client(self) -> None:
        release = asyncio.Event()

        async def slow_send(payload: dict) -> None:
            await release.wait()

        websocket = mock_websocket(slow_send)
        connection = WebSocketConnection(websocket)
        connection.start()

        # Returns immediately even though the first send never completes
        connection.deliver({"type": "a"})
        connection.deliver({"type": "b"})

        release.set()
        await asyncio.wait_for(connection.drain(), timeout=1)
        assert websocket.send_json.await_count == 2
        await connection.close()

    @pytest.mark.asyncio
    async def test_send_failure_is_swallowed_and_closes(self) -> None:
        websocket = mock_websocket(RuntimeError("socket closed"))
        connection = WebSocketConnection(websocket)
        connection.start()

        connection.deliver({"type": "a"})
        connection.deliver({"type": "b"})
        await asyncio.wait_for(connection.drain(), timeout=1)

        assert connection.closed is True
        assert websocket.send_json.await_count == 1

        connection.deliver({"type": "c"})
        await asyncio.wait_for(connection.drain(), timeout=1)
        assert websocket.send_json.await_count == 1
        await connection.close()

    @pytest.mark.asyncio
    async def test_full_outbox_drops_payload(self) -> None:
        websocket = mock_websocket()
        connection = WebSocketConnection(websocket, max_pending=1)

        connection.deliver({"type": "a"})
        connection.deliver({"type": "b"})  # dropped, writer not started yet

        connection.start()
        await asyncio.wait_for(connection.drain(), timeout=1)

        assert [c.args[0] for c in websocket.send_json.call_args_list] == [{"type": "a"}]
        await connection.close()

    @pytest.mark.asyncio
    async def test_drain_after_close_returns_with_pending_payloads(self) -> None:
        never = asyncio.Event()

        async def stuck_send(payload: dict) -> None:
            await never.wait()

        connection = WebSocketConnection(mock_websocket(stuck_send))
        connection.start()
        connection.deliver({"type": "a"})
        connection.deliver({"type": "b"})
        await asyncio.sleep(0)

        await connection.close()

        await asyncio.wait_for(connection.drain(), timeout=1)

    @pytest.mark.asyncio
    async def test_close_stops_writer(self) -> None:
        connection = WebSocketConnection(mock_websocket())
        connection.start()

        await connection.close()
        connection.deliver({"type": "a"})

        assert connection.closed is True
