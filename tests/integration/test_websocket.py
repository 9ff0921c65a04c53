"""Integration tests for the order event websocket, driven at the ASGI level."""

from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace

import pytest

from orderdesk.main import app
from orderdesk.services.order_events import order_events


class FakeSocket:
    """ASGI receive/send pair standing in for a websocket client."""

    def __init__(self):
        self.incoming: asyncio.Queue = asyncio.Queue()
        self.sent: list[dict] = []

    async def receive(self):
        return await self.incoming.get()

    async def send(self, message):
        self.sent.append(message)

    async def wait_for(self, message_type: str) -> dict:
        for _ in range(200):
            for message in self.sent:
                if message["type"] == message_type:
                    return message
            await asyncio.sleep(0.005)
        raise AssertionError(f"no {message_type} message; got {self.sent}")


def _scope(headers: dict[str, str]) -> dict:
    return {
        "type": "websocket",
        "asgi": {"version": "3.0"},
        "scheme": "ws",
        "server": ("test", 80),
        "client": ("testclient", 50000),
        "root_path": "",
        "path": "/api/ws/orders",
        "raw_path": b"/api/ws/orders",
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "subprotocols": [],
    }


@pytest.mark.asyncio
async def test_websocket_rejects_missing_identity():
    socket = FakeSocket()
    await socket.incoming.put({"type": "websocket.connect"})

    await asyncio.wait_for(app(_scope({}), socket.receive, socket.send), timeout=2)

    close = await socket.wait_for("websocket.close")
    assert close["code"] == 4001


@pytest.mark.asyncio
async def test_websocket_forwards_events_and_unsubscribes_on_disconnect():
    socket = FakeSocket()
    await socket.incoming.put({"type": "websocket.connect"})
    session = asyncio.create_task(app(
        _scope({"X-Technician-Id": "T1", "X-Role": "tech"}), socket.receive, socket.send,
    ))

    await socket.wait_for("websocket.accept")
    for _ in range(200):
        if "T1" in order_events._subscribers:
            break
        await asyncio.sleep(0.005)

    order_events.publish("created", SimpleNamespace(id="O1", technician_id="T1", status="pending"))
    sent = await socket.wait_for("websocket.send")
    assert json.loads(sent["text"]) == {
        "event": "created", "order_id": "O1", "technician_id": "T1", "status": "pending",
    }

    # The client goes away while no event is pending for it.
    await socket.incoming.put({"type": "websocket.disconnect", "code": 1001})
    await asyncio.wait_for(session, timeout=2)

    assert "T1" not in order_events._subscribers
