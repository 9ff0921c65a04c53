from __future__ import annotations

import asyncio
import json

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect

from orderdesk.services.auth import actor_from_headers
from orderdesk.services.order_events import order_events

router = APIRouter(tags=["websocket"])


async def _forward(websocket: WebSocket, queue: asyncio.Queue):
    while True:
        message = await queue.get()
        await websocket.send_text(json.dumps(message))


async def _receive_until_disconnect(websocket: WebSocket):
    # Client messages carry nothing; reading is how a disconnect surfaces.
    while True:
        await websocket.receive_text()


@router.websocket("/api/ws/orders")
async def order_events_endpoint(websocket: WebSocket):
    try:
        actor = actor_from_headers(websocket.headers)
    except HTTPException:
        await websocket.close(code=4001, reason="Unauthorized")
        return

    await websocket.accept()
    # Admins follow every order; technicians only their own.
    queue = order_events.subscribe(None if actor.is_admin else actor.technician_id)
    sender = asyncio.create_task(_forward(websocket, queue))
    receiver = asyncio.create_task(_receive_until_disconnect(websocket))
    try:
        done, _ = await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        sender.cancel()
        receiver.cancel()
        order_events.unsubscribe(queue)

    for task in done:
        exc = task.exception()
        if exc is not None and not isinstance(exc, WebSocketDisconnect):
            raise exc
