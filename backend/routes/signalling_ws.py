from __future__ import annotations

import asyncio
import logging
import uuid
from contextlib import suppress
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from services.store import connection_hub, signalling

router = APIRouter(tags=["signalling"])
logger = logging.getLogger(__name__)


async def _drain_outbox(
    websocket: WebSocket,
    outbox: asyncio.Queue[dict[str, Any]],
    connection_id: str,
) -> None:
    try:
        while True:
            payload = await outbox.get()
            if websocket.client_state is not WebSocketState.CONNECTED:
                return
            try:
                await websocket.send_json(payload)
            except Exception as e:  # noqa: BLE001
                # Peer vanished between the state change and this push; the
                # receive loop will see the disconnect and reconcile the session.
                logger.warning("[signalling_ws] send failed connection=%s: %s", connection_id, e)
                return
    finally:
        # Later pushes to this connection are dropped quietly instead of filling the outbox.
        connection_hub.close(connection_id)


@router.websocket("/ws")
async def ws_signalling(websocket: WebSocket) -> None:
    """
    Signalling channel shared by hosts and controllers.

    Inbound frames are JSON objects with a ``type`` of create_session, join,
    ready or dir; anything else is ignored. Pushes back to this connection
    arrive in the order the state machine produced them.
    """
    try:
        await websocket.accept()
    except Exception as e:  # noqa: BLE001
        logger.warning("[signalling_ws] accept() failed: %s", e)
        return

    connection_id = uuid.uuid4().hex
    outbox = connection_hub.open(connection_id)
    writer = asyncio.create_task(_drain_outbox(websocket, outbox, connection_id))
    logger.info("[signalling_ws] Connection opened id=%s", connection_id)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            connection_hub.deliver(signalling.handle_raw(connection_id, raw))
    except WebSocketDisconnect:
        pass
    finally:
        connection_hub.close(connection_id)
        connection_hub.deliver(signalling.disconnect(connection_id))
        writer.cancel()
        with suppress(asyncio.CancelledError):
            await writer
        logger.info("[signalling_ws] Connection closed id=%s", connection_id)
