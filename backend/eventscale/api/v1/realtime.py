"""Live dashboard updates over WebSocket.

A subscription lives exactly as long as the socket: it is registered after
the handshake and removed when the client goes away.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from eventscale.api.deps import resolve_caller
from eventscale.core.errors import AuthorizationFailure
from eventscale.core.permissions import Capability, ensure_capability
from eventscale.services.realtime import event_broker

logger = logging.getLogger(__name__)

router = APIRouter()


async def _forward(websocket: WebSocket, subscription) -> None:
    while True:
        message = await subscription.next_message()
        await websocket.send_json(message)


@router.websocket("/ws/events")
async def events_websocket(
    websocket: WebSocket,
    church_id: Optional[str] = None,
    role: Optional[str] = None,
):
    # Browsers cannot set headers on a WebSocket handshake, so context comes as query params
    try:
        caller = resolve_caller(church_id, role)
        ensure_capability(caller.role, Capability.VIEW_EVENTS)
    except AuthorizationFailure as e:
        logger.warning(f"Rejected realtime subscription: {e.detail}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    subscription = event_broker.subscribe(caller.church_id)
    await websocket.send_json({"type": "subscribed", "church_id": str(caller.church_id)})

    forward_task = asyncio.create_task(_forward(websocket, subscription))
    try:
        # Clients only listen; reading detects the disconnect
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info(f"Realtime subscriber {subscription.id} disconnected")
    finally:
        forward_task.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await forward_task
        event_broker.unsubscribe(subscription)
