"""
Live chat WebSocket endpoint.

Handshake: token as `?token=` query parameter or `Authorization: Bearer`
header. Each inbound frame is handled in its own dishka REQUEST scope; the
LiveSession carries connection state between frames.

Close codes: 4401 bad/missing token, 4409 replaced by a newer connection.
"""

import asyncio
import logging
from typing import Any, Optional
from uuid import uuid4

from dishka import AsyncContainer
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from relaychat.application.realtime import (
    DeliveryRouter,
    LiveConnection,
    LiveSession,
)
from relaychat.application.realtime import events
from relaychat.config.logging_config import correlation_id_var
from relaychat.presentation.ws.protocol import (
    SendMessageData,
    TypingData,
    WsInbound,
    WsOutbound,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["live"])


class WebSocketConnection(LiveConnection):
    """LiveConnection over a Starlette WebSocket."""

    def __init__(self, websocket: WebSocket):
        self._ws = websocket
        self.connection_id = f"ws-{uuid4().hex[:12]}"
        # Pushes from other connections' handlers may run concurrently
        self._send_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._ws.application_state == WebSocketState.CONNECTED

    async def accept(self) -> None:
        await self._ws.accept()

    async def send(self, event: str, data: dict[str, Any]) -> None:
        async with self._send_lock:
            await self._ws.send_json(WsOutbound(event=event, data=data).model_dump())

    async def close(self, code: int, reason: str = "") -> None:
        async with self._send_lock:
            if self.is_open:
                await self._ws.close(code=code, reason=reason)


def _extract_token(websocket: WebSocket) -> Optional[str]:
    token = websocket.query_params.get("token")
    if token:
        return token
    authorization = websocket.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def _dispatch(
    delivery_router: DeliveryRouter, session: LiveSession, raw: Optional[str]
) -> None:
    if raw is None:
        await delivery_router.send_error(
            session, None, "Binary frames are not supported", "invalid_operation"
        )
        return
    try:
        frame = WsInbound.model_validate_json(raw)
        if frame.event == events.SEND_MESSAGE:
            data = SendMessageData.model_validate(frame.data)
            await delivery_router.send_message(
                session, data.conversation_id, data.content
            )
        elif frame.event == events.TYPING:
            data = TypingData.model_validate(frame.data)
            await delivery_router.typing(session, data.conversation_id)
        else:
            await delivery_router.send_error(
                session, None, f"Unknown event: {frame.event}", "invalid_operation"
            )
    except ValidationError as e:
        logger.info(f"[Live] Malformed frame on {session.connection.connection_id}")
        await delivery_router.send_error(
            session,
            None,
            f"Malformed frame: {e.error_count()} validation error(s)",
            "invalid_operation",
        )


@router.websocket("/ws")
async def chat_socket(websocket: WebSocket):
    container: AsyncContainer = websocket.app.state.dishka_container
    connection = WebSocketConnection(websocket)
    correlation_id_var.set(connection.connection_id)

    async with container() as request_container:
        delivery_router = await request_container.get(DeliveryRouter)
        session = await delivery_router.connect(connection, _extract_token(websocket))
    if not session.is_authenticated:
        return

    try:
        while connection.is_open:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(
                    message.get("code", 1000), message.get("reason")
                )
            async with container() as request_container:
                delivery_router = await request_container.get(DeliveryRouter)
                await _dispatch(delivery_router, session, message.get("text"))
    except WebSocketDisconnect:
        pass
    finally:
        async with container() as request_container:
            delivery_router = await request_container.get(DeliveryRouter)
            await delivery_router.disconnect(session)
