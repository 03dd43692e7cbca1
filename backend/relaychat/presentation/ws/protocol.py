"""WebSocket frame envelope models."""

from typing import Any, Optional

from pydantic import BaseModel

from relaychat.application.dto import CamelModel


class WsInbound(BaseModel):
    """Client → Server."""

    event: str  # sendMessage | typing
    data: dict[str, Any] = {}


class WsOutbound(BaseModel):
    """Server → Client."""

    event: str  # userStatus | newMessage | userTyping | messageError | sessionReplaced
    data: dict[str, Any] = {}


class SendMessageData(CamelModel):
    conversation_id: Optional[str] = None
    content: Optional[str] = None


class TypingData(CamelModel):
    conversation_id: Optional[str] = None
