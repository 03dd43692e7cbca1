"""
Live event names, close codes and payload builders.

Frames in both directions are JSON objects: {"event": <name>, "data": {...}}.
"""

from datetime import datetime
from typing import Any, Optional

from relaychat.application.commands.messages import SendMessageResult
from relaychat.domain.exceptions import (
    AccessDeniedError,
    ConflictError,
    DomainValidationError,
    EntityNotFoundError,
    InvalidOperationError,
    UnauthorizedError,
)
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.user_id import UserId

# client -> server
SEND_MESSAGE = "sendMessage"
TYPING = "typing"

# server -> client
USER_STATUS = "userStatus"
NEW_MESSAGE = "newMessage"
USER_TYPING = "userTyping"
MESSAGE_ERROR = "messageError"
SESSION_REPLACED = "sessionReplaced"

CLOSE_UNAUTHORIZED = 4401
CLOSE_SESSION_REPLACED = 4409

STATUS_ONLINE = "online"
STATUS_OFFLINE = "offline"

_ERROR_CODES: list[tuple[type[Exception], str]] = [
    (EntityNotFoundError, "not_found"),
    (AccessDeniedError, "forbidden"),
    (DomainValidationError, "invalid_argument"),
    (InvalidOperationError, "invalid_operation"),
    (ConflictError, "conflict"),
    (UnauthorizedError, "unauthorized"),
    (ValueError, "invalid_operation"),
]


def error_code_for(exc: Exception) -> str:
    for exc_type, code in _ERROR_CODES:
        if isinstance(exc, exc_type):
            return code
    return "internal_error"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def user_status_payload(
    user_id: UserId, status: str, last_seen: Optional[datetime] = None
) -> dict[str, Any]:
    payload: dict[str, Any] = {"userId": user_id.value, "status": status}
    if status == STATUS_OFFLINE:
        payload["lastSeen"] = _iso(last_seen)
    return payload


def new_message_payload(result: SendMessageResult) -> dict[str, Any]:
    message = result.message
    return {
        "id": message.id.value,
        "content": message.content,
        "conversationId": message.conversation_id.value,
        "sender": {
            "id": result.sender.id.value,
            "username": result.sender.username,
        },
        "createdAt": _iso(message.created_at),
    }


def user_typing_payload(
    from_user_id: UserId, conversation_id: ConversationId
) -> dict[str, Any]:
    return {"from": from_user_id.value, "conversationId": conversation_id.value}


def message_error_payload(
    conversation_id: Optional[str], error: str, code: str
) -> dict[str, Any]:
    return {"conversationId": conversation_id, "error": error, "code": code}
