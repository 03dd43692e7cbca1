"""
Conversations API Router - the conversation ledger over HTTP.

Flow:
  HTTP Request → Router → Command/Query → Handler → Repository
                                 ↓
  HTTP Response ← Router ← DTO ←
"""

from logging import getLogger
from fastapi import APIRouter, Depends, status
from dishka.integrations.fastapi import FromDishka, inject

from relaychat.application.commands.conversations import (
    DeleteConversationCommand,
    DeleteConversationHandler,
    StartConversationCommand,
    StartConversationHandler,
)
from relaychat.application.dto import CamelModel, ConversationDTO, MessageDTO
from relaychat.application.queries.conversations import (
    ListConversationsHandler,
    ListConversationsQuery,
)
from relaychat.application.queries.messages import (
    ListMessagesHandler,
    ListMessagesQuery,
)
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.user_id import UserId
from relaychat.presentation.api.common import parse_id
from relaychat.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


# ==================== REQUEST/RESPONSE MODELS ====================


class StartConversationRequest(CamelModel):
    user_id: str


class DeleteConversationResponse(CamelModel):
    success: bool


# ==================== ROUTER ====================

router = APIRouter(prefix="/conversations", tags=["conversations"])


# ==================== ENDPOINTS ====================


@router.post("/start", response_model=ConversationDTO)
@inject
async def start_conversation(
    body: StartConversationRequest,
    handler: FromDishka[StartConversationHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Return the conversation with `userId`, creating it on first contact."""
    conversation = await handler.execute(
        StartConversationCommand(
            user_id=current_user.user_id,
            other_user_id=parse_id(UserId, body.user_id, "user id"),
        )
    )
    return ConversationDTO.from_entity(conversation)


@router.get("", response_model=list[ConversationDTO])
@inject
async def list_conversations(
    handler: FromDishka[ListConversationsHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Conversations not hidden by the caller, most recent activity first."""
    conversations = await handler.execute(
        ListConversationsQuery(user_id=current_user.user_id)
    )
    return [ConversationDTO.from_entity(c) for c in conversations]


@router.delete(
    "/{conversation_id}",
    response_model=DeleteConversationResponse,
    status_code=status.HTTP_200_OK,
)
@inject
async def delete_conversation(
    conversation_id: str,
    handler: FromDishka[DeleteConversationHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Hide the conversation for the caller only."""
    success = await handler.execute(
        DeleteConversationCommand(
            conversation_id=parse_id(ConversationId, conversation_id, "conversation id"),
            user_id=current_user.user_id,
        )
    )
    return DeleteConversationResponse(success=success)


@router.get("/{conversation_id}/messages", response_model=list[MessageDTO])
@inject
async def list_messages(
    conversation_id: str,
    handler: FromDishka[ListMessagesHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    result = await handler.execute(
        ListMessagesQuery(
            conversation_id=parse_id(ConversationId, conversation_id, "conversation id"),
            user_id=current_user.user_id,
        )
    )
    return [MessageDTO.from_entity(m, result.sender_of(m)) for m in result.messages]
