"""
Messages API Router - send a message without the live channel.

The stored message is also pushed to connected participants, same as a live
send, so clients see HTTP-sent messages in real time.
"""

from logging import getLogger
from fastapi import APIRouter, Depends, status
from dishka.integrations.fastapi import FromDishka, inject

from relaychat.application.commands.messages import (
    SendMessageCommand,
    SendMessageHandler,
)
from relaychat.application.dto import CamelModel, SentMessageDTO
from relaychat.application.realtime import DeliveryRouter
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.observability import MessageChannel, increment_message_sent
from relaychat.presentation.api.common import parse_id
from relaychat.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


class SendMessageRequest(CamelModel):
    conversation_id: str
    content: str


router = APIRouter(prefix="/messages", tags=["messages"])


@router.post(
    "",
    response_model=SentMessageDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def send_message(
    body: SendMessageRequest,
    handler: FromDishka[SendMessageHandler],
    delivery_router: FromDishka[DeliveryRouter],
    current_user: AuthUser = Depends(get_current_user),
):
    result = await handler.execute(
        SendMessageCommand(
            conversation_id=parse_id(
                ConversationId, body.conversation_id, "conversation id"
            ),
            sender_id=current_user.user_id,
            content=body.content,
        )
    )
    increment_message_sent(MessageChannel.HTTP)
    await delivery_router.publish_message(result)
    return SentMessageDTO.from_result(result)
