"""
SendMessage Command - persist a message and bump conversation activity.

Handler:
1. Load conversation from repo (404 if missing)
2. Verify sender is a participant (403)
3. Resolve sender user (404)
4. Validate content and save message
5. Touch conversation: last_message_at = message.created_at
6. Return message with resolved sender and conversation
"""

import logging
from dataclasses import dataclass
from relaychat.application.common.interfaces import Command, CommandHandler
from relaychat.domain.entities.conversation import Conversation
from relaychat.domain.entities.message import Message
from relaychat.domain.exceptions import AccessDeniedError, EntityNotFoundError
from relaychat.domain.ports.repositories import (
    ConversationRepository,
    MessageRepository,
    UserRepository,
)
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.participant import Participant
from relaychat.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass
class SendMessageResult:
    message: Message
    sender: Participant
    conversation: Conversation


@dataclass(frozen=True)
class SendMessageCommand(Command[SendMessageResult]):
    conversation_id: ConversationId
    sender_id: UserId
    content: str


class SendMessageHandler(CommandHandler[SendMessageResult]):
    def __init__(
        self,
        conv_repo: ConversationRepository,
        msg_repo: MessageRepository,
        user_repo: UserRepository,
        max_length: int,
    ):
        self._conv_repo = conv_repo
        self._msg_repo = msg_repo
        self._user_repo = user_repo
        self._max_length = max_length

    async def execute(self, command: SendMessageCommand) -> SendMessageResult:
        conversation = await self._conv_repo.get_by_id(command.conversation_id)
        if not conversation:
            raise EntityNotFoundError("Conversation not found.")

        if not conversation.has_participant(command.sender_id):
            raise AccessDeniedError("You are not a participant in this conversation.")

        sender = await self._user_repo.get_by_id(command.sender_id)
        if not sender:
            raise EntityNotFoundError("Sender not found.")

        message = Message.create(
            conversation_id=conversation.id,
            sender_id=sender.id,
            content=command.content,
            max_length=self._max_length,
        )
        message = await self._msg_repo.add(message)

        conversation.touch(message.created_at)
        await self._conv_repo.touch(conversation.id, message.created_at)

        logger.debug(
            f"[SendMessage] {message.id.value} stored in {conversation.id.value} "
            f"(seq={message.sequence})"
        )
        return SendMessageResult(
            message=message,
            sender=sender.to_participant(),
            conversation=conversation,
        )
