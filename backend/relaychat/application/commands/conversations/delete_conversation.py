"""Delete Conversation Command - hide a conversation for one participant."""

import logging
from dataclasses import dataclass
from relaychat.domain.exceptions.entity_not_found import EntityNotFoundError
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.user_id import UserId
from relaychat.domain.ports.repositories import ConversationRepository
from relaychat.application.common.interfaces import Command, CommandHandler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteConversationCommand(Command[bool]):
    conversation_id: ConversationId
    user_id: UserId


class DeleteConversationHandler(CommandHandler[bool]):
    def __init__(self, conversation_repository: ConversationRepository):
        self._conversation_repository = conversation_repository

    async def execute(self, command: DeleteConversationCommand) -> bool:
        conversation = await self._conversation_repository.get_by_id(
            command.conversation_id
        )
        if not conversation:
            raise EntityNotFoundError("Conversation not found")

        # Raises AccessDeniedError for non-participants
        conversation.soft_delete_for(command.user_id)
        await self._conversation_repository.hide_for(
            conversation.id, command.user_id
        )

        logger.info(
            f"[DeleteConversation] {command.conversation_id.value} hidden for "
            f"{command.user_id.value}"
        )
        return True
