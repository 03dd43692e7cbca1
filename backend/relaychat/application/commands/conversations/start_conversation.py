"""
Start Conversation Command - create-or-get the conversation for a user pair.

Lookup and insert are separate storage round-trips, so two concurrent starts
for the same pair can both miss the lookup. Storage rejects the second insert
with ConflictError (unique pair_key); the loser re-reads and returns the
winner's conversation instead of failing.
"""

import logging
from dataclasses import dataclass
from relaychat.application.common.interfaces import Command, CommandHandler
from relaychat.domain.entities.conversation import Conversation
from relaychat.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    InvalidOperationError,
)
from relaychat.domain.ports.repositories import (
    ConversationRepository,
    UserRepository,
)
from relaychat.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartConversationCommand(Command[Conversation]):
    user_id: UserId
    other_user_id: UserId


class StartConversationHandler(CommandHandler[Conversation]):
    def __init__(
        self,
        conversation_repository: ConversationRepository,
        user_repository: UserRepository,
        max_attempts: int = 3,
    ):
        self._conversation_repository = conversation_repository
        self._user_repository = user_repository
        self._max_attempts = max(1, max_attempts)

    async def execute(self, command: StartConversationCommand) -> Conversation:
        if command.user_id == command.other_user_id:
            raise InvalidOperationError("You cannot chat with yourself.")

        for attempt in range(1, self._max_attempts + 1):
            existing = await self._conversation_repository.get_by_participants(
                command.user_id, command.other_user_id
            )
            if existing:
                return existing

            user = await self._user_repository.get_by_id(command.user_id)
            other = await self._user_repository.get_by_id(command.other_user_id)
            if not user or not other:
                raise EntityNotFoundError("One or both users not found.")

            conversation = Conversation.create(
                participant1=user.to_participant(),
                participant2=other.to_participant(),
            )
            try:
                await self._conversation_repository.add(conversation)
            except ConflictError:
                logger.info(
                    f"[StartConversation] Pair {conversation.pair_key} created "
                    f"concurrently, re-reading (attempt {attempt}/{self._max_attempts})"
                )
                continue

            logger.info(
                f"[StartConversation] Created {conversation.id.value} "
                f"for pair {conversation.pair_key}"
            )
            return conversation

        # Every attempt lost the race and the winner is still not readable
        raise ConflictError("Conversation is being created, please retry.")
