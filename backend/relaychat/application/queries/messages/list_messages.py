"""
ListMessages Query - conversation history for a participant.

Senders are resolved from the conversation's participant snapshots, which are
loaded together with the conversation.
"""

from dataclasses import dataclass

from relaychat.application.common.interfaces import Query, QueryHandler
from relaychat.domain.entities.conversation import Conversation
from relaychat.domain.entities.message import Message
from relaychat.domain.exceptions import AccessDeniedError, EntityNotFoundError
from relaychat.domain.ports.repositories import ConversationRepository, MessageRepository
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.participant import Participant
from relaychat.domain.value_objects.user_id import UserId


@dataclass
class ListMessagesResult:
    """Result containing conversation metadata and ordered messages."""

    conversation: Conversation
    messages: list[Message]

    def sender_of(self, message: Message) -> Participant:
        return self.conversation.participant(message.sender_id)


@dataclass(frozen=True)
class ListMessagesQuery(Query[ListMessagesResult]):
    conversation_id: ConversationId
    user_id: UserId


class ListMessagesHandler(QueryHandler[ListMessagesResult]):
    def __init__(
        self,
        conv_repo: ConversationRepository,
        msg_repo: MessageRepository,
    ):
        self._conv_repo = conv_repo
        self._msg_repo = msg_repo

    async def execute(self, query: ListMessagesQuery) -> ListMessagesResult:
        """
        Raises:
            EntityNotFoundError: If conversation doesn't exist
            AccessDeniedError: If user is not a participant
        """
        conversation = await self._conv_repo.get_by_id(query.conversation_id)
        if not conversation:
            raise EntityNotFoundError("Conversation not found.")

        if not conversation.has_participant(query.user_id):
            raise AccessDeniedError("You are not a participant in this conversation.")

        messages = await self._msg_repo.get_by_conversation(query.conversation_id)
        messages.sort(key=lambda m: m.sort_key)

        return ListMessagesResult(conversation=conversation, messages=messages)
