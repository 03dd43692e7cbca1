"""
Message Repository Port - Interface for message persistence.
"""

from abc import ABC, abstractmethod

from relaychat.domain.entities.message import Message
from relaychat.domain.value_objects.conversation_id import ConversationId


class MessageRepository(ABC):
    @abstractmethod
    async def add(self, message: Message) -> Message:
        """Insert a message and return it with its storage sequence assigned."""
        ...

    @abstractmethod
    async def get_by_conversation(
        self, conversation_id: ConversationId
    ) -> list[Message]:
        """All messages of a conversation, oldest first."""
        ...
