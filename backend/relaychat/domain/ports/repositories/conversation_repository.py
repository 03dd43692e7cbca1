"""
Conversation Repository Port - Interface for the conversation ledger storage.

Every read returns conversations with both participants resolved.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from relaychat.domain.entities.conversation import Conversation
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.user_id import UserId


class ConversationRepository(ABC):
    @abstractmethod
    async def get_by_id(
        self, conversation_id: ConversationId
    ) -> Optional[Conversation]: ...

    @abstractmethod
    async def get_by_participants(
        self, user_a: UserId, user_b: UserId
    ) -> Optional[Conversation]:
        """Lookup across both participant orders."""
        ...

    @abstractmethod
    async def list_for_user(self, user_id: UserId) -> list[Conversation]:
        """Conversations of the user not hidden by them, latest activity first."""
        ...

    @abstractmethod
    async def add(self, conversation: Conversation) -> None:
        """Insert a new conversation. Raises ConflictError if the pair already exists."""
        ...

    @abstractmethod
    async def touch(self, conversation_id: ConversationId, at: datetime) -> None:
        """
        Record message activity at `at`. last_message_at only moves forward,
        so sends saved out of order keep the latest time.
        """
        ...

    @abstractmethod
    async def hide_for(self, conversation_id: ConversationId, user_id: UserId) -> None:
        """
        Add `user_id` to the deleter set. Only ever adds: a concurrent touch or
        hide by the other participant never undoes it.
        """
        ...
