"""
Message Entity - A single message in a conversation.

Messages are immutable once stored. `sequence` is assigned by storage and is
the tie-break for messages sharing the same created_at.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

from relaychat.domain.exceptions import DomainValidationError
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.message_id import MessageId
from relaychat.domain.value_objects.user_id import UserId


@dataclass
class Message:
    id: MessageId
    conversation_id: ConversationId
    sender_id: UserId
    content: str
    created_at: datetime
    is_read: bool = False
    sequence: int = 0

    @classmethod
    def create(
        cls,
        conversation_id: ConversationId,
        sender_id: UserId,
        content: str,
        max_length: int,
    ) -> Message:
        """Factory method to create a new Message with a generated ID and timestamp."""
        if not content or not content.strip():
            raise DomainValidationError("Message content cannot be empty.")
        if len(content) > max_length:
            raise DomainValidationError(
                f"Message content cannot exceed {max_length} characters."
            )
        return cls(
            id=MessageId(str(uuid4())),
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=content,
            created_at=datetime.now(timezone.utc),
        )

    @property
    def sort_key(self) -> tuple[datetime, int]:
        return (self.created_at, self.sequence)
