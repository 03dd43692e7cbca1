"""
Conversation Entity - A durable two-party messaging thread.

Invariants:
- participant1 and participant2 are always distinct users
- pair_key is the same for (A, B) and (B, A); storage keeps it unique
- deleted_by holds at most the two participant ids (per-user soft delete)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from relaychat.domain.exceptions import AccessDeniedError, InvalidOperationError
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.participant import Participant
from relaychat.domain.value_objects.user_id import UserId


def pair_key_for(user_a: UserId, user_b: UserId) -> str:
    """Order-independent key identifying an unordered participant pair."""
    low, high = sorted((user_a.value, user_b.value))
    return f"{low}:{high}"


@dataclass
class Conversation:
    id: ConversationId
    participant1: Participant
    participant2: Participant
    created_at: datetime
    updated_at: datetime
    last_message_at: Optional[datetime] = None
    deleted_by: set[UserId] = field(default_factory=set)

    def __post_init__(self):
        if self.participant1.id == self.participant2.id:
            raise InvalidOperationError("You cannot chat with yourself.")

    @classmethod
    def create(cls, participant1: Participant, participant2: Participant) -> Conversation:
        now = datetime.now(timezone.utc)
        return cls(
            id=ConversationId(str(uuid4())),
            participant1=participant1,
            participant2=participant2,
            created_at=now,
            updated_at=now,
        )

    @property
    def pair_key(self) -> str:
        return pair_key_for(self.participant1.id, self.participant2.id)

    @property
    def participant_ids(self) -> tuple[UserId, UserId]:
        return (self.participant1.id, self.participant2.id)

    def has_participant(self, user_id: UserId) -> bool:
        return user_id in self.participant_ids

    def participant(self, user_id: UserId) -> Participant:
        if self.participant1.id == user_id:
            return self.participant1
        if self.participant2.id == user_id:
            return self.participant2
        raise AccessDeniedError("You are not a participant in this conversation.")

    def other_participant(self, user_id: UserId) -> Participant:
        """Return the participant that is not `user_id`."""
        if self.participant1.id == user_id:
            return self.participant2
        if self.participant2.id == user_id:
            return self.participant1
        raise AccessDeniedError("You are not a participant in this conversation.")

    def is_hidden_for(self, user_id: UserId) -> bool:
        return user_id in self.deleted_by

    def soft_delete_for(self, user_id: UserId) -> None:
        if not self.has_participant(user_id):
            raise AccessDeniedError("Not part of this conversation")
        self.deleted_by.add(user_id)
        self.updated_at = datetime.now(timezone.utc)

    def touch(self, at: datetime) -> None:
        """Record activity: a message was stored at `at`."""
        self.last_message_at = at
        self.updated_at = at
