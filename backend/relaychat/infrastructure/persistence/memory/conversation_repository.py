"""
In-memory ConversationRepository implementation.

Participants are re-resolved from the users table on every read, so the
returned snapshots carry current presence.
"""

import copy
from datetime import datetime, timezone
from typing import Optional

from relaychat.domain.entities.conversation import Conversation, pair_key_for
from relaychat.domain.exceptions import ConflictError, EntityNotFoundError
from relaychat.domain.ports.repositories import ConversationRepository
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.participant import Participant
from relaychat.domain.value_objects.user_id import UserId
from relaychat.infrastructure.persistence.memory.database import InMemoryDatabase

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryConversationRepository(ConversationRepository):
    def __init__(self, db: InMemoryDatabase):
        self._db = db

    def _resolve(self, participant: Participant) -> Participant:
        user = self._db.users.get(participant.id.value)
        return user.to_participant() if user else participant

    def _to_entity(self, record: Conversation) -> Conversation:
        conversation = copy.deepcopy(record)
        conversation.participant1 = self._resolve(record.participant1)
        conversation.participant2 = self._resolve(record.participant2)
        return conversation

    async def get_by_id(
        self, conversation_id: ConversationId
    ) -> Optional[Conversation]:
        record = self._db.conversations.get(conversation_id.value)
        return self._to_entity(record) if record else None

    async def get_by_participants(
        self, user_a: UserId, user_b: UserId
    ) -> Optional[Conversation]:
        conversation_id = self._db.pair_index.get(pair_key_for(user_a, user_b))
        if conversation_id is None:
            return None
        return self._to_entity(self._db.conversations[conversation_id])

    async def list_for_user(self, user_id: UserId) -> list[Conversation]:
        records = [
            record
            for record in self._db.conversations.values()
            if record.has_participant(user_id) and not record.is_hidden_for(user_id)
        ]
        # Conversations without messages sort after those with messages
        records.sort(
            key=lambda c: (c.last_message_at or _EPOCH, c.created_at),
            reverse=True,
        )
        return [self._to_entity(record) for record in records]

    async def add(self, conversation: Conversation) -> None:
        async with self._db.lock:
            if conversation.pair_key in self._db.pair_index:
                raise ConflictError("Conversation already exists for this pair")
            if conversation.id.value in self._db.conversations:
                raise ConflictError("Conversation id already exists")
            self._db.conversations[conversation.id.value] = copy.deepcopy(conversation)
            self._db.pair_index[conversation.pair_key] = conversation.id.value
            self._db.messages.setdefault(conversation.id.value, [])

    async def touch(self, conversation_id: ConversationId, at: datetime) -> None:
        async with self._db.lock:
            record = self._db.conversations.get(conversation_id.value)
            if record is None:
                raise EntityNotFoundError("Conversation not found.")
            # Concurrent sends may land out of order; keep the latest activity
            if record.last_message_at is None or at > record.last_message_at:
                record.last_message_at = at
            record.updated_at = max(record.updated_at, at)

    async def hide_for(self, conversation_id: ConversationId, user_id: UserId) -> None:
        async with self._db.lock:
            record = self._db.conversations.get(conversation_id.value)
            if record is None:
                raise EntityNotFoundError("Conversation not found.")
            record.deleted_by.add(user_id)
            record.updated_at = datetime.now(timezone.utc)
