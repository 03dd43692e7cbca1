"""In-memory MessageRepository implementation."""

import copy

from relaychat.domain.entities.message import Message
from relaychat.domain.exceptions import EntityNotFoundError
from relaychat.domain.ports.repositories import MessageRepository
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.infrastructure.persistence.memory.database import InMemoryDatabase


class InMemoryMessageRepository(MessageRepository):
    def __init__(self, db: InMemoryDatabase):
        self._db = db

    async def add(self, message: Message) -> Message:
        async with self._db.lock:
            if message.conversation_id.value not in self._db.conversations:
                raise EntityNotFoundError("Conversation not found.")
            stored = copy.deepcopy(message)
            stored.sequence = self._db.next_sequence()
            self._db.messages.setdefault(message.conversation_id.value, []).append(
                stored
            )
            return copy.deepcopy(stored)

    async def get_by_conversation(
        self, conversation_id: ConversationId
    ) -> list[Message]:
        messages = self._db.messages.get(conversation_id.value, [])
        return sorted((copy.deepcopy(m) for m in messages), key=lambda m: m.sort_key)
