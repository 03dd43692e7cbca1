"""
Prisma Message Repository Implementation.

`seq` is an autoincrement column; it is the tie-break for messages stored
with the same created_at.
"""

from prisma import Prisma
from prisma.errors import ForeignKeyViolationError
from prisma.models import Message as PrismaMessage
from relaychat.domain.entities.message import Message
from relaychat.domain.exceptions import EntityNotFoundError
from relaychat.domain.ports.repositories.message_repository import MessageRepository
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.message_id import MessageId
from relaychat.domain.value_objects.user_id import UserId


class PrismaMessageRepository(MessageRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaMessage) -> Message:
        return Message(
            id=MessageId(record.id),
            conversation_id=ConversationId(record.conversation_id),
            sender_id=UserId(record.sender_id),
            content=record.content,
            created_at=record.created_at,
            is_read=record.is_read,
            sequence=record.seq,
        )

    async def add(self, message: Message) -> Message:
        try:
            record = await self._prisma.message.create(
                data={
                    "id": message.id.value,
                    "conversation_id": message.conversation_id.value,
                    "sender_id": message.sender_id.value,
                    "content": message.content,
                    "is_read": message.is_read,
                    "created_at": message.created_at,
                }
            )
        except ForeignKeyViolationError as e:
            raise EntityNotFoundError("Conversation or sender not found.") from e
        return self._to_entity(record)

    async def get_by_conversation(
        self, conversation_id: ConversationId
    ) -> list[Message]:
        records = await self._prisma.message.find_many(
            where={"conversation_id": conversation_id.value},
            order=[{"created_at": "asc"}, {"seq": "asc"}],
        )
        return [self._to_entity(r) for r in records]
