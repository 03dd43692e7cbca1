"""
Prisma Conversation Repository Implementation.

Every query includes both participants so conversations are always returned
with resolved Participant snapshots. The unique `pair_key` column turns a lost
create race into UniqueViolationError, mapped to ConflictError.
"""

from datetime import datetime, timezone
from typing import Optional
from prisma import Prisma
from prisma.errors import UniqueViolationError
from prisma.models import Conversation as PrismaConversation
from relaychat.domain.entities.conversation import Conversation, pair_key_for
from relaychat.domain.exceptions import ConflictError, EntityNotFoundError
from relaychat.domain.ports.repositories import ConversationRepository
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.user_id import UserId
from relaychat.infrastructure.persistence.prisma.user_repository import user_to_entity

_INCLUDE_PARTICIPANTS = {"participant1": True, "participant2": True}
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class PrismaConversationRepository(ConversationRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaConversation) -> Conversation:
        """Map Prisma record (with participants included) to domain entity."""
        return Conversation(
            id=ConversationId(record.id),
            participant1=user_to_entity(record.participant1).to_participant(),
            participant2=user_to_entity(record.participant2).to_participant(),
            created_at=record.created_at,
            updated_at=record.updated_at,
            last_message_at=record.last_message_at,
            deleted_by={UserId(user_id) for user_id in record.deleted_by},
        )

    async def get_by_id(
        self, conversation_id: ConversationId
    ) -> Optional[Conversation]:
        record = await self._prisma.conversation.find_unique(
            where={"id": conversation_id.value},
            include=_INCLUDE_PARTICIPANTS,
        )
        return self._to_entity(record) if record else None

    async def get_by_participants(
        self, user_a: UserId, user_b: UserId
    ) -> Optional[Conversation]:
        record = await self._prisma.conversation.find_unique(
            where={"pair_key": pair_key_for(user_a, user_b)},
            include=_INCLUDE_PARTICIPANTS,
        )
        return self._to_entity(record) if record else None

    async def list_for_user(self, user_id: UserId) -> list[Conversation]:
        records = await self._prisma.conversation.find_many(
            where={
                "OR": [
                    {"participant1_id": user_id.value},
                    {"participant2_id": user_id.value},
                ],
                "NOT": [{"deleted_by": {"has": user_id.value}}],
            },
            include=_INCLUDE_PARTICIPANTS,
        )
        conversations = [self._to_entity(record) for record in records]
        # Conversations without messages sort after those with messages
        conversations.sort(
            key=lambda c: (c.last_message_at or _EPOCH, c.created_at),
            reverse=True,
        )
        return conversations

    async def add(self, conversation: Conversation) -> None:
        try:
            await self._prisma.conversation.create(
                data={
                    "id": conversation.id.value,
                    "participant1_id": conversation.participant1.id.value,
                    "participant2_id": conversation.participant2.id.value,
                    "pair_key": conversation.pair_key,
                    "last_message_at": conversation.last_message_at,
                    "created_at": conversation.created_at,
                }
            )
        except UniqueViolationError as e:
            raise ConflictError("Conversation already exists for this pair") from e

    async def _ensure_exists(self, conversation_id: ConversationId) -> None:
        found = await self._prisma.conversation.find_unique(
            where={"id": conversation_id.value}
        )
        if found is None:
            raise EntityNotFoundError("Conversation not found.")

    async def touch(self, conversation_id: ConversationId, at: datetime) -> None:
        # Conditional update: a send that commits late never moves it backwards
        count = await self._prisma.conversation.update_many(
            where={
                "id": conversation_id.value,
                "OR": [
                    {"last_message_at": None},
                    {"last_message_at": {"lt": at}},
                ],
            },
            data={"last_message_at": at},
        )
        if count == 0:
            await self._ensure_exists(conversation_id)

    async def hide_for(self, conversation_id: ConversationId, user_id: UserId) -> None:
        # Appends in place; never rewrites the list
        count = await self._prisma.conversation.update_many(
            where={
                "id": conversation_id.value,
                "NOT": [{"deleted_by": {"has": user_id.value}}],
            },
            data={"deleted_by": {"push": [user_id.value]}},
        )
        if count == 0:
            await self._ensure_exists(conversation_id)
