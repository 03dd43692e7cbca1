"""
Prisma persistence provider (PostgreSQL).

Imported only when STORAGE_BACKEND=prisma: `prisma` needs a generated client.
"""

from typing import AsyncIterator

from dishka import Provider, Scope, provide
from prisma import Prisma

from relaychat.domain.ports.repositories import (
    ConversationRepository,
    MessageRepository,
    UserRepository,
)
from relaychat.infrastructure.persistence.prisma import (
    PrismaConversationRepository,
    PrismaMessageRepository,
    PrismaUserRepository,
)


class PrismaPersistenceProvider(Provider):
    @provide(scope=Scope.APP)
    async def get_prisma(self) -> AsyncIterator[Prisma]:
        """
        Provide Prisma client (singleton, app-scoped).

        - Scope.APP = connected ONCE when first needed, shared across requests
        - disconnected when the container closes
        """
        prisma = Prisma()
        await prisma.connect()
        yield prisma
        await prisma.disconnect()

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, prisma: Prisma) -> UserRepository:
        return PrismaUserRepository(prisma)

    @provide(scope=Scope.REQUEST)
    def get_conversation_repository(self, prisma: Prisma) -> ConversationRepository:
        return PrismaConversationRepository(prisma)

    @provide(scope=Scope.REQUEST)
    def get_message_repository(self, prisma: Prisma) -> MessageRepository:
        return PrismaMessageRepository(prisma)
