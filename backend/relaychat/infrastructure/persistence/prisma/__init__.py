"""
Prisma persistence (PostgreSQL).

Importing this package requires a generated Prisma client (`prisma generate`).
"""

from relaychat.infrastructure.persistence.prisma.user_repository import (
    PrismaUserRepository,
)
from relaychat.infrastructure.persistence.prisma.conversation_repository import (
    PrismaConversationRepository,
)
from relaychat.infrastructure.persistence.prisma.message_repository import (
    PrismaMessageRepository,
)

__all__ = [
    "PrismaUserRepository",
    "PrismaConversationRepository",
    "PrismaMessageRepository",
]
