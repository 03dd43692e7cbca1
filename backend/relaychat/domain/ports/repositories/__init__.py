"""
REPOSITORY PORTS - Data persistence interfaces

Each repository port:
- Is an abstract base class (ABC)
- Defines methods the domain needs
- Does NOT specify implementation (in-memory, Prisma, ...)

Infrastructure layer provides implementations.
"""

from relaychat.domain.ports.repositories.conversation_repository import ConversationRepository
from relaychat.domain.ports.repositories.message_repository import MessageRepository
from relaychat.domain.ports.repositories.user_repository import UserRepository

__all__ = [
    "ConversationRepository",
    "MessageRepository",
    "UserRepository",
]
