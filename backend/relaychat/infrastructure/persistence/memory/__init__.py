"""In-memory persistence (single process)."""

from relaychat.infrastructure.persistence.memory.database import InMemoryDatabase
from relaychat.infrastructure.persistence.memory.user_repository import (
    InMemoryUserRepository,
)
from relaychat.infrastructure.persistence.memory.conversation_repository import (
    InMemoryConversationRepository,
)
from relaychat.infrastructure.persistence.memory.message_repository import (
    InMemoryMessageRepository,
)

__all__ = [
    "InMemoryDatabase",
    "InMemoryUserRepository",
    "InMemoryConversationRepository",
    "InMemoryMessageRepository",
]
