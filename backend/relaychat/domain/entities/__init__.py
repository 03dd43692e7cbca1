"""
ENTITIES - Business objects with identity

Each entity:
- Has a unique identifier
- Has behavior (methods)
- Can change state over time
- Pure Python dataclasses (no ORM, no Pydantic)
"""

from relaychat.domain.entities.conversation import Conversation, pair_key_for
from relaychat.domain.entities.message import Message
from relaychat.domain.entities.user import User

__all__ = [
    "Conversation",
    "Message",
    "User",
    "pair_key_for",
]
