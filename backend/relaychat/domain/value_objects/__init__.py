"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass)
- Validates itself on creation
- Pure Python (no framework dependencies)
"""

from relaychat.domain.value_objects.user_id import UserId
from relaychat.domain.value_objects.user_email import UserEmail
from relaychat.domain.value_objects.username import Username
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.message_id import MessageId
from relaychat.domain.value_objects.participant import Participant

__all__ = [
    "UserId",
    "UserEmail",
    "Username",
    "ConversationId",
    "MessageId",
    "Participant",
]
