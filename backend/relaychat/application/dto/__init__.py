"""
DTOs - Data Transfer Objects

DTOs for transferring data between layers:
- user.py → ParticipantDTO, UserDTO
- conversation.py → ConversationDTO
- message.py → MessageDTO, SentMessageDTO

Note: These are different from domain entities.
DTOs are for API input/output, entities are for business logic.
"""

from relaychat.application.dto.base import CamelModel
from relaychat.application.dto.user import ParticipantDTO, UserDTO
from relaychat.application.dto.conversation import ConversationDTO
from relaychat.application.dto.message import MessageDTO, SentMessageDTO

__all__ = [
    "CamelModel",
    "ParticipantDTO",
    "UserDTO",
    "ConversationDTO",
    "MessageDTO",
    "SentMessageDTO",
]
