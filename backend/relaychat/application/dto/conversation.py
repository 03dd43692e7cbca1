"""Conversation DTOs for API request/response."""

from datetime import datetime
from typing import Optional

from relaychat.application.dto.base import CamelModel
from relaychat.application.dto.user import ParticipantDTO
from relaychat.domain.entities.conversation import Conversation


class ConversationDTO(CamelModel):
    id: str
    participant1: ParticipantDTO
    participant2: ParticipantDTO
    last_message_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, conversation: Conversation) -> "ConversationDTO":
        return cls(
            id=conversation.id.value,
            participant1=ParticipantDTO.from_participant(conversation.participant1),
            participant2=ParticipantDTO.from_participant(conversation.participant2),
            last_message_at=conversation.last_message_at,
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
        )
