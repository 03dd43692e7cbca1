"""Message DTOs for API request/response."""

from datetime import datetime

from relaychat.application.dto.base import CamelModel
from relaychat.application.dto.conversation import ConversationDTO
from relaychat.application.dto.user import ParticipantDTO
from relaychat.application.commands.messages import SendMessageResult
from relaychat.domain.entities.message import Message
from relaychat.domain.value_objects.participant import Participant


class MessageDTO(CamelModel):
    """DTO for message data returned to clients."""

    id: str
    conversation_id: str
    content: str
    is_read: bool = False
    created_at: datetime
    sender: ParticipantDTO

    @classmethod
    def from_entity(cls, message: Message, sender: Participant) -> "MessageDTO":
        return cls(
            id=message.id.value,
            conversation_id=message.conversation_id.value,
            content=message.content,
            is_read=message.is_read,
            created_at=message.created_at,
            sender=ParticipantDTO.from_participant(sender),
        )


class SentMessageDTO(MessageDTO):
    conversation: ConversationDTO

    @classmethod
    def from_result(cls, result: SendMessageResult) -> "SentMessageDTO":
        base = MessageDTO.from_entity(result.message, result.sender)
        return cls(
            **base.model_dump(),
            conversation=ConversationDTO.from_entity(result.conversation),
        )
