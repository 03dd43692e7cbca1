"""User DTOs for API request/response."""

from datetime import datetime
from typing import Optional

from relaychat.application.dto.base import CamelModel
from relaychat.domain.entities.user import User
from relaychat.domain.value_objects.participant import Participant


class ParticipantDTO(CamelModel):
    """Public profile fields, safe to show to other users."""

    id: str
    username: str
    is_online: bool = False
    last_seen: Optional[datetime] = None

    @classmethod
    def from_participant(cls, participant: Participant) -> "ParticipantDTO":
        return cls(
            id=participant.id.value,
            username=participant.username,
            is_online=participant.is_online,
            last_seen=participant.last_seen,
        )

    @classmethod
    def from_user(cls, user: User) -> "ParticipantDTO":
        return cls.from_participant(user.to_participant())


class UserDTO(ParticipantDTO):
    """The caller's own profile (never includes the password hash)."""

    email: str
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserDTO":
        return cls(
            id=user.id.value,
            username=user.username.value,
            email=user.email.value,
            is_online=user.is_online,
            last_seen=user.last_seen,
            created_at=user.created_at,
        )
