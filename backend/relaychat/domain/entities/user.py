"""
User Entity - A registered chat user.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from relaychat.domain.value_objects.participant import Participant
from relaychat.domain.value_objects.user_email import UserEmail
from relaychat.domain.value_objects.user_id import UserId
from relaychat.domain.value_objects.username import Username


@dataclass
class User:
    # Required fields (no defaults) - must come first
    id: UserId
    username: Username
    email: UserEmail
    password_hash: str
    created_at: datetime
    updated_at: datetime
    # Optional fields (with defaults) - must come last
    is_online: bool = False
    last_seen: Optional[datetime] = None

    @classmethod
    def create(cls, username: Username, email: UserEmail, password_hash: str) -> User:
        """Factory method to create a new offline User with a generated ID."""
        now = datetime.now(timezone.utc)
        return cls(
            id=UserId(str(uuid4())),
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )

    def to_participant(self) -> Participant:
        return Participant(
            id=self.id,
            username=self.username.value,
            is_online=self.is_online,
            last_seen=self.last_seen,
        )
