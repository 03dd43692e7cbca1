"""
User Repository Port - Interface for the identity directory.
Implementations:
- relaychat/infrastructure/persistence/memory/user_repository.py
- relaychat/infrastructure/persistence/prisma/user_repository.py
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from relaychat.domain.entities.user import User
from relaychat.domain.value_objects.user_email import UserEmail
from relaychat.domain.value_objects.user_id import UserId
from relaychat.domain.value_objects.username import Username


class UserRepository(ABC):
    @abstractmethod
    async def get_by_id(self, user_id: UserId) -> Optional[User]: ...

    @abstractmethod
    async def get_by_email(self, email: UserEmail) -> Optional[User]: ...

    @abstractmethod
    async def get_by_username(self, username: Username) -> Optional[User]: ...

    @abstractmethod
    async def search(self, query: str, exclude_user_id: UserId) -> list[User]:
        """Case-insensitive substring match on username or email, caller excluded."""
        ...

    @abstractmethod
    async def add(self, user: User) -> None:
        """Persist a new user. Raises ConflictError if username or email is taken."""
        ...

    @abstractmethod
    async def update_presence(
        self, user_id: UserId, is_online: bool, last_seen: datetime
    ) -> None: ...
