"""In-memory UserRepository implementation."""

import copy
from datetime import datetime
from typing import Optional

from relaychat.domain.entities.user import User
from relaychat.domain.exceptions import ConflictError
from relaychat.domain.ports.repositories import UserRepository
from relaychat.domain.value_objects.user_email import UserEmail
from relaychat.domain.value_objects.user_id import UserId
from relaychat.domain.value_objects.username import Username
from relaychat.infrastructure.persistence.memory.database import InMemoryDatabase


class InMemoryUserRepository(UserRepository):
    def __init__(self, db: InMemoryDatabase):
        self._db = db

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        user = self._db.users.get(user_id.value)
        return copy.deepcopy(user) if user else None

    async def get_by_email(self, email: UserEmail) -> Optional[User]:
        for user in self._db.users.values():
            if user.email == email:
                return copy.deepcopy(user)
        return None

    async def get_by_username(self, username: Username) -> Optional[User]:
        for user in self._db.users.values():
            if user.username == username:
                return copy.deepcopy(user)
        return None

    async def search(self, query: str, exclude_user_id: UserId) -> list[User]:
        needle = query.lower()
        return [
            copy.deepcopy(user)
            for user in self._db.users.values()
            if user.id != exclude_user_id
            and (
                needle in user.username.value.lower()
                or needle in user.email.value.lower()
            )
        ]

    async def add(self, user: User) -> None:
        async with self._db.lock:
            for existing in self._db.users.values():
                if existing.email == user.email or existing.username == user.username:
                    raise ConflictError("Username or email already exists")
            self._db.users[user.id.value] = copy.deepcopy(user)

    async def update_presence(
        self, user_id: UserId, is_online: bool, last_seen: datetime
    ) -> None:
        async with self._db.lock:
            user = self._db.users.get(user_id.value)
            if user is None:
                return
            user.is_online = is_online
            user.last_seen = last_seen
            user.updated_at = last_seen
