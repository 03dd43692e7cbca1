"""
Prisma User Repository Implementation.

Mapping:
- Prisma model fields: id, username, email, password_hash, is_online,
  last_seen, created_at, updated_at
- Convert str -> UserId / Username / UserEmail when reading
"""

from datetime import datetime
from typing import Optional
from prisma import Prisma
from prisma.errors import UniqueViolationError
from prisma.models import User as PrismaUser
from relaychat.domain.entities.user import User
from relaychat.domain.exceptions import ConflictError
from relaychat.domain.ports.repositories import UserRepository
from relaychat.domain.value_objects.user_email import UserEmail
from relaychat.domain.value_objects.user_id import UserId
from relaychat.domain.value_objects.username import Username


def user_to_entity(record: PrismaUser) -> User:
    return User(
        id=UserId(record.id),
        username=Username(record.username),
        email=UserEmail(record.email),
        password_hash=record.password_hash,
        created_at=record.created_at,
        updated_at=record.updated_at,
        is_online=record.is_online,
        last_seen=record.last_seen,
    )


class PrismaUserRepository(UserRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        record = await self._prisma.user.find_unique(where={"id": user_id.value})
        return user_to_entity(record) if record else None

    async def get_by_email(self, email: UserEmail) -> Optional[User]:
        record = await self._prisma.user.find_unique(where={"email": email.value})
        return user_to_entity(record) if record else None

    async def get_by_username(self, username: Username) -> Optional[User]:
        record = await self._prisma.user.find_unique(
            where={"username": username.value}
        )
        return user_to_entity(record) if record else None

    async def search(self, query: str, exclude_user_id: UserId) -> list[User]:
        records = await self._prisma.user.find_many(
            where={
                "id": {"not": exclude_user_id.value},
                "OR": [
                    {"username": {"contains": query, "mode": "insensitive"}},
                    {"email": {"contains": query, "mode": "insensitive"}},
                ],
            }
        )
        return [user_to_entity(record) for record in records]

    async def add(self, user: User) -> None:
        try:
            await self._prisma.user.create(
                data={
                    "id": user.id.value,
                    "username": user.username.value,
                    "email": user.email.value,
                    "password_hash": user.password_hash,
                    "is_online": user.is_online,
                    "last_seen": user.last_seen,
                    "created_at": user.created_at,
                }
            )
        except UniqueViolationError as e:
            raise ConflictError("Username or email already exists") from e

    async def update_presence(
        self, user_id: UserId, is_online: bool, last_seen: datetime
    ) -> None:
        await self._prisma.user.update_many(
            where={"id": user_id.value},
            data={"is_online": is_online, "last_seen": last_seen},
        )
