"""Get User Profile Query."""

from dataclasses import dataclass
from relaychat.application.common.interfaces import Query, QueryHandler
from relaychat.domain.entities.user import User
from relaychat.domain.exceptions import EntityNotFoundError
from relaychat.domain.ports.repositories import UserRepository
from relaychat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class GetUserProfileQuery(Query[User]):
    user_id: UserId


class GetUserProfileHandler(QueryHandler[User]):
    def __init__(self, user_repository: UserRepository):
        self._user_repository = user_repository

    async def execute(self, query: GetUserProfileQuery) -> User:
        user = await self._user_repository.get_by_id(query.user_id)
        if not user:
            raise EntityNotFoundError(f"User {query.user_id.value} not found")
        return user
