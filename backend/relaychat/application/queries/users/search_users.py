"""Search Users Query."""

from dataclasses import dataclass
from relaychat.application.common.interfaces import Query, QueryHandler
from relaychat.domain.entities.user import User
from relaychat.domain.ports.repositories import UserRepository
from relaychat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class SearchUsersQuery(Query[list[User]]):
    query: str
    current_user_id: UserId


class SearchUsersHandler(QueryHandler[list[User]]):
    def __init__(self, user_repository: UserRepository):
        self._user_repository = user_repository

    async def execute(self, query: SearchUsersQuery) -> list[User]:
        term = (query.query or "").strip()
        return await self._user_repository.search(term, query.current_user_id)
