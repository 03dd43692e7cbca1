"""User (identity directory) queries."""

from relaychat.application.queries.users.search_users import (
    SearchUsersQuery,
    SearchUsersHandler,
)
from relaychat.application.queries.users.get_user_profile import (
    GetUserProfileQuery,
    GetUserProfileHandler,
)

__all__ = [
    "SearchUsersQuery",
    "SearchUsersHandler",
    "GetUserProfileQuery",
    "GetUserProfileHandler",
]
