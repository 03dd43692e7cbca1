"""Users API Router - caller profile and user search."""

from fastapi import APIRouter, Depends, Query
from dishka.integrations.fastapi import FromDishka, inject

from relaychat.application.dto import ParticipantDTO, UserDTO
from relaychat.application.queries.users import (
    GetUserProfileHandler,
    GetUserProfileQuery,
    SearchUsersHandler,
    SearchUsersQuery,
)
from relaychat.presentation.dependencies.auth import AuthUser, get_current_user

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserDTO)
@inject
async def get_me(
    handler: FromDishka[GetUserProfileHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    user = await handler.execute(GetUserProfileQuery(user_id=current_user.user_id))
    return UserDTO.from_user(user)


@router.get("/search", response_model=list[ParticipantDTO])
@inject
async def search_users(
    handler: FromDishka[SearchUsersHandler],
    query: str = Query(default=""),
    current_user: AuthUser = Depends(get_current_user),
):
    """Case-insensitive match on username or email; the caller is excluded."""
    users = await handler.execute(
        SearchUsersQuery(query=query, current_user_id=current_user.user_id)
    )
    return [ParticipantDTO.from_user(user) for user in users]
