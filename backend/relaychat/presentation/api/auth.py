"""
Auth API Router - registration and login.

Both endpoints are rate limited per client address (Config.AUTH_RATE_LIMIT).
"""

from logging import getLogger
from fastapi import APIRouter, Request, status
from dishka.integrations.fastapi import FromDishka, inject

from relaychat.application.commands.users import (
    LoginCommand,
    LoginHandler,
    RegisterUserCommand,
    RegisterUserHandler,
)
from relaychat.application.dto import CamelModel, UserDTO
from relaychat.config.settings import Config
from relaychat.domain.exceptions import DomainValidationError, UnauthorizedError
from relaychat.domain.value_objects.user_email import UserEmail
from relaychat.domain.value_objects.username import Username
from relaychat.presentation.api.rate_limit import limiter

logger = getLogger(__name__)


# ==================== REQUEST/RESPONSE MODELS ====================


class RegisterRequest(CamelModel):
    username: str
    email: str
    password: str


class LoginRequest(CamelModel):
    email: str
    password: str


class LoginResponse(CamelModel):
    user: UserDTO
    access_token: str


# ==================== ROUTER ====================

router = APIRouter(prefix="/auth", tags=["auth"])


# ==================== ENDPOINTS ====================


@router.post(
    "/register",
    response_model=UserDTO,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(Config.AUTH_RATE_LIMIT)
@inject
async def register(
    request: Request,
    body: RegisterRequest,
    handler: FromDishka[RegisterUserHandler],
):
    """Create an account. Returns the profile without the password hash."""
    try:
        username = Username(body.username.strip())
        email = UserEmail(body.email)
    except ValueError as e:
        raise DomainValidationError(str(e))

    user = await handler.execute(
        RegisterUserCommand(username=username, email=email, password=body.password)
    )
    return UserDTO.from_user(user)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(Config.AUTH_RATE_LIMIT)
@inject
async def login(
    request: Request,
    body: LoginRequest,
    handler: FromDishka[LoginHandler],
):
    try:
        email = UserEmail(body.email)
    except ValueError:
        raise UnauthorizedError("Invalid credentials")

    result = await handler.execute(LoginCommand(email=email, password=body.password))
    logger.info(f"[Auth] {result.user.id.value} logged in")
    return LoginResponse(
        user=UserDTO.from_user(result.user),
        access_token=result.access_token,
    )
