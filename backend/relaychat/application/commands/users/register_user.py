"""Register User Command - write side of the identity directory."""

import logging
from dataclasses import dataclass
from relaychat.application.common.interfaces import Command, CommandHandler
from relaychat.domain.entities.user import User
from relaychat.domain.exceptions import ConflictError, DomainValidationError
from relaychat.domain.ports import PasswordHasher
from relaychat.domain.ports.repositories import UserRepository
from relaychat.domain.value_objects.user_email import UserEmail
from relaychat.domain.value_objects.username import Username

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisterUserCommand(Command[User]):
    username: Username
    email: UserEmail
    password: str


class RegisterUserHandler(CommandHandler[User]):
    def __init__(
        self,
        user_repository: UserRepository,
        password_hasher: PasswordHasher,
        password_min_length: int,
    ):
        self._user_repository = user_repository
        self._password_hasher = password_hasher
        self._password_min_length = password_min_length

    async def execute(self, command: RegisterUserCommand) -> User:
        if len(command.password or "") < self._password_min_length:
            raise DomainValidationError(
                f"Password must be at least {self._password_min_length} characters."
            )

        if await self._user_repository.get_by_email(
            command.email
        ) or await self._user_repository.get_by_username(command.username):
            raise ConflictError("Username or email already exists")

        user = User.create(
            username=command.username,
            email=command.email,
            password_hash=self._password_hasher.hash(command.password),
        )
        # add() re-checks uniqueness atomically in storage
        await self._user_repository.add(user)
        logger.info(f"[Register] New user {user.username.value} ({user.id.value})")
        return user
