"""Login Command - verify credentials and issue an access token."""

from dataclasses import dataclass
from relaychat.application.common.interfaces import Command, CommandHandler
from relaychat.domain.entities.user import User
from relaychat.domain.exceptions import UnauthorizedError
from relaychat.domain.ports import PasswordHasher, TokenService
from relaychat.domain.ports.repositories import UserRepository
from relaychat.domain.value_objects.user_email import UserEmail


@dataclass
class LoginResult:
    user: User
    access_token: str


@dataclass(frozen=True)
class LoginCommand(Command[LoginResult]):
    email: UserEmail
    password: str


class LoginHandler(CommandHandler[LoginResult]):
    def __init__(
        self,
        user_repository: UserRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ):
        self._user_repository = user_repository
        self._password_hasher = password_hasher
        self._token_service = token_service

    async def execute(self, command: LoginCommand) -> LoginResult:
        user = await self._user_repository.get_by_email(command.email)
        if not user or not self._password_hasher.verify(
            command.password, user.password_hash
        ):
            raise UnauthorizedError("Invalid credentials")

        return LoginResult(user=user, access_token=self._token_service.issue(user.id))
