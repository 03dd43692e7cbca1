"""
Token Service Port - issues and verifies access tokens.
Implementation: relaychat/infrastructure/security/jwt_token_service.py
"""

from abc import ABC, abstractmethod

from relaychat.domain.value_objects.user_id import UserId


class TokenService(ABC):
    @abstractmethod
    def issue(self, user_id: UserId) -> str: ...

    @abstractmethod
    def verify(self, token: str | None) -> UserId:
        """Return the token subject. Raises UnauthorizedError."""
        ...
