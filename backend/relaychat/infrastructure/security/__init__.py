"""Security adapters: access tokens and password hashing."""

from relaychat.infrastructure.security.jwt_token_service import JwtTokenService
from relaychat.infrastructure.security.password_hasher import WerkzeugPasswordHasher

__all__ = [
    "JwtTokenService",
    "WerkzeugPasswordHasher",
]
