"""
JWT Token Service - HS256 access tokens.

Claims: sub (user id), iat, exp, iss, aud - all required on decode.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from relaychat.domain.exceptions import UnauthorizedError
from relaychat.domain.ports.token_service import TokenService
from relaychat.domain.value_objects.user_id import UserId


class JwtTokenService(TokenService):
    def __init__(
        self,
        secret: str,
        issuer: str,
        audience: str,
        ttl_seconds: int = 86400,
    ):
        self._secret = secret
        self._issuer = issuer
        self._audience = audience
        self._ttl = timedelta(seconds=ttl_seconds)

    def issue(self, user_id: UserId) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id.value,
            "iat": now,
            "exp": now + self._ttl,
            "iss": self._issuer,
            "aud": self._audience,
        }
        return jwt.encode(payload, self._secret, algorithm="HS256")

    def verify(self, token: Optional[str]) -> UserId:
        if not token:
            raise UnauthorizedError("Missing token")
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=["HS256"],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": ["sub", "exp", "iat", "aud", "iss"]},
            )
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise UnauthorizedError(f"Invalid token: {str(e)}")

        try:
            return UserId(claims["sub"])
        except ValueError:
            raise UnauthorizedError("Invalid token subject")
