"""
Authentication Dependency for FastAPI.

- Extracts the bearer token from the Authorization header
- Verifies it with the container's TokenService (same one the live channel uses)
- Raises HTTPException 401 if unauthorized
"""

from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from relaychat.domain.exceptions import UnauthorizedError
from relaychat.domain.ports import TokenService
from relaychat.domain.value_objects.user_id import UserId


@dataclass
class AuthUser:
    user_id: UserId


security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthUser:
    token_service = await request.state.dishka_container.get(TokenService)
    try:
        user_id = token_service.verify(credentials.credentials if credentials else None)
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AuthUser(user_id=user_id)
