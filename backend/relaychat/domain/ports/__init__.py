"""
PORTS - Interfaces the domain needs from the outside world.
"""

from relaychat.domain.ports.password_hasher import PasswordHasher
from relaychat.domain.ports.token_service import TokenService

__all__ = [
    "PasswordHasher",
    "TokenService",
]
