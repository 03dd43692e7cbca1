"""Redis cache layer."""

from relaychat.infrastructure.cache.cached_message_repository import (
    CachedMessageRepository,
)
from relaychat.infrastructure.cache.redis_client import (
    create_redis_client,
    close_redis_client,
)

__all__ = [
    "CachedMessageRepository",
    "create_redis_client",
    "close_redis_client",
]
