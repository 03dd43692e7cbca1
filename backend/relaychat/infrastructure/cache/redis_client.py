"""
Async Redis client for the message history cache.

Only built when REDIS_CACHE_ENABLED is set; the container owns its lifetime.
"""

import logging
import redis.asyncio as redis
from redis.asyncio import Redis
from relaychat.config.settings import Config

logger = logging.getLogger(__name__)


async def create_redis_client(url: str = Config.REDIS_URL) -> Redis:
    """
    Connect and ping once so a bad REDIS_URL fails at first use, not on the
    first cached read.

    Raises:
        redis.ConnectionError: If Redis is not reachable
    """
    client = redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        client_name="relaychat-cache",
        socket_timeout=2.0,
        socket_connect_timeout=2.0,
        health_check_interval=30,
    )
    await client.ping()
    logger.info(f"[Redis] History cache connected ({url})")
    return client


async def close_redis_client(client: Redis) -> None:
    await client.aclose()
    logger.info("[Redis] History cache connection closed")
