"""
Cached Message Repository - Decorator pattern for Redis caching.

Architecture:
    CachedMessageRepository (decorator)
        ↓ wraps
    InMemoryMessageRepository / PrismaMessageRepository
        ↓ implements
    MessageRepository (abstract interface)

Cache Strategy:
- Read-Through: check cache first, fall back to storage, populate cache
- Invalidate on write: a new message bumps the conversation's version key
  and deletes its list in one MULTI; the next read repopulates it
- Repopulation is a single MULTI (delete, rpush, expire) under WATCH on the
  version key read before loading storage. If a message was added since,
  the stale list is dropped instead of written
- TTL-based expiration as a backstop

Redis Data Structure (LIST):
- Key pattern: "relaychat:conv:{conversation_id}:msgs"
- Version key: "relaychat:conv:{conversation_id}:ver" (INCR counter, no TTL)
- Each element: JSON string for ONE message, oldest first
- TTL: Config.REDIS_CACHE_TTL

Error Handling:
- Cache failures never fail the operation; they are logged and the
  storage result is used
"""

import json
import logging
from datetime import datetime
from typing import Optional
from redis.asyncio import Redis
from redis.exceptions import WatchError
from relaychat.domain.entities.message import Message
from relaychat.domain.ports.repositories.message_repository import MessageRepository
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.message_id import MessageId
from relaychat.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


class CachedMessageRepository(MessageRepository):
    """
    Decorator: adds Redis caching to MessageRepository.

    Implements the same interface, so callers don't know caching exists.
    """

    def __init__(self, repo: MessageRepository, redis: Redis, ttl: int = 3600):
        self._repo = repo
        self._redis = redis
        self._ttl = ttl

    def _cache_key(self, conversation_id: ConversationId) -> str:
        return f"relaychat:conv:{conversation_id.value}:msgs"

    def _version_key(self, conversation_id: ConversationId) -> str:
        return f"relaychat:conv:{conversation_id.value}:ver"

    def _serialize_message(self, message: Message) -> str:
        return json.dumps(
            {
                "id": message.id.value,
                "conversation_id": message.conversation_id.value,
                "sender_id": message.sender_id.value,
                "content": message.content,
                "created_at": message.created_at.isoformat(),
                "is_read": message.is_read,
                "sequence": message.sequence,
            }
        )

    def _deserialize_message(self, json_str: str) -> Message:
        d = json.loads(json_str)
        return Message(
            id=MessageId(d["id"]),
            conversation_id=ConversationId(d["conversation_id"]),
            sender_id=UserId(d["sender_id"]),
            content=d["content"],
            created_at=datetime.fromisoformat(d["created_at"]),
            is_read=d.get("is_read", False),
            sequence=d.get("sequence", 0),
        )

    async def get_by_conversation(
        self, conversation_id: ConversationId
    ) -> list[Message]:
        cache_key = self._cache_key(conversation_id)
        version_key = self._version_key(conversation_id)

        # 1. Try cache first (fast path); remember the version on a miss
        try:
            cached_json_list = await self._redis.lrange(cache_key, 0, -1)
            if cached_json_list:
                logger.debug(f"Cache HIT for {cache_key}")
                return [self._deserialize_message(s) for s in cached_json_list]
            version = await self._redis.get(version_key)
        except Exception as e:
            logger.warning(f"Redis cache read error for {cache_key}: {str(e)}")
            return await self._repo.get_by_conversation(conversation_id)

        # 2. Cache miss - fetch from storage
        logger.debug(f"Cache MISS for {cache_key}")
        messages = await self._repo.get_by_conversation(conversation_id)

        # 3. Populate cache (best effort)
        if messages:
            await self._populate(cache_key, version_key, version, messages)
        return messages

    async def _populate(
        self,
        cache_key: str,
        version_key: str,
        version: Optional[str],
        messages: list[Message],
    ) -> None:
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                await pipe.watch(version_key)
                if await pipe.get(version_key) != version:
                    logger.debug(f"Cache SKIP for {cache_key}: history changed")
                    return
                pipe.multi()
                pipe.delete(cache_key)
                pipe.rpush(cache_key, *[self._serialize_message(m) for m in messages])
                pipe.expire(cache_key, self._ttl)
                await pipe.execute()
            logger.debug(f"Cache POPULATED for {cache_key}")
        except WatchError:
            logger.debug(f"Cache SKIP for {cache_key}: history changed")
        except Exception as e:
            logger.warning(f"Redis cache write error for {cache_key}: {str(e)}")

    async def add(self, message: Message) -> Message:
        # 1. Write to storage first (source of truth)
        stored = await self._repo.add(message)

        # 2. Invalidate (best effort): in-flight refills see the new version
        cache_key = self._cache_key(message.conversation_id)
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.incr(self._version_key(message.conversation_id))
                pipe.delete(cache_key)
                await pipe.execute()
            logger.debug(f"Cache INVALIDATED for {cache_key}")
        except Exception as e:
            logger.warning(f"Redis cache invalidation error for {cache_key}: {str(e)}")

        return stored
