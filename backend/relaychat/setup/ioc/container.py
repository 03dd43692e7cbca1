"""
Dishka DI Container Setup.

- Registers all dependencies (repositories, handlers, realtime router)
- Maps abstract ports to concrete implementations
- Manages lifecycle: Scope.APP = one per process, Scope.REQUEST = one per
  HTTP request or inbound live event

Flow:
  Container → provides → InMemoryConversationRepository → to → StartConversationHandler
                                    ↓
                            uses ConversationRepository interface

Storage backend is picked by Config.STORAGE_BACKEND; the Prisma provider is
imported lazily because it needs a generated client.
"""

from typing import AsyncIterator

from dishka import (
    AsyncContainer,
    Provider,
    Scope,
    decorate,
    make_async_container,
    provide,
)
from redis.asyncio import Redis

from relaychat.application.commands.conversations import (
    DeleteConversationHandler,
    StartConversationHandler,
)
from relaychat.application.commands.messages import SendMessageHandler
from relaychat.application.commands.users import LoginHandler, RegisterUserHandler
from relaychat.application.queries.conversations import ListConversationsHandler
from relaychat.application.queries.messages import ListMessagesHandler
from relaychat.application.queries.users import (
    GetUserProfileHandler,
    SearchUsersHandler,
)
from relaychat.application.realtime import DeliveryRouter, PresenceRegistry
from relaychat.config.settings import Config
from relaychat.domain.ports import PasswordHasher, TokenService
from relaychat.domain.ports.repositories import (
    ConversationRepository,
    MessageRepository,
    UserRepository,
)
from relaychat.infrastructure.cache import (
    CachedMessageRepository,
    close_redis_client,
    create_redis_client,
)
from relaychat.infrastructure.persistence.memory import (
    InMemoryConversationRepository,
    InMemoryDatabase,
    InMemoryMessageRepository,
    InMemoryUserRepository,
)
from relaychat.infrastructure.presence import InMemoryPresenceRegistry
from relaychat.infrastructure.security import JwtTokenService, WerkzeugPasswordHasher


class AppProvider(Provider):
    """
    Application dependency provider.

    Storage-independent: repositories come from a persistence provider.
    """

    # ==================== SECURITY ====================

    @provide(scope=Scope.APP)
    def get_token_service(self) -> TokenService:
        return JwtTokenService(
            secret=Config.JWT_SECRET,
            issuer=Config.JWT_ISSUER,
            audience=Config.JWT_AUDIENCE,
            ttl_seconds=Config.JWT_TTL_SECONDS,
        )

    @provide(scope=Scope.APP)
    def get_password_hasher(self) -> PasswordHasher:
        return WerkzeugPasswordHasher()

    # ==================== PRESENCE ====================

    @provide(scope=Scope.APP)
    def get_presence_registry(self) -> PresenceRegistry:
        """One registry per process; shared by every live connection."""
        return InMemoryPresenceRegistry()

    # ==================== USER HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_register_user_handler(
        self, user_repository: UserRepository, password_hasher: PasswordHasher
    ) -> RegisterUserHandler:
        return RegisterUserHandler(
            user_repository, password_hasher, Config.PASSWORD_MIN_LENGTH
        )

    @provide(scope=Scope.REQUEST)
    def get_login_handler(
        self,
        user_repository: UserRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ) -> LoginHandler:
        return LoginHandler(user_repository, password_hasher, token_service)

    @provide(scope=Scope.REQUEST)
    def get_search_users_handler(
        self, user_repository: UserRepository
    ) -> SearchUsersHandler:
        return SearchUsersHandler(user_repository)

    @provide(scope=Scope.REQUEST)
    def get_user_profile_handler(
        self, user_repository: UserRepository
    ) -> GetUserProfileHandler:
        return GetUserProfileHandler(user_repository)

    # ==================== CONVERSATION HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_start_conversation_handler(
        self,
        conversation_repository: ConversationRepository,
        user_repository: UserRepository,
    ) -> StartConversationHandler:
        return StartConversationHandler(
            conversation_repository,
            user_repository,
            max_attempts=Config.CONVERSATION_CREATE_RETRIES,
        )

    @provide(scope=Scope.REQUEST)
    def get_delete_conversation_handler(
        self, conversation_repository: ConversationRepository
    ) -> DeleteConversationHandler:
        return DeleteConversationHandler(conversation_repository)

    @provide(scope=Scope.REQUEST)
    def get_list_conversations_handler(
        self, conversation_repository: ConversationRepository
    ) -> ListConversationsHandler:
        return ListConversationsHandler(conversation_repository)

    # ==================== MESSAGE HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_send_message_handler(
        self,
        conversation_repository: ConversationRepository,
        message_repository: MessageRepository,
        user_repository: UserRepository,
    ) -> SendMessageHandler:
        return SendMessageHandler(
            conv_repo=conversation_repository,
            msg_repo=message_repository,
            user_repo=user_repository,
            max_length=Config.MESSAGE_MAX_LENGTH,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_messages_handler(
        self,
        conversation_repository: ConversationRepository,
        message_repository: MessageRepository,
    ) -> ListMessagesHandler:
        return ListMessagesHandler(
            conv_repo=conversation_repository,
            msg_repo=message_repository,
        )

    # ==================== REALTIME ====================

    @provide(scope=Scope.REQUEST)
    def get_delivery_router(
        self,
        presence: PresenceRegistry,
        token_service: TokenService,
        user_repository: UserRepository,
        conversation_repository: ConversationRepository,
        send_message_handler: SendMessageHandler,
    ) -> DeliveryRouter:
        return DeliveryRouter(
            presence=presence,
            token_service=token_service,
            user_repo=user_repository,
            conv_repo=conversation_repository,
            send_message_handler=send_message_handler,
            send_timeout=Config.LIVE_SEND_TIMEOUT,
        )


class InMemoryPersistenceProvider(Provider):
    """Single-process storage; state lives as long as the container."""

    @provide(scope=Scope.APP)
    def get_database(self) -> InMemoryDatabase:
        return InMemoryDatabase()

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, db: InMemoryDatabase) -> UserRepository:
        return InMemoryUserRepository(db)

    @provide(scope=Scope.REQUEST)
    def get_conversation_repository(
        self, db: InMemoryDatabase
    ) -> ConversationRepository:
        return InMemoryConversationRepository(db)

    @provide(scope=Scope.REQUEST)
    def get_message_repository(self, db: InMemoryDatabase) -> MessageRepository:
        return InMemoryMessageRepository(db)


class RedisCacheProvider(Provider):
    """Wraps whichever MessageRepository is registered with a Redis cache."""

    @provide(scope=Scope.APP)
    async def get_redis(self) -> AsyncIterator[Redis]:
        client = await create_redis_client(Config.REDIS_URL)
        yield client
        await close_redis_client(client)

    @decorate
    def cache_message_repository(
        self, repo: MessageRepository, redis: Redis
    ) -> MessageRepository:
        return CachedMessageRepository(repo, redis, ttl=Config.REDIS_CACHE_TTL)


def persistence_provider(backend: str = Config.STORAGE_BACKEND) -> Provider:
    if backend == "memory":
        return InMemoryPersistenceProvider()
    if backend == "prisma":
        from relaychat.setup.ioc.prisma_provider import PrismaPersistenceProvider

        return PrismaPersistenceProvider()
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")


def build_container(*extra_providers: Provider) -> AsyncContainer:
    """
    Create and configure the DI container.

    Call this ONCE per app instance; extra providers are appended last so
    tests can override registrations.
    """
    providers: list[Provider] = [AppProvider(), persistence_provider()]
    if Config.REDIS_CACHE_ENABLED:
        providers.append(RedisCacheProvider())
    providers.extend(extra_providers)
    return make_async_container(*providers)
