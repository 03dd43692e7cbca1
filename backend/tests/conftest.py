import os

# Must be set before relaychat.config.settings is imported
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("REDIS_CACHE_ENABLED", "false")
os.environ.setdefault("RATELIMIT_ENABLED", "false")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient

from relaychat.application.realtime import LiveConnection
from relaychat.domain.entities.user import User
from relaychat.domain.value_objects.user_email import UserEmail
from relaychat.domain.value_objects.username import Username
from relaychat.fastapi_app import create_fastapi_app
from relaychat.infrastructure.persistence.memory import (
    InMemoryConversationRepository,
    InMemoryDatabase,
    InMemoryMessageRepository,
    InMemoryUserRepository,
)
from relaychat.setup.ioc import build_container

PASSWORD = "secret123"


# ==================== HTTP FIXTURES ====================


@pytest.fixture()
def app():
    """Create a new FastAPI app with a fresh container (empty storage) per test."""
    return create_fastapi_app(build_container())


@pytest.fixture()
def client(app):
    """A test client for the FastAPI app; runs lifespan startup/shutdown."""
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def register_user(client):
    """Register and log in a user; returns {"user", "token", "headers"}."""

    def _register(username: str, email: str | None = None, password: str = PASSWORD):
        email = email or f"{username}@example.com"
        res = client.post(
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        assert res.status_code == 201, res.text
        res = client.post("/auth/login", json={"email": email, "password": password})
        assert res.status_code == 200, res.text
        body = res.json()
        return {
            "user": body["user"],
            "token": body["accessToken"],
            "headers": {"Authorization": f"Bearer {body['accessToken']}"},
        }

    return _register


@pytest.fixture()
def alice(register_user):
    return register_user("alice")


@pytest.fixture()
def bob(register_user):
    return register_user("bob")


# ==================== UNIT FIXTURES ====================


@pytest.fixture()
def db():
    return InMemoryDatabase()


@pytest.fixture()
def user_repo(db):
    return InMemoryUserRepository(db)


@pytest.fixture()
def conversation_repo(db):
    return InMemoryConversationRepository(db)


@pytest.fixture()
def message_repo(db):
    return InMemoryMessageRepository(db)


@pytest.fixture()
def make_user(user_repo):
    """Async factory: await make_user("alice") -> stored User."""

    async def _make(username: str) -> User:
        user = User.create(
            username=Username(username),
            email=UserEmail(f"{username}@example.com"),
            password_hash="not-a-real-hash",
        )
        await user_repo.add(user)
        return user

    return _make


class FakeConnection(LiveConnection):
    """Records pushed events instead of writing to a socket."""

    def __init__(self, connection_id: str = "conn", fail: bool = False):
        self.connection_id = connection_id
        self.fail = fail
        self.accepted = False
        self.closed_with: int | None = None
        self.sent: list[tuple[str, dict]] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send(self, event: str, data: dict) -> None:
        if self.fail:
            raise ConnectionError("broken pipe")
        self.sent.append((event, data))

    async def close(self, code: int, reason: str = "") -> None:
        self.closed_with = code

    def received(self, event: str) -> list[dict]:
        return [data for name, data in self.sent if name == event]


@pytest.fixture()
def connection_factory():
    return FakeConnection
