import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from relaychat.domain.exceptions import UnauthorizedError
from relaychat.domain.value_objects.user_id import UserId
from relaychat.infrastructure.security import JwtTokenService, WerkzeugPasswordHasher


@pytest.fixture()
def service():
    return JwtTokenService(secret="s3cret", issuer="relaychat", audience="clients")


def test_issued_token_verifies_to_subject(service):
    user_id = UserId(str(uuid.uuid4()))
    assert service.verify(service.issue(user_id)) == user_id


@pytest.mark.parametrize(
    "token, message",
    [
        (None, "Missing token"),
        ("", "Missing token"),
        ("not-a-jwt", "Invalid token"),
    ],
)
def test_rejects_malformed_tokens(service, token, message):
    with pytest.raises(UnauthorizedError, match=message):
        service.verify(token)


def test_rejects_foreign_and_expired_tokens(service):
    user_id = UserId(str(uuid.uuid4()))
    other = JwtTokenService(secret="other", issuer="relaychat", audience="clients")
    with pytest.raises(UnauthorizedError, match="Invalid token"):
        service.verify(other.issue(user_id))

    wrong_audience = JwtTokenService(secret="s3cret", issuer="relaychat", audience="x")
    with pytest.raises(UnauthorizedError, match="Invalid token"):
        service.verify(wrong_audience.issue(user_id))

    now = datetime.now(timezone.utc)
    expired = jwt.encode(
        {
            "sub": user_id.value,
            "iat": now - timedelta(hours=2),
            "exp": now - timedelta(hours=1),
            "iss": "relaychat",
            "aud": "clients",
        },
        "s3cret",
        algorithm="HS256",
    )
    with pytest.raises(UnauthorizedError, match="Token has expired"):
        service.verify(expired)


def test_rejects_non_uuid_subject(service):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "sub": "alice",
            "iat": now,
            "exp": now + timedelta(minutes=5),
            "iss": "relaychat",
            "aud": "clients",
        },
        "s3cret",
        algorithm="HS256",
    )
    with pytest.raises(UnauthorizedError, match="Invalid token subject"):
        service.verify(token)


def test_password_hasher_round_trip():
    hasher = WerkzeugPasswordHasher()
    hashed = hasher.hash("secret123")
    assert hashed != "secret123"
    assert hasher.verify("secret123", hashed)
    assert not hasher.verify("wrong", hashed)
