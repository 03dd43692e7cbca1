from relaychat.config.settings import Config
from relaychat.presentation.api.rate_limit import limiter


def test_login_rate_limit(client, alice):
    limiter.enabled = True
    limiter.reset()
    try:
        allowed = int(Config.AUTH_RATE_LIMIT.split("/")[0])
        status_codes = []
        for _ in range(allowed + 5):
            res = client.post(
                "/auth/login",
                json={"email": "alice@example.com", "password": "wrong-one"},
            )
            status_codes.append(res.status_code)
    finally:
        limiter.enabled = False
        limiter.reset()

    assert any(
        code == 429 for code in status_codes
    ), "Expected at least one 429 Too Many Requests response"
    assert status_codes[0] == 401
