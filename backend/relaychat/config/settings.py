"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


class Config:
    # Server
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "5001"))
    ENV = os.getenv("APP_ENV", "development")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH", "")  # empty = stdout only
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(levelname)s - %(name)s - [%(correlation_id)s] - %(message)s",
    )

    # Auth
    JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "relaychat")
    JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "relaychat-clients")
    JWT_TTL_SECONDS = int(os.getenv("JWT_TTL_SECONDS", str(60 * 60 * 24)))
    PASSWORD_MIN_LENGTH = int(os.getenv("PASSWORD_MIN_LENGTH", "6"))

    # Rate limiting (login/register)
    RATELIMIT_ENABLED = _flag("RATELIMIT_ENABLED", "true")
    AUTH_RATE_LIMIT = os.getenv("AUTH_RATE_LIMIT", "10/minute")

    # Storage: "memory" (single process) or "prisma" (PostgreSQL)
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # Redis settings
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    REDIS_CACHE_ENABLED: bool = _flag("REDIS_CACHE_ENABLED", "false")
    REDIS_CACHE_TTL: int = int(os.getenv("REDIS_CACHE_TTL", "3600"))

    # Conversations and messages
    CONVERSATION_CREATE_RETRIES: int = int(
        os.getenv("CONVERSATION_CREATE_RETRIES", "3")
    )
    MESSAGE_MAX_LENGTH: int = int(os.getenv("MESSAGE_MAX_LENGTH", "4000"))

    # Live channel
    LIVE_SEND_TIMEOUT: float = float(os.getenv("LIVE_SEND_TIMEOUT", "5.0"))

