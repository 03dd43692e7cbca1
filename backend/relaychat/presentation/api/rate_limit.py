"""Shared slowapi limiter for the auth endpoints."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from relaychat.config.settings import Config

limiter = Limiter(key_func=get_remote_address, enabled=Config.RATELIMIT_ENABLED)
