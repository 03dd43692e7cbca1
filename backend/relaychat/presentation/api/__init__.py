"""
API Routers - FastAPI endpoint definitions.
"""

from relaychat.presentation.api.auth import router as auth_router
from relaychat.presentation.api.users import router as users_router
from relaychat.presentation.api.conversations import router as conversations_router
from relaychat.presentation.api.messages import router as messages_router
from relaychat.presentation.api.metrics import router as metrics_router

__all__ = [
    "auth_router",
    "users_router",
    "conversations_router",
    "messages_router",
    "metrics_router",
]
