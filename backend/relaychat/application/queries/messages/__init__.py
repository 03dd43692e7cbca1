"""Message queries."""

from relaychat.application.queries.messages.list_messages import (
    ListMessagesQuery,
    ListMessagesHandler,
    ListMessagesResult,
)

__all__ = [
    "ListMessagesQuery",
    "ListMessagesHandler",
    "ListMessagesResult",
]
