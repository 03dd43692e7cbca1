"""Conversation commands."""

from .start_conversation import StartConversationCommand, StartConversationHandler
from .delete_conversation import DeleteConversationCommand, DeleteConversationHandler

__all__ = [
    "StartConversationCommand",
    "StartConversationHandler",
    "DeleteConversationCommand",
    "DeleteConversationHandler",
]
