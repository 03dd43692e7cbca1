"""Live channel (WebSocket) bindings."""

from relaychat.presentation.ws.chat_socket import router as chat_socket_router

__all__ = ["chat_socket_router"]
