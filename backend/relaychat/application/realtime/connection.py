"""
Live connection port and per-connection session state.

A LiveConnection is the transport handle the router pushes events through.
The WebSocket adapter lives in presentation/ws; tests use in-memory fakes.

State machine per connection:
    CONNECTING -> AUTHENTICATED -> DISCONNECTED (terminal)
    CONNECTING -> DISCONNECTED (bad or missing token)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from relaychat.domain.value_objects.user_id import UserId


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    AUTHENTICATED = "authenticated"
    DISCONNECTED = "disconnected"


class LiveConnection(ABC):
    """Transport handle for one live client link."""

    connection_id: str

    @abstractmethod
    async def accept(self) -> None: ...

    @abstractmethod
    async def send(self, event: str, data: dict[str, Any]) -> None:
        """Write one event frame. May raise on a broken transport."""
        ...

    @abstractmethod
    async def close(self, code: int, reason: str = "") -> None: ...


@dataclass
class LiveSession:
    connection: LiveConnection
    state: ConnectionState = ConnectionState.CONNECTING
    user_id: Optional[UserId] = None
    generation: int = 0

    @property
    def is_authenticated(self) -> bool:
        return self.state is ConnectionState.AUTHENTICATED
