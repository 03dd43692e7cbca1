"""
In-memory storage engine shared by the memory repositories.

One instance lives for the whole app (APP scope). All writes go through the
repositories while holding `lock`; reads hand out copies so callers never
mutate stored state directly.

Stored layout:
- users: user_id -> User
- conversations: conversation_id -> Conversation (participants re-resolved on read)
- pair_index: pair_key -> conversation_id (unique per unordered pair)
- messages: conversation_id -> [Message], append order == sequence order
"""

import asyncio
import itertools

from relaychat.domain.entities.conversation import Conversation
from relaychat.domain.entities.message import Message
from relaychat.domain.entities.user import User


class InMemoryDatabase:
    def __init__(self):
        self.lock = asyncio.Lock()
        self.users: dict[str, User] = {}
        self.conversations: dict[str, Conversation] = {}
        self.pair_index: dict[str, str] = {}
        self.messages: dict[str, list[Message]] = {}
        self._sequence = itertools.count(1)

    def next_sequence(self) -> int:
        return next(self._sequence)
