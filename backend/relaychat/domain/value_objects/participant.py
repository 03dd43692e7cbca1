"""
Participant Value Object - resolved snapshot of a conversation member.

Conversations always carry both participants as snapshots fetched together
with the conversation; there is no lazy loading behind them.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from relaychat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class Participant:
    id: UserId
    username: str
    is_online: bool = False
    last_seen: Optional[datetime] = None
