"""
Username Value Object - unique, immutable handle shown to other users.
"""

import re
from dataclasses import dataclass

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_.-]{3,32}$")


@dataclass(frozen=True)
class Username:
    value: str

    def __post_init__(self):
        if not self.value or not _USERNAME_RE.match(self.value):
            raise ValueError(
                "Username must be 3-32 characters of letters, digits, '_', '.' or '-'"
            )

    def __str__(self) -> str:
        return self.value
