"""
UserEmail Value Object - Wraps user email with validation.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserEmail:
    value: str  # user_email, stored lower-cased

    def __post_init__(self):
        if not self.value or "@" not in self.value or " " in self.value.strip():
            raise ValueError(f"Invalid user email: {self.value}")
        object.__setattr__(self, "value", self.value.strip().lower())

    def __str__(self) -> str:
        return self.value
