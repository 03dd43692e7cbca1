"""
Password Hasher Port - one-way hashing of user secrets.
Implementation: relaychat/infrastructure/security/password_hasher.py
"""

from abc import ABC, abstractmethod


class PasswordHasher(ABC):
    @abstractmethod
    def hash(self, password: str) -> str: ...

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool: ...
