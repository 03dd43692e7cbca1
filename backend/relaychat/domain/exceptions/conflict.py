"""
ConflictError - Raised when a uniqueness rule is violated in storage
(duplicate registration, duplicate conversation pair).
Maps to: HTTP 409 Conflict
"""


class ConflictError(Exception):
    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message)
