"""
InvalidOperationError - Raised for operations that can never succeed as asked,
such as starting a conversation with yourself or passing a malformed id.
Maps to: HTTP 400 Bad Request
"""


class InvalidOperationError(Exception):
    def __init__(self, message: str = "Invalid operation"):
        super().__init__(message)
