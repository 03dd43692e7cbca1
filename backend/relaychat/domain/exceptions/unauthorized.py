"""
UnauthorizedError - Raised for bad, missing or expired credentials.
Maps to: HTTP 401 Unauthorized
"""


class UnauthorizedError(Exception):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)
