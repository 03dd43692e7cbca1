"""
DOMAIN EXCEPTIONS - Business rule violations

These exceptions are raised by domain and application logic and caught by the
presentation layer, which maps them to HTTP status codes or live error events.
"""

from relaychat.domain.exceptions.entity_not_found import EntityNotFoundError
from relaychat.domain.exceptions.access_denied import AccessDeniedError
from relaychat.domain.exceptions.validation_error import DomainValidationError
from relaychat.domain.exceptions.invalid_operation import InvalidOperationError
from relaychat.domain.exceptions.conflict import ConflictError
from relaychat.domain.exceptions.unauthorized import UnauthorizedError

__all__ = [
    "EntityNotFoundError",
    "AccessDeniedError",
    "DomainValidationError",
    "InvalidOperationError",
    "ConflictError",
    "UnauthorizedError",
]
