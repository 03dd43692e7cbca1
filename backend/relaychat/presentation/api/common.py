"""Helpers shared by the API routers."""

from typing import Callable, TypeVar

from relaychat.domain.exceptions import InvalidOperationError

T = TypeVar("T")


def parse_id(factory: Callable[[str], T], raw: str, what: str = "id") -> T:
    """Build an id value object from request input; malformed input -> 400."""
    try:
        return factory(raw)
    except ValueError:
        raise InvalidOperationError(f"Invalid {what}: {raw!r}")
