from typing import Union
from uuid import UUID

from restaurant.core.errors import InvalidArgumentError


def parse_id(value: Union[UUID, str, None], label: str) -> UUID:
    """Accepts a UUID or its string form; anything else is a malformed identifier."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Invalid {label} ID: {value!r}")
