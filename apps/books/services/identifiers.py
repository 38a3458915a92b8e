"""Identifier parsing shared by the books and reviews services."""

from uuid import UUID

from .exceptions import MalformedIdentifierError


def parse_object_id(value, *, label: str = 'resource') -> UUID:
    """
    Coerce an id taken from a URL or payload into a UUID.

    Args:
        value: UUID instance or its string form
        label: Resource name used in the error message

    Returns:
        UUID

    Raises:
        MalformedIdentifierError: If value is not a valid UUID
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise MalformedIdentifierError(f"Invalid {label} id: {value}")
