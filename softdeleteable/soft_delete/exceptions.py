"""Exceptions for soft delete operations."""

from typing import Optional


class SoftDeleteableError(Exception):
    """Base exception for soft delete operations."""

    def __init__(self, message: str, entity_type: Optional[str] = None):
        self.entity_type = entity_type
        super().__init__(message)


class ConfigurationError(SoftDeleteableError):
    """Raised when a soft-deleteable mapping cannot be honoured.

    The marker field is missing from the mapper, or (in strict mode) its
    column type is neither a datetime nor a boolean.
    """

    def __init__(self, entity_type: str, field_name: Optional[str], reason: str):
        self.field_name = field_name
        super().__init__(
            f"Invalid soft delete configuration for {entity_type}"
            f" (field {field_name!r}): {reason}",
            entity_type=entity_type,
        )
