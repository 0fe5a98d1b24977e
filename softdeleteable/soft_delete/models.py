"""
Data models for soft delete operations.

These models describe how a mapped class participates in soft deletion and
the marker change applied to a single object during a flush.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MarkerKind(str, Enum):
    """Kinds of marker field supported by the rewriter."""

    DATETIME = "datetime"  # deleted when the value is a timestamp
    BOOLEAN = "boolean"  # deleted when the value is True


class SoftDeleteConfig(BaseModel):
    """Resolved soft delete configuration for one mapped class."""

    model_config = ConfigDict(frozen=True)

    entity_type: str = Field(..., description="Name of the mapped class")
    enabled: bool = Field(False, description="Whether deletions are rewritten")
    field_name: str = Field(
        "deleted_at", description="Marker field holding the deleted state"
    )
    marker_kind: MarkerKind = Field(
        MarkerKind.BOOLEAN, description="How the marker field is read and set"
    )

    @classmethod
    def disabled(cls, entity_type: str) -> "SoftDeleteConfig":
        """Configuration for a class that is always hard deleted."""
        return cls(entity_type=entity_type, enabled=False)


class MarkerTransition(BaseModel):
    """Marker change applied to one object in place of its deletion."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    entity_type: str = Field(..., description="Name of the mapped class")
    field_name: str = Field(..., description="Marker field that changed")
    old_value: Any = Field(None, description="Marker value before the rewrite")
    new_value: Any = Field(..., description="Marker value after the rewrite")

    def as_change(self) -> dict:
        """Return the change in ``{field: (old, new)}`` form."""
        return {self.field_name: (self.old_value, self.new_value)}
