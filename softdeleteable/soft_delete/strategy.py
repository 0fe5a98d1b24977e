"""
Marker value strategy.

Pure functions deciding whether a marker field already records a deletion
and which value records a new one. Nothing here touches a session.
"""

from datetime import datetime
from typing import Any, Callable, Optional

from sqlalchemy import Boolean, DateTime
from sqlalchemy.types import TypeEngine

from .models import MarkerKind

Clock = Callable[[], datetime]


def resolve_marker_kind(
    column_type: TypeEngine, strict: bool = False
) -> Optional[MarkerKind]:
    """
    Map a column type onto a marker kind.

    ``DateTime`` (and subclasses such as ``TIMESTAMP``) gives a datetime
    marker. Every other type is treated as a boolean marker unless
    ``strict`` is set.

    Args:
        column_type: SQLAlchemy type of the marker column
        strict: Return ``None`` for types that are neither datetime nor boolean

    Returns:
        Marker kind, or ``None`` when ``strict`` rejects the type
    """
    if isinstance(column_type, DateTime):
        return MarkerKind.DATETIME

    if strict and not isinstance(column_type, Boolean):
        return None

    return MarkerKind.BOOLEAN


def is_already_marked(kind: MarkerKind, current_value: Any) -> bool:
    """Return True if the marker value already records a deletion."""
    if kind == MarkerKind.DATETIME:
        return isinstance(current_value, datetime)

    return current_value is True


def next_marker_value(kind: MarkerKind, clock: Optional[Clock] = None) -> Any:
    """
    Compute the value that marks an object as deleted.

    Args:
        kind: Marker kind of the field
        clock: Wall clock for datetime markers; defaults to the configured
            ``SoftDeleteableSettings.now``

    Returns:
        Current timestamp for datetime markers, ``True`` otherwise
    """
    if kind == MarkerKind.DATETIME:
        if clock is None:
            from ..config import get_config

            clock = get_config().now
        return clock()

    return True
