"""
Soft Delete Module - flush-time rewrite of deletions.

Provides the flush listener that turns scheduled deletions of
soft-deleteable objects into marker updates, plus the mixins, notifications
and query filter around it.
"""

from .adapters import EngineAdapter, SQLAlchemyAdapter, TypeMetadata
from .events import (
    EventManager,
    SoftDeleteEvent,
    SoftDeleteEventArgs,
    get_event_manager,
)
from .exceptions import ConfigurationError, SoftDeleteableError
from .filters import SoftDeleteableFilter
from .listener import (
    SoftDeleteableListener,
    get_listener,
    hard_delete,
    register_soft_delete_listener,
)
from .mixins import BooleanSoftDeleteableMixin, SoftDeleteableMixin, soft_deleteable
from .models import MarkerKind, MarkerTransition, SoftDeleteConfig
from .resolver import ConfigurationResolver, get_resolver
from .strategy import is_already_marked, next_marker_value, resolve_marker_kind

__all__ = [
    # Listener
    "SoftDeleteableListener",
    "register_soft_delete_listener",
    "get_listener",
    "hard_delete",
    # Configuration
    "ConfigurationResolver",
    "get_resolver",
    "soft_deleteable",
    # Mixins
    "SoftDeleteableMixin",
    "BooleanSoftDeleteableMixin",
    # Query filter
    "SoftDeleteableFilter",
    # Notifications
    "EventManager",
    "SoftDeleteEvent",
    "SoftDeleteEventArgs",
    "get_event_manager",
    # Engine adapters
    "EngineAdapter",
    "SQLAlchemyAdapter",
    "TypeMetadata",
    # Models
    "MarkerKind",
    "MarkerTransition",
    "SoftDeleteConfig",
    # Marker strategy
    "is_already_marked",
    "next_marker_value",
    "resolve_marker_kind",
    # Exceptions
    "SoftDeleteableError",
    "ConfigurationError",
]
