"""
SoftDeleteable - soft delete for the SQLAlchemy ORM.

Deleting an object of a soft-deleteable class with ``session.delete()`` no
longer removes its row. At flush time the deletion is rewritten into an
update of a marker field, either a ``deleted_at`` timestamp or an
``is_deleted`` flag, and the row stays available for audit and restore.

Key Features
------------
* **Flush listener**: rewrites scheduled deletions inside ``before_flush``
* **Mixins**: ready-made ``deleted_at`` / ``is_deleted`` marker columns
* **Notifications**: ``preSoftDelete`` / ``postSoftDelete`` listeners
* **Query filter**: hide soft-deleted rows from ORM queries
* **Hard delete escape hatch**: deleting an already soft-deleted object
  removes it physically

Quick Start
-----------
>>> from softdeleteable import SoftDeleteableMixin, register_soft_delete_listener
>>>
>>> class Comment(Base, SoftDeleteableMixin):
...     __tablename__ = "comments"
...     id = Column(Integer, primary_key=True)
>>>
>>> Session = sessionmaker(bind=engine)
>>> register_soft_delete_listener(Session)
>>>
>>> session.delete(comment)
>>> session.commit()          # comment.deleted_at is now set
>>> session.delete(comment)
>>> session.commit()          # second delete removes the row

Notes
-----
Columns of any type other than ``DateTime`` are treated as boolean markers.
Enable ``strict_marker_types`` in the settings to reject them instead.
"""

__version__ = "1.0.0"

from .config import SoftDeleteableSettings, configure, get_config, set_config
from .soft_delete import (
    BooleanSoftDeleteableMixin,
    ConfigurationError,
    ConfigurationResolver,
    EventManager,
    MarkerKind,
    MarkerTransition,
    SoftDeleteableError,
    SoftDeleteableFilter,
    SoftDeleteableListener,
    SoftDeleteableMixin,
    SoftDeleteConfig,
    SoftDeleteEvent,
    SoftDeleteEventArgs,
    get_event_manager,
    hard_delete,
    register_soft_delete_listener,
    soft_deleteable,
)

__all__ = [
    # Listener
    "SoftDeleteableListener",
    "register_soft_delete_listener",
    "hard_delete",
    # Declaration
    "SoftDeleteableMixin",
    "BooleanSoftDeleteableMixin",
    "soft_deleteable",
    "ConfigurationResolver",
    "SoftDeleteConfig",
    "MarkerKind",
    "MarkerTransition",
    # Query filter
    "SoftDeleteableFilter",
    # Notifications
    "EventManager",
    "SoftDeleteEvent",
    "SoftDeleteEventArgs",
    "get_event_manager",
    # Exceptions
    "SoftDeleteableError",
    "ConfigurationError",
    # Configuration
    "SoftDeleteableSettings",
    "configure",
    "get_config",
    "set_config",
]
