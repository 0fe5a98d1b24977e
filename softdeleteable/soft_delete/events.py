"""
Lifecycle notifications emitted around a soft delete.

Listeners are called synchronously, in registration order. A listener that
raises aborts the flush; the exception reaches the caller unchanged.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class SoftDeleteEvent(str, Enum):
    """Notification kinds emitted by the soft delete listener."""

    PRE_SOFT_DELETE = "preSoftDelete"
    POST_SOFT_DELETE = "postSoftDelete"


@dataclass(frozen=True)
class SoftDeleteEventArgs:
    """Payload of a soft delete notification."""

    entity: Any
    session: Session

    @property
    def entity_type(self) -> str:
        return type(self.entity).__name__


Listener = Callable[[SoftDeleteEventArgs], None]


class EventManager:
    """Synchronous fan-out of soft delete notifications.

    Example:
        >>> events = EventManager()
        >>> @events.listens_for(SoftDeleteEvent.POST_SOFT_DELETE)
        ... def audit(args):
        ...     print(f"{args.entity_type} soft deleted")
    """

    def __init__(self) -> None:
        self._listeners: Dict[SoftDeleteEvent, List[Listener]] = {}

    def add_listener(self, kind: SoftDeleteEvent, listener: Listener) -> None:
        """Register ``listener`` for ``kind``."""
        kind = SoftDeleteEvent(kind)
        if kind not in self._listeners:
            self._listeners[kind] = []
        self._listeners[kind].append(listener)

    def remove_listener(self, kind: SoftDeleteEvent, listener: Listener) -> None:
        """Unregister ``listener``; unknown listeners are ignored."""
        listeners = self._listeners.get(SoftDeleteEvent(kind), [])
        if listener in listeners:
            listeners.remove(listener)

    def has_listeners(self, kind: SoftDeleteEvent) -> bool:
        return bool(self._listeners.get(SoftDeleteEvent(kind)))

    def listens_for(self, kind: SoftDeleteEvent) -> Callable[[Listener], Listener]:
        """Decorator form of :meth:`add_listener`."""

        def decorator(listener: Listener) -> Listener:
            self.add_listener(kind, listener)
            return listener

        return decorator

    def dispatch(self, kind: SoftDeleteEvent, args: SoftDeleteEventArgs) -> None:
        """
        Call every listener registered for ``kind``.

        Args:
            kind: Notification kind
            args: Entity and session the notification is about

        Raises:
            Exception: Whatever a listener raises, unchanged
        """
        kind = SoftDeleteEvent(kind)
        # Copy so a listener may unregister itself while being called
        listeners = list(self._listeners.get(kind, []))
        logger.debug(
            "Dispatching %s for %s to %d listener(s)",
            kind.value,
            args.entity_type,
            len(listeners),
        )
        for listener in listeners:
            listener(args)

    def clear(self) -> None:
        """Remove all listeners."""
        self._listeners.clear()


# Global event manager instance
_event_manager: Optional[EventManager] = None


def get_event_manager() -> EventManager:
    """Get the global event manager."""
    global _event_manager

    if _event_manager is None:
        _event_manager = EventManager()

    return _event_manager
