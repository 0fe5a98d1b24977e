"""
Soft delete flush listener.

Hooks into SQLAlchemy's ``before_flush`` session event and turns the
scheduled deletion of every soft-deleteable object into an update of its
marker field.

Usage:
    Session = sessionmaker(bind=engine)
    register_soft_delete_listener(Session)

    session.delete(comment)
    session.commit()  # UPDATE comments SET deleted_at=... instead of DELETE
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from sqlalchemy import event
from sqlalchemy.orm import Session

from ..config import get_config
from .adapters import EngineAdapter
from .events import (
    EventManager,
    SoftDeleteEvent,
    SoftDeleteEventArgs,
    get_event_manager,
)
from .models import MarkerTransition
from .resolver import ConfigurationResolver, get_resolver
from .strategy import Clock, is_already_marked, next_marker_value

logger = logging.getLogger(__name__)

# session.info key that turns the rewrite off for one session
BYPASS_KEY = "softdeleteable.disabled"


class SoftDeleteableListener:
    """
    Rewrites scheduled deletions of soft-deleteable objects into updates.

    An object is left scheduled for physical deletion when its class is not
    soft-deleteable or when its marker already records a deletion. Deleting
    an already soft-deleted object therefore removes the row for good.

    Args:
        resolver: Configuration resolver; the global resolver when omitted,
            or a new one sharing ``adapter`` when only that is given
        event_manager: Receives the pre/post soft delete notifications;
            the global manager when omitted
        adapter: Engine adapter; the resolver's adapter when omitted
        clock: Wall clock for datetime markers; the configured clock when
            omitted
    """

    def __init__(
        self,
        resolver: Optional[ConfigurationResolver] = None,
        event_manager: Optional[EventManager] = None,
        adapter: Optional[EngineAdapter] = None,
        clock: Optional[Clock] = None,
    ):
        if resolver is None:
            resolver = (
                ConfigurationResolver(adapter=adapter) if adapter else get_resolver()
            )
        self.resolver = resolver
        self.adapter = adapter or resolver.adapter
        self.event_manager = event_manager or get_event_manager()
        self.clock = clock

    def register(self, target: Any) -> None:
        """Listen to ``before_flush`` on a session, sessionmaker or class."""
        if not event.contains(target, "before_flush", self.on_flush):
            event.listen(target, "before_flush", self.on_flush)

    def unregister(self, target: Any) -> None:
        if event.contains(target, "before_flush", self.on_flush):
            event.remove(target, "before_flush", self.on_flush)

    def is_registered(self, target: Any) -> bool:
        return event.contains(target, "before_flush", self.on_flush)

    def on_flush(self, session: Session, flush_context: Any, instances: Any) -> None:
        """``before_flush`` hook."""
        self.rewrite(session)

    def rewrite(self, session: Session) -> List[MarkerTransition]:
        """
        Run one rewrite pass over the scheduled deletions of ``session``.

        Returns:
            The marker transitions applied, one per converted object

        Raises:
            ConfigurationError: A soft-deleteable class is misconfigured
            Exception: Whatever a notification listener raises
        """
        settings = get_config()
        if not settings.enabled or session.info.get(BYPASS_KEY):
            return []

        clock = self.clock or settings.now
        transitions = []

        # Reading an expired marker must not trigger a nested flush
        with session.no_autoflush:
            for entity in self.adapter.get_scheduled_deletions(session):
                transition = self._rewrite_entity(session, entity, clock)
                if transition is not None:
                    transitions.append(transition)

        if transitions:
            logger.info(
                "Converted %d scheduled deletion(s) into soft deletes",
                len(transitions),
            )

        return transitions

    def _rewrite_entity(
        self, session: Session, entity: Any, clock: Clock
    ) -> Optional[MarkerTransition]:
        config = self.resolver.resolve(type(entity))
        if not config.enabled:
            return None

        field_name = config.field_name
        old_value = getattr(entity, field_name)

        if is_already_marked(config.marker_kind, old_value):
            logger.debug(
                "%s already soft deleted, leaving hard delete in place",
                config.entity_type,
            )
            return None

        args = SoftDeleteEventArgs(entity=entity, session=session)
        self.event_manager.dispatch(SoftDeleteEvent.PRE_SOFT_DELETE, args)

        new_value = next_marker_value(config.marker_kind, clock)
        setattr(entity, field_name, new_value)

        self.adapter.persist(session, entity)
        if self.adapter.supports_property_changed:
            self.adapter.mark_property_changed(
                session, entity, field_name, old_value, new_value
            )
        else:
            metadata = self.adapter.get_type_metadata(type(entity))
            self.adapter.recompute_change_set(session, metadata, entity)

        self.event_manager.dispatch(SoftDeleteEvent.POST_SOFT_DELETE, args)

        return MarkerTransition(
            entity_type=config.entity_type,
            field_name=field_name,
            old_value=old_value,
            new_value=new_value,
        )


@contextmanager
def hard_delete(session: Session) -> Iterator[Session]:
    """
    Flush physical deletes for ``session`` inside the block.

    Example:
        with hard_delete(session):
            session.delete(comment)
            session.flush()
    """
    previous = session.info.get(BYPASS_KEY, False)
    session.info[BYPASS_KEY] = True
    try:
        yield session
    finally:
        session.info[BYPASS_KEY] = previous


# Global listener instance
_listener: Optional[SoftDeleteableListener] = None


def get_listener() -> SoftDeleteableListener:
    """Get the global soft delete listener."""
    global _listener

    if _listener is None:
        _listener = SoftDeleteableListener()

    return _listener


def register_soft_delete_listener(
    target: Any, listener: Optional[SoftDeleteableListener] = None
) -> SoftDeleteableListener:
    """
    Register the soft delete listener on ``target``.

    Args:
        target: ``Session`` instance, ``sessionmaker`` or the ``Session`` class
        listener: Listener to register; the global listener when omitted

    Returns:
        The registered listener
    """
    listener = listener or get_listener()
    listener.register(target)
    return listener
