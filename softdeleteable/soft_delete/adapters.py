"""
Engine adapters.

The listener talks to the persistence engine only through an
:class:`EngineAdapter`. :class:`SQLAlchemyAdapter` is the implementation for
the SQLAlchemy ORM session.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Type

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapper, Session
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.types import TypeEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeMetadata:
    """Column-level view of a mapped class."""

    entity_type: Type[Any]
    mapper: Optional[Mapper]

    @property
    def is_mapped(self) -> bool:
        return self.mapper is not None

    def field_exists(self, name: str) -> bool:
        """Return True if ``name`` is a mapped column attribute."""
        if self.mapper is None:
            return False
        return name in self.mapper.column_attrs

    def field_type(self, name: str) -> Optional[TypeEngine]:
        """Return the SQL type of column attribute ``name``, if mapped."""
        mapper = self.mapper
        if mapper is None or name not in mapper.column_attrs:
            return None
        return mapper.column_attrs[name].columns[0].type


class EngineAdapter(ABC):
    """Operations the soft delete listener needs from the engine."""

    # Whether the engine accepts a declared field change; when False the
    # listener asks for a full change set recomputation instead.
    supports_property_changed: bool = True

    @abstractmethod
    def get_scheduled_deletions(self, session: Any) -> List[Any]:
        """Objects scheduled for physical deletion in this flush."""

    @abstractmethod
    def get_type_metadata(self, entity_type: Type[Any]) -> TypeMetadata:
        """Column metadata for ``entity_type``."""

    @abstractmethod
    def mark_property_changed(
        self, session: Any, entity: Any, field_name: str, old: Any, new: Any
    ) -> None:
        """Declare a field change without running dirty detection."""

    @abstractmethod
    def recompute_change_set(
        self, session: Any, metadata: TypeMetadata, entity: Any
    ) -> None:
        """Recompute the full change set of ``entity``."""

    @abstractmethod
    def persist(self, session: Any, entity: Any) -> None:
        """Register ``entity`` as a pending write instead of a delete."""


class SQLAlchemyAdapter(EngineAdapter):
    """
    Adapter for the SQLAlchemy ORM ``Session``.

    Args:
        declare_changes: Declare the marker change with ``flag_modified``.
            When False, every changed column attribute of the object is
            flagged from its attribute history instead.
    """

    def __init__(self, declare_changes: bool = True):
        self.supports_property_changed = declare_changes

    def get_scheduled_deletions(self, session: Session) -> List[Any]:
        # Snapshot: persist() removes objects from session.deleted
        return list(session.deleted)

    def get_type_metadata(self, entity_type: Type[Any]) -> TypeMetadata:
        mapper = sa_inspect(entity_type, raiseerr=False)
        if mapper is not None and not isinstance(mapper, Mapper):
            mapper = None
        return TypeMetadata(entity_type=entity_type, mapper=mapper)

    def mark_property_changed(
        self, session: Session, entity: Any, field_name: str, old: Any, new: Any
    ) -> None:
        flag_modified(entity, field_name)
        logger.debug(
            "Declared %s.%s change %r -> %r",
            type(entity).__name__,
            field_name,
            old,
            new,
        )

    def recompute_change_set(
        self, session: Session, metadata: TypeMetadata, entity: Any
    ) -> None:
        if metadata.mapper is None:
            return

        state = sa_inspect(entity)
        changed = []
        for attr in metadata.mapper.column_attrs:
            if state.attrs[attr.key].history.has_changes():
                flag_modified(entity, attr.key)
                changed.append(attr.key)

        logger.debug(
            "Recomputed change set of %s: %s",
            type(entity).__name__,
            ", ".join(changed) or "no changes",
        )

    def persist(self, session: Session, entity: Any) -> None:
        session.add(entity)
