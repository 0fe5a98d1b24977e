"""
SQLAlchemy mixins for soft delete functionality.

A class becomes soft-deleteable by inheriting one of the mixins below or by
declaring ``__soft_deleteable__`` itself, e.g. with :func:`soft_deleteable`.
"""

from datetime import datetime
from typing import Any, Callable, Optional, Type, TypeVar

from sqlalchemy import Boolean, DateTime, false, or_, true
from sqlalchemy.orm import Mapped, Query, Session, mapped_column
from sqlalchemy.sql.elements import ColumnElement

from .models import MarkerKind, SoftDeleteConfig
from .resolver import get_resolver
from .strategy import is_already_marked

T = TypeVar("T")


def soft_deleteable(
    field_name: Optional[str] = None, enabled: bool = True
) -> Callable[[Type[T]], Type[T]]:
    """
    Class decorator declaring a mapped class soft-deleteable.

    Args:
        field_name: Marker field; the configured default field when omitted
        enabled: Set to False to switch soft delete off for a subclass

    Usage:
        @soft_deleteable(field_name="removed_at")
        class Comment(Base):
            __tablename__ = "comments"
            id = Column(Integer, primary_key=True)
            removed_at = Column(DateTime, nullable=True)
    """

    def decorator(cls: Type[T]) -> Type[T]:
        setattr(
            cls,
            "__soft_deleteable__",
            {"field_name": field_name, "enabled": enabled},
        )
        return cls

    return decorator


def active_criterion(entity_type: Any, config: SoftDeleteConfig) -> ColumnElement:
    """SQL criterion matching rows whose marker records no deletion."""
    column = getattr(entity_type, config.field_name)
    if config.marker_kind == MarkerKind.DATETIME:
        return column.is_(None)
    return or_(column.is_(None), column == false())


def deleted_criterion(entity_type: Any, config: SoftDeleteConfig) -> ColumnElement:
    """SQL criterion matching soft-deleted rows."""
    column = getattr(entity_type, config.field_name)
    if config.marker_kind == MarkerKind.DATETIME:
        return column.isnot(None)
    return column == true()


class _SoftDeleteableBase:
    """Helpers shared by the soft delete mixins."""

    @classmethod
    def soft_delete_config(cls) -> SoftDeleteConfig:
        return get_resolver().resolve(cls)

    @property
    def is_soft_deleted(self) -> bool:
        """True if the marker field records a deletion."""
        config = self.soft_delete_config()
        return is_already_marked(config.marker_kind, getattr(self, config.field_name))

    def restore(self) -> None:
        """Clear the marker field so the record is active again."""
        config = self.soft_delete_config()
        if config.marker_kind == MarkerKind.DATETIME:
            setattr(self, config.field_name, None)
        else:
            setattr(self, config.field_name, False)

    @classmethod
    def query_active(cls, session: Session) -> Query[Any]:
        """
        Return query for active (non-deleted) records only.

        Args:
            session: SQLAlchemy session

        Returns:
            Query filtered to exclude deleted records
        """
        return session.query(cls).filter(
            active_criterion(cls, cls.soft_delete_config())
        )

    @classmethod
    def query_deleted(cls, session: Session) -> Query[Any]:
        """
        Return query for deleted records only.

        Args:
            session: SQLAlchemy session

        Returns:
            Query filtered to include only deleted records
        """
        return session.query(cls).filter(
            deleted_criterion(cls, cls.soft_delete_config())
        )

    @classmethod
    def query_all(cls, session: Session) -> Query[Any]:
        """
        Return query for all records including deleted.

        The soft delete filter, when enabled, is bypassed.
        """
        return session.query(cls).execution_options(include_deleted=True)


class SoftDeleteableMixin(_SoftDeleteableBase):
    """
    Mixin adding a ``deleted_at`` timestamp marker.

    Usage:
        class Comment(Base, SoftDeleteableMixin):
            __tablename__ = 'comments'
            id = Column(Integer, primary_key=True)
            body = Column(String)
    """

    __soft_deleteable__ = "deleted_at"

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )


class BooleanSoftDeleteableMixin(_SoftDeleteableBase):
    """Mixin adding an ``is_deleted`` flag marker."""

    __soft_deleteable__ = "is_deleted"

    is_deleted: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, index=True
    )
