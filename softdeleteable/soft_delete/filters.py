"""
Query filter hiding soft-deleted rows.

The filter only affects ORM SELECT statements; flushes and the rewrite of
deletions are untouched. Pass ``include_deleted=True`` as an execution
option to see every row:

    session.query(Comment).execution_options(include_deleted=True).all()
"""

import logging
from typing import Any, List, Optional, Type

from sqlalchemy import event
from sqlalchemy.orm import ORMExecuteState, with_loader_criteria

from .mixins import active_criterion
from .resolver import ConfigurationResolver, get_resolver

logger = logging.getLogger(__name__)

INCLUDE_DELETED_OPTION = "include_deleted"


class SoftDeleteableFilter:
    """
    Adds soft delete criteria to ORM queries for the classes of one registry.

    Args:
        base_class: Declarative base (or anything with a ``registry``)
        resolver: Configuration resolver; the global one when omitted
    """

    def __init__(
        self, base_class: Any, resolver: Optional[ConfigurationResolver] = None
    ):
        self.registry = getattr(base_class, "registry", base_class)
        self.resolver = resolver or get_resolver()

    def enable(self, target: Any) -> None:
        """Listen to ``do_orm_execute`` on a session, sessionmaker or class."""
        if not event.contains(target, "do_orm_execute", self.on_execute):
            event.listen(target, "do_orm_execute", self.on_execute)

    def disable(self, target: Any) -> None:
        if event.contains(target, "do_orm_execute", self.on_execute):
            event.remove(target, "do_orm_execute", self.on_execute)

    def soft_deleteable_classes(self) -> List[Type[Any]]:
        """Mapped classes of the registry with soft delete enabled."""
        return self.resolver.configured_types(
            mapper.class_ for mapper in self.registry.mappers
        )

    def on_execute(self, execute_state: ORMExecuteState) -> None:
        """``do_orm_execute`` hook."""
        if (
            not execute_state.is_select
            or execute_state.is_column_load
            or execute_state.is_relationship_load
            or execute_state.execution_options.get(INCLUDE_DELETED_OPTION, False)
        ):
            return

        options = []
        for entity_type in self.soft_deleteable_classes():
            config = self.resolver.resolve(entity_type)
            options.append(
                with_loader_criteria(
                    entity_type,
                    active_criterion(entity_type, config),
                    include_aliases=True,
                )
            )

        if options:
            execute_state.statement = execute_state.statement.options(*options)
