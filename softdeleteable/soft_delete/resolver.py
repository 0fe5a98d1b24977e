"""
Configuration resolver for soft-deleteable classes.

Reads the ``__soft_deleteable__`` declaration of a mapped class, validates it
against the class's mapper and caches the result per class.
"""

import logging
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type

from ..config import SoftDeleteableSettings, get_config
from .adapters import EngineAdapter, SQLAlchemyAdapter
from .exceptions import ConfigurationError
from .models import SoftDeleteConfig
from .strategy import resolve_marker_kind

logger = logging.getLogger(__name__)

DECLARATION_ATTRIBUTE = "__soft_deleteable__"


def read_declaration(
    entity_type: Type[Any], default_field_name: str
) -> Optional[Tuple[str, bool]]:
    """
    Read the soft delete declaration of a class.

    ``__soft_deleteable__`` may be ``True`` (use the default field), a field
    name, or a mapping with ``field_name`` and ``enabled`` keys. ``False``,
    ``None`` or a missing attribute mean the class is not soft-deleteable.

    Returns:
        ``(field_name, enabled)`` or ``None`` when nothing is declared
    """
    declaration = getattr(entity_type, DECLARATION_ATTRIBUTE, None)

    if declaration is None or declaration is False:
        return None
    if declaration is True:
        return default_field_name, True
    if isinstance(declaration, str):
        return declaration, True
    if isinstance(declaration, Mapping):
        field_name = declaration.get("field_name") or default_field_name
        return field_name, bool(declaration.get("enabled", True))

    raise ConfigurationError(
        entity_type.__name__,
        None,
        f"{DECLARATION_ATTRIBUTE} must be a bool, a field name or a mapping, "
        f"got {type(declaration).__name__}",
    )


class ConfigurationResolver:
    """
    Resolves and caches :class:`SoftDeleteConfig` per mapped class.

    Args:
        adapter: Engine adapter used to read column metadata
        settings: Settings to use; the global settings when omitted
    """

    def __init__(
        self,
        adapter: Optional[EngineAdapter] = None,
        settings: Optional[SoftDeleteableSettings] = None,
    ):
        self.adapter = adapter or SQLAlchemyAdapter()
        self._settings = settings
        self._cache: Dict[Type[Any], SoftDeleteConfig] = {}
        self._lock = threading.Lock()

    @property
    def settings(self) -> SoftDeleteableSettings:
        return self._settings or get_config()

    def resolve(self, entity_type: Type[Any]) -> SoftDeleteConfig:
        """
        Resolve the soft delete configuration of ``entity_type``.

        Raises:
            ConfigurationError: The declared marker field is not a mapped
                column, or its type is rejected in strict mode
        """
        settings = self.settings

        if settings.cache_configuration:
            cached = self._cache.get(entity_type)
            if cached is not None:
                return cached

        config = self._load(entity_type, settings)

        if settings.cache_configuration:
            with self._lock:
                config = self._cache.setdefault(entity_type, config)

        return config

    def clear_cache(self) -> None:
        """Forget all resolved configuration, e.g. after a metadata reload."""
        with self._lock:
            self._cache.clear()

    def configured_types(self, entity_types: Iterable[Type[Any]]) -> List[Type[Any]]:
        """Return the classes among ``entity_types`` with soft delete enabled."""
        return [cls for cls in entity_types if self.resolve(cls).enabled]

    def _load(
        self, entity_type: Type[Any], settings: SoftDeleteableSettings
    ) -> SoftDeleteConfig:
        name = entity_type.__name__
        declaration = read_declaration(entity_type, settings.default_field_name)

        if declaration is None:
            return SoftDeleteConfig.disabled(name)

        field_name, enabled = declaration
        if not enabled:
            return SoftDeleteConfig(
                entity_type=name, enabled=False, field_name=field_name
            )

        metadata = self.adapter.get_type_metadata(entity_type)
        if not metadata.is_mapped:
            raise ConfigurationError(name, field_name, "class is not mapped")
        if not metadata.field_exists(field_name):
            logger.error("Soft delete field %s.%s is not mapped", name, field_name)
            raise ConfigurationError(
                name, field_name, "field is not a mapped column attribute"
            )

        column_type = metadata.field_type(field_name)
        marker_kind = resolve_marker_kind(
            column_type, strict=settings.strict_marker_types
        )
        if marker_kind is None:
            logger.error(
                "Soft delete field %s.%s has unsupported type %s",
                name,
                field_name,
                column_type,
            )
            raise ConfigurationError(
                name,
                field_name,
                f"column type {column_type} is neither DateTime nor Boolean",
            )

        logger.debug(
            "Resolved soft delete for %s on %s (%s marker)",
            name,
            field_name,
            marker_kind.value,
        )
        return SoftDeleteConfig(
            entity_type=name,
            enabled=True,
            field_name=field_name,
            marker_kind=marker_kind,
        )


# Global resolver instance
_resolver: Optional[ConfigurationResolver] = None


def get_resolver() -> ConfigurationResolver:
    """Get the global configuration resolver."""
    global _resolver

    if _resolver is None:
        _resolver = ConfigurationResolver()

    return _resolver
