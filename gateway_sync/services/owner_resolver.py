"""
Owner resolution — mapping a rejected gateway entity back to the Kubernetes
object that generated it.

The entity-error parser depends only on the :class:`OwnerResolver` protocol.
:class:`SnapshotOwnerResolver` is the adapter used in production: it indexes
the declarative configuration most recently submitted to the admin API and
reads the owner's identity from the ownership tags every generated entity
carries (``k8s-kind:Ingress``, ``k8s-uid:...`` and so on).

Thread safety:
    All indexes are built in ``__init__`` and never mutated afterwards, so a
    single resolver can serve concurrent lookups from several push attempts.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Union

from gateway_sync.core.config import settings
from gateway_sync.models.resource_error import OwnerRef
from gateway_sync.schemas.declarative import ENTITY_TYPES, DeclarativeConfig

CorrelationKey = Union[int, str]

# Children the declarative format allows nesting under a parent entity.
_NESTED_CHILDREN: Dict[str, tuple] = {
    "services": ("routes", "plugins"),
    "routes": ("plugins",),
    "consumers": ("plugins",),
    "upstreams": ("targets",),
    "certificates": ("snis",),
}


class OwnerResolver(Protocol):
    """Lookup capability consumed by the entity-error parser."""

    def lookup(self, entity_type: str, key: CorrelationKey) -> Optional[OwnerRef]:
        """
        Return the owner of an entity, or ``None`` when it cannot be identified.

        ``key`` is the entity's position within its type in the submitted
        configuration (legacy error shape) or its name (flattened shape).
        """
        ...


def normalize_entity_type(entity_type: str) -> str:
    """Map ``route`` / ``routes`` / ``Routes`` to the plural snapshot key."""
    name = entity_type.strip().lower()
    if name in ENTITY_TYPES:
        return name
    if f"{name}s" in ENTITY_TYPES:
        return f"{name}s"
    return name


class SnapshotOwnerResolver:
    """
    Resolve owners against the last submitted declarative configuration.

    Positional lookups index the top-level list of each entity type, which is
    what the legacy error shape counts. Name lookups also see entities nested
    under a parent (routes under services, targets under upstreams, ...),
    because the flattened shape reports those by name too.
    """

    def __init__(
        self,
        config: Union[DeclarativeConfig, Mapping[str, Any]],
        tag_prefixes: Optional[Mapping[str, str]] = None,
    ):
        if not isinstance(config, DeclarativeConfig):
            config = DeclarativeConfig.model_validate(config)

        self._prefixes = {
            "kind": settings.K8S_KIND_TAG_PREFIX,
            "name": settings.K8S_NAME_TAG_PREFIX,
            "namespace": settings.K8S_NAMESPACE_TAG_PREFIX,
            "uid": settings.K8S_UID_TAG_PREFIX,
            "group": settings.K8S_GROUP_TAG_PREFIX,
            "version": settings.K8S_VERSION_TAG_PREFIX,
        }
        if tag_prefixes:
            self._prefixes.update(tag_prefixes)

        self._by_position: Dict[str, List[Dict[str, Any]]] = {}
        self._by_name: Dict[str, Dict[str, Dict[str, Any]]] = {}

        for entity_type, entities in _entity_lists(config):
            self._by_position[entity_type] = entities
            for entity in entities:
                self._index_by_name(entity_type, entity)

    def _index_by_name(self, entity_type: str, entity: Dict[str, Any]) -> None:
        names = self._by_name.setdefault(entity_type, {})
        for key in (entity.get("name"), entity.get("id")):
            # First submitted entity wins on a duplicate name
            if isinstance(key, str) and key and key not in names:
                names[key] = entity

        for child_type in _NESTED_CHILDREN.get(entity_type, ()):
            for child in entity.get(child_type) or ():
                if isinstance(child, dict):
                    self._index_by_name(child_type, child)

    def _snapshot_type(self, entity_type: str) -> str:
        """Like :func:`normalize_entity_type`, but also pluralizes custom types."""
        name = normalize_entity_type(entity_type)
        if name not in self._by_position and f"{name}s" in self._by_position:
            return f"{name}s"
        return name

    def lookup(self, entity_type: str, key: CorrelationKey) -> Optional[OwnerRef]:
        entity_type = self._snapshot_type(entity_type)

        entity: Optional[Dict[str, Any]] = None
        if isinstance(key, int) and not isinstance(key, bool):
            entities = self._by_position.get(entity_type, [])
            if 0 <= key < len(entities):
                entity = entities[key]
        elif isinstance(key, str):
            entity = self._by_name.get(entity_type, {}).get(key)

        if entity is None:
            return None
        return self.owner_from_tags(entity.get("tags") or ())

    def owner_from_tags(self, tags: Iterable[Any]) -> Optional[OwnerRef]:
        """
        Read the owner identity out of an entity's ownership tags.

        Returns ``None`` when the kind, name or UID tag is missing.
        """
        values: Dict[str, str] = {}
        for tag in tags:
            if not isinstance(tag, str):
                continue
            for field, prefix in self._prefixes.items():
                if tag.startswith(prefix) and field not in values:
                    values[field] = tag[len(prefix):]

        if not all(values.get(field) for field in ("kind", "name", "uid")):
            return None

        group = values.get("group", "")
        version = values.get("version", "")
        api_version = f"{group}/{version}" if group else version

        return OwnerRef(
            kind=values["kind"],
            namespace=values.get("namespace", ""),
            name=values["name"],
            api_version=api_version,
            uid=values["uid"],
        )


def _entity_lists(config: DeclarativeConfig) -> Iterable[tuple]:
    """Yield ``(entity_type, entities)`` for every entity list in ``config``."""
    for entity_type in ENTITY_TYPES:
        yield entity_type, [e for e in getattr(config, entity_type) if isinstance(e, dict)]

    # Custom entity types (plugin-defined DAOs) arrive as extra fields
    for entity_type, value in (config.model_extra or {}).items():
        if isinstance(value, list):
            yield normalize_entity_type(entity_type), [e for e in value if isinstance(e, dict)]
