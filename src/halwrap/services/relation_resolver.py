"""
Relation-name resolution.

Maps a resource type to the singular and plural names used as keys under
'_embedded'. Explicit registrations win; otherwise the name is derived from
the type name. Resolution needs only the type, so empty collections can
still be named from a type hint.
"""

import logging
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from halwrap.core.config import HalSettings, resolve_settings
from halwrap.core.exceptions import UnresolvableRelationName
from halwrap.models.relation import RelationName

logger = logging.getLogger(__name__)

T = TypeVar("T")


def derive_relation_name(resource_type: Type[Any], settings: Optional[HalSettings] = None) -> RelationName:
    """
    Derive a relation name from the type name.

    Strips at most one configured suffix (so 'OrderDTO' becomes 'order'),
    lower-cases the rest and appends the plural suffix.
    """
    settings = resolve_settings(settings)
    name = resource_type.__name__

    for suffix in settings.strip_suffixes:
        if suffix and name.endswith(suffix) and len(name) > len(suffix):
            name = name[:-len(suffix)]
            break

    singular = name.lower()
    return RelationName(singular=singular, plural=f"{singular}{settings.plural_suffix}")


class RelationNameRegistry:
    """
    Registration table of explicit relation names.

    Lookups walk the type's MRO, so a subclass inherits the name registered
    for its base class unless it has its own registration.
    """

    def __init__(self, settings: Optional[HalSettings] = None):
        """
        Initialize an empty registry.

        Args:
            settings: Settings for derived names; the process-wide settings
                are used when omitted
        """
        self._settings = settings
        self._names: Dict[type, RelationName] = {}

    def register(self, resource_type: Type[Any], singular: str, plural: Optional[str] = None) -> RelationName:
        """
        Register the relation name of a type.

        Args:
            resource_type: The resource type
            singular: Name of a single resource
            plural: Name of a list of resources; defaults to singular plus
                the configured plural suffix

        Returns:
            The registered relation name
        """
        if plural is None:
            plural = f"{singular}{resolve_settings(self._settings).plural_suffix}"

        relation_name = RelationName(singular=singular, plural=plural)
        if resource_type in self._names and self._names[resource_type] != relation_name:
            logger.warning(
                f"Replacing relation name of {resource_type.__name__}: "
                f"{self._names[resource_type]} -> {relation_name}"
            )

        self._names[resource_type] = relation_name
        logger.debug(f"Registered relation name {relation_name} for {resource_type.__name__}")
        return relation_name

    def unregister(self, resource_type: Type[Any]) -> None:
        self._names.pop(resource_type, None)

    def clear(self) -> None:
        self._names.clear()

    def lookup(self, resource_type: Type[Any]) -> Optional[RelationName]:
        """Get the registered name of a type or of its nearest registered base."""
        for candidate in getattr(resource_type, "__mro__", (resource_type,)):
            if candidate in self._names:
                return self._names[candidate]
        return None

    def resolve(self, resource_type: Optional[Type[Any]] = None, instance: Any = None) -> RelationName:
        """
        Resolve the relation name of a type.

        Args:
            resource_type: The resource type; takes precedence over the instance
            instance: A resource, used only when no type is given

        Returns:
            The registered or derived relation name

        Raises:
            UnresolvableRelationName: If neither a type nor an instance is given
        """
        if resource_type is None:
            if instance is None:
                raise UnresolvableRelationName()
            resource_type = type(instance)

        registered = self.lookup(resource_type)
        if registered is not None:
            return registered

        derived = derive_relation_name(resource_type, self._settings)
        logger.debug(f"Derived relation name {derived} for {resource_type.__name__}")
        return derived

    def __contains__(self, resource_type: Type[Any]) -> bool:
        return resource_type in self._names


default_registry = RelationNameRegistry()


def relation_name(
    singular: str,
    plural: Optional[str] = None,
    registry: Optional[RelationNameRegistry] = None,
) -> Callable[[Type[T]], Type[T]]:
    """
    Class decorator registering the relation name of a resource type.

    Example:
        @relation_name("person", "people")
        class Person(BaseModel):
            ...
    """
    def decorator(resource_type: Type[T]) -> Type[T]:
        (registry or default_registry).register(resource_type, singular, plural)
        return resource_type

    return decorator


def resolve_relation_name(
    resource_type: Optional[Type[Any]] = None,
    instance: Any = None,
    registry: Optional[RelationNameRegistry] = None,
) -> RelationName:
    """Resolve a relation name against the given or the default registry."""
    return (registry or default_registry).resolve(resource_type, instance)
