"""
HAL wrapper models.

A HalResourceWrapper holds one main resource, its links and an optional
embedded slot. The slot is either absent, a single HalEmbeddedWrapper, or a
(possibly empty) tuple of them: an absent slot omits '_embedded' while an
empty list renders an empty array, so the two are kept apart.

HalEmbeddedWrapper has no embedded slot of its own, which caps nesting at
one level. HalListWrapper holds resource wrappers that all share the same
embedded shape.
"""

from enum import Enum
from typing import Any, Dict, Generic, Iterable, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from halwrap.core.exceptions import (
    DuplicateRelation,
    HeterogeneousEmbeddedShape,
    UnresolvableRelationName,
)
from halwrap.models.link import Link
from halwrap.models.pagination import HalPageInfo

R = TypeVar("R")
E = TypeVar("E")


class EmbeddedShape(str, Enum):
    """Shape of the embedded slot of a resource wrapper."""

    ABSENT = "absent"
    SINGLE = "single"
    LIST = "list"


def _flatten_links(links: Iterable[Union[Link, Iterable[Link]]]) -> List[Link]:
    flattened = []
    for entry in links:
        if isinstance(entry, Link):
            flattened.append(entry)
        else:
            flattened.extend(entry)
    return flattened


def check_unique_relations(links: Iterable[Link]) -> Tuple[Link, ...]:
    """
    Ensure no two links share a relation.

    Links without a relation are not subject to the check.

    Raises:
        DuplicateRelation: If a relation appears twice
    """
    links = tuple(links)
    seen = set()
    for link in links:
        if link.rel is None:
            continue
        if link.rel in seen:
            raise DuplicateRelation(link.rel)
        seen.add(link.rel)
    return links


class _LinkedWrapper(BaseModel):
    """Common link handling for all wrappers."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    links: Tuple[Link, ...] = Field(default=(), description="Hypermedia links, unique per relation")

    @field_validator("links")
    @classmethod
    def _links_have_unique_relations(cls, links: Tuple[Link, ...]) -> Tuple[Link, ...]:
        return check_unique_relations(links)

    def with_links(self, *links: Union[Link, Iterable[Link]]):
        """
        Add links to a copy of this wrapper.

        Accepts links and iterables of links.

        Raises:
            DuplicateRelation: If a relation is supplied twice or already present
        """
        return self._copy_with(links=self.links + tuple(_flatten_links(links)))

    def get_link(self, rel: str) -> Optional[Link]:
        """Get a link by relation."""
        for link in self.links:
            if link.rel == rel:
                return link
        return None

    def _copy_with(self, **changes: Any):
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update(changes)
        return type(self)(**data)

    def to_hal(self, renderer=None) -> Dict[str, Any]:
        """Render this wrapper as a HAL document."""
        from halwrap.services.hal_renderer import HalRenderer

        return (renderer or HalRenderer()).render(self)


class HalEmbeddedWrapper(_LinkedWrapper, Generic[E]):
    """A secondary resource embedded into a main resource."""

    resource: E
    resource_type: Optional[Type[Any]] = Field(
        default=None, description="Type used to name the embedded resource"
    )

    @model_validator(mode="after")
    def _check_resource(self):
        if self.resource is None:
            raise ValueError("An embedded wrapper requires a resource")
        if isinstance(self.resource, _LinkedWrapper):
            raise ValueError(f"An embedded resource cannot be a {type(self.resource).__name__}")
        return self

    @classmethod
    def wrap(cls, resource: E, resource_type: Optional[Type[Any]] = None) -> "HalEmbeddedWrapper[E]":
        return cls(resource=resource, resource_type=resource_type)


def _as_embedded_wrapper(value: Any) -> HalEmbeddedWrapper:
    if isinstance(value, HalEmbeddedWrapper):
        return value
    if isinstance(value, (list, tuple)):
        raise TypeError("Use with_embedded_list to embed a list of resources")
    # Embedded resources cannot carry an embedded slot of their own
    if isinstance(value, _LinkedWrapper):
        raise TypeError(f"Cannot embed a {type(value).__name__}, embed its resource instead")
    return HalEmbeddedWrapper.wrap(value)


class HalResourceWrapper(_LinkedWrapper, Generic[R, E]):
    """A main resource with links and an optional embedded slot."""

    resource: R
    resource_type: Optional[Type[Any]] = Field(
        default=None, description="Type used to name the resource inside a list"
    )
    embedded: Union[None, HalEmbeddedWrapper, Tuple[HalEmbeddedWrapper, ...]] = None
    embedded_type: Optional[Type[Any]] = Field(
        default=None, description="Type used to name the embedded resources, required for empty lists"
    )

    @model_validator(mode="after")
    def _resource_is_present(self):
        if self.resource is None:
            raise ValueError("A resource wrapper requires a resource")
        return self

    @classmethod
    def wrap(cls, resource: R, resource_type: Optional[Type[Any]] = None) -> "HalResourceWrapper[R, Any]":
        """Wrap a resource with no links and no embedded slot."""
        return cls(resource=resource, resource_type=resource_type)

    @property
    def embedded_shape(self) -> EmbeddedShape:
        if self.embedded is None:
            return EmbeddedShape.ABSENT
        if isinstance(self.embedded, HalEmbeddedWrapper):
            return EmbeddedShape.SINGLE
        return EmbeddedShape.LIST

    def with_embedded(self, embedded: Optional[Any]) -> "HalResourceWrapper[R, E]":
        """
        Set a single embedded resource.

        None clears the slot, so '_embedded' is omitted when rendering.
        Plain objects are wrapped into a HalEmbeddedWrapper without links.
        """
        if embedded is None:
            return self._copy_with(embedded=None)
        return self._copy_with(embedded=_as_embedded_wrapper(embedded))

    def with_embedded_list(
        self,
        embedded_items: Iterable[Any],
        embedded_type: Optional[Type[Any]] = None,
    ) -> "HalResourceWrapper[R, E]":
        """
        Set a list of embedded resources.

        The slot is a list even when no items are given; an empty list renders
        as an empty array, so its name must come from a type hint.

        Raises:
            UnresolvableRelationName: If the list is empty and no type is known
        """
        items = tuple(_as_embedded_wrapper(item) for item in embedded_items)
        embedded_type = embedded_type or self.embedded_type

        if not items and embedded_type is None:
            raise UnresolvableRelationName("empty embedded list without an embedded type")

        return self._copy_with(embedded=items, embedded_type=embedded_type)


class HalListWrapper(_LinkedWrapper, Generic[R, E]):
    """A list of resource wrappers with optional page metadata."""

    items: Tuple[HalResourceWrapper, ...] = ()
    page_info: Optional[HalPageInfo] = None
    resource_type: Optional[Type[Any]] = Field(
        default=None, description="Type used to name the list, required when it is empty"
    )

    @model_validator(mode="after")
    def _items_are_consistent(self):
        shapes = [item.embedded_shape for item in self.items]
        if len(set(shapes)) > 1:
            raise HeterogeneousEmbeddedShape(shapes)
        if not self.items and self.resource_type is None:
            raise UnresolvableRelationName("empty list without a resource type")
        return self

    @classmethod
    def wrap(
        cls,
        items: Iterable[HalResourceWrapper],
        resource_type: Optional[Type[Any]] = None,
    ) -> "HalListWrapper[R, E]":
        """
        Wrap resource wrappers into a list.

        Raises:
            HeterogeneousEmbeddedShape: If the items' embedded slots differ in shape
            UnresolvableRelationName: If there are no items and no resource type
        """
        return cls(items=tuple(items), resource_type=resource_type)

    @classmethod
    def empty(cls, resource_type: Type[Any]) -> "HalListWrapper[R, E]":
        return cls(items=(), resource_type=resource_type)

    @property
    def embedded_shape(self) -> EmbeddedShape:
        if not self.items:
            return EmbeddedShape.ABSENT
        return self.items[0].embedded_shape

    @property
    def is_empty(self) -> bool:
        return not self.items

    def with_page_info(self, page_info: Optional[HalPageInfo]) -> "HalListWrapper[R, E]":
        return self._copy_with(page_info=page_info)
