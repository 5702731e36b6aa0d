"""
HAL+JSON rendering of wrappers.

Produces plain, JSON-ready dictionaries:

* resource fields flattened at the document root
* '_links' keyed by relation
* '_embedded' keyed by the singular name (single resource) or the plural
  name (list, possibly empty); omitted when the slot is absent
* 'page' for list wrappers carrying page metadata
"""

import logging
from dataclasses import is_dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from pydantic import BaseModel
from pydantic_core import to_jsonable_python

from halwrap.core.config import HalSettings, resolve_settings
from halwrap.core.constants import EMBEDDED_KEY, LINKS_KEY, PAGE_KEY
from halwrap.models.link import Link
from halwrap.models.wrappers import (
    EmbeddedShape,
    HalEmbeddedWrapper,
    HalListWrapper,
    HalResourceWrapper,
)
from halwrap.services.relation_resolver import RelationNameRegistry, default_registry

logger = logging.getLogger(__name__)


class HalRenderer:
    """Renders wrappers into HAL documents."""

    def __init__(
        self,
        registry: Optional[RelationNameRegistry] = None,
        settings: Optional[HalSettings] = None,
    ):
        """
        Initialize the renderer.

        Args:
            registry: Relation names for '_embedded' keys (default registry if omitted)
            settings: Rendering settings (process-wide settings if omitted)
        """
        self.registry = registry or default_registry
        self.settings = settings

    def render(self, wrapper: Any) -> Dict[str, Any]:
        """Render any wrapper type."""
        if isinstance(wrapper, HalListWrapper):
            return self.render_list(wrapper)
        if isinstance(wrapper, HalResourceWrapper):
            return self.render_resource(wrapper)
        if isinstance(wrapper, HalEmbeddedWrapper):
            return self.render_embedded(wrapper)
        raise TypeError(f"Cannot render {type(wrapper).__name__} as HAL")

    def render_resource(self, wrapper: HalResourceWrapper) -> Dict[str, Any]:
        document = self.flatten_resource(wrapper.resource)

        shape = wrapper.embedded_shape
        if shape is EmbeddedShape.SINGLE:
            embedded = wrapper.embedded
            name = self.registry.resolve(embedded.resource_type, embedded.resource).singular
            document[EMBEDDED_KEY] = {name: self.render_embedded(embedded)}
        elif shape is EmbeddedShape.LIST:
            items = wrapper.embedded
            if wrapper.embedded_type is not None or not items:
                name = self.registry.resolve(wrapper.embedded_type).plural
            else:
                name = self.registry.resolve(items[0].resource_type, items[0].resource).plural
            document[EMBEDDED_KEY] = {name: [self.render_embedded(item) for item in items]}

        self._add_links(document, wrapper.links)
        return document

    def render_embedded(self, wrapper: HalEmbeddedWrapper) -> Dict[str, Any]:
        document = self.flatten_resource(wrapper.resource)
        self._add_links(document, wrapper.links)
        return document

    def render_list(self, wrapper: HalListWrapper) -> Dict[str, Any]:
        """Render a list; the items always appear, as an empty array if there are none."""
        if wrapper.resource_type is not None or wrapper.is_empty:
            name = self.registry.resolve(wrapper.resource_type).plural
        else:
            first = wrapper.items[0]
            name = self.registry.resolve(first.resource_type, first.resource).plural

        document: Dict[str, Any] = {
            EMBEDDED_KEY: {name: [self.render_resource(item) for item in wrapper.items]}
        }
        self._add_links(document, wrapper.links)

        if wrapper.page_info is not None:
            document[PAGE_KEY] = wrapper.page_info.to_hal()
        return document

    def render_links(self, links: Iterable[Link]) -> Dict[str, Dict[str, Any]]:
        rendered = {}
        for link in links:
            if link.rel is None:
                logger.warning(f"Skipping link without relation: {link.href}")
                continue
            rendered[link.rel] = link.to_hal()
        return rendered

    def flatten_resource(self, resource: Any) -> Dict[str, Any]:
        """
        Convert a resource into a dictionary of its JSON fields.

        Pydantic models, dataclasses, mappings and plain objects (public
        attributes) are supported.

        Raises:
            TypeError: If the resource does not serialize to a JSON object
        """
        exclude_none = resolve_settings(self.settings).exclude_none_fields

        if not isinstance(resource, (BaseModel, Mapping)) and not is_dataclass(resource) and hasattr(resource, "__dict__"):
            resource = {key: value for key, value in vars(resource).items() if not key.startswith("_")}

        fields = to_jsonable_python(resource, by_alias=True, exclude_none=exclude_none)
        if not isinstance(fields, dict):
            raise TypeError(f"Resource of type {type(resource).__name__} does not serialize to a JSON object")

        if exclude_none:
            fields = {key: value for key, value in fields.items() if value is not None}
        return fields

    def _add_links(self, document: Dict[str, Any], links: Iterable[Link]) -> None:
        rendered = self.render_links(links)
        if rendered:
            document[LINKS_KEY] = rendered
