"""
Assemblers turning domain objects into HAL wrappers.

An assembler declares the type of its resources and how to link them; the
wrapping operations themselves are final. Subclasses implement:

* ``build_self_link_for_resource(resource)``
* ``build_self_link_for_resource_list()``
* optionally ``build_other_links_for_resource(resource)`` and
  ``build_other_links_for_resource_list()``

Embedding assemblers additionally declare ``embedded_type`` and implement
``build_self_link_for_embedded(embedded)`` (plus optionally
``build_other_links_for_embedded(embedded)``).
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar, final

from halwrap.core.constants import REL_SELF
from halwrap.models.link import Link
from halwrap.models.pagination import SortCriteria
from halwrap.models.wrappers import HalEmbeddedWrapper, HalListWrapper, HalResourceWrapper
from halwrap.services.pagination_service import assemble_page_info, derive_navigation_links

logger = logging.getLogger(__name__)

R = TypeVar("R")
E = TypeVar("E")


class HalAssemblerBase(ABC, Generic[R]):
    """Link callbacks and list assembly shared by all assemblers."""

    resource_type: Optional[Type[Any]] = None

    @abstractmethod
    def build_self_link_for_resource(self, resource: R) -> Link:
        """Link to a single resource; its relation is set to 'self'."""
        pass

    def build_other_links_for_resource(self, resource: R) -> Iterable[Link]:
        return ()

    @abstractmethod
    def build_self_link_for_resource_list(self) -> Link:
        """Link to the list resource; also the base of pagination links."""
        pass

    def build_other_links_for_resource_list(self) -> Iterable[Link]:
        return ()

    @final
    def create_empty_list_wrapper(self) -> HalListWrapper:
        """Build a list wrapper with no items, named after ``resource_type``."""
        return self._assemble_list([])

    def _resource_links(self, resource: R) -> List[Link]:
        return [
            self.build_self_link_for_resource(resource).with_relation(REL_SELF),
            *self.build_other_links_for_resource(resource),
        ]

    def _wrap_resource(self, resource: R) -> HalResourceWrapper:
        return HalResourceWrapper.wrap(resource, self.resource_type).with_links(self._resource_links(resource))

    def _assemble_list(
        self,
        wrappers: Sequence[HalResourceWrapper],
        total_elements: Optional[int] = None,
        page_size: Optional[int] = None,
        offset: int = 0,
        sort: Optional[SortCriteria] = None,
    ) -> HalListWrapper:
        """
        Wrap resource wrappers into a list with its links.

        Page metadata and navigation links are added when both total_elements
        and page_size are given; otherwise the list gets a plain self link.
        """
        list_wrapper = HalListWrapper.wrap(wrappers, self.resource_type)
        self_link = self.build_self_link_for_resource_list()
        other_links = self.build_other_links_for_resource_list()

        if total_elements is None or page_size is None:
            logger.debug(f"Assembled list of {len(wrappers)} items")
            return list_wrapper.with_links(self_link.with_relation(REL_SELF), other_links)

        page_info = assemble_page_info(page_size, total_elements, offset)
        navigation_links = derive_navigation_links(self_link, page_info, sort)
        logger.debug(
            f"Assembled page {page_info.current_page_number} of {page_info.total_pages} "
            f"with {len(wrappers)} items"
        )
        return list_wrapper.with_page_info(page_info).with_links(navigation_links, other_links)


class EmbeddingAssemblerBase(HalAssemblerBase[R], Generic[R, E]):
    """Link callbacks for assemblers that embed a second resource type."""

    embedded_type: Optional[Type[Any]] = None

    @abstractmethod
    def build_self_link_for_embedded(self, embedded: E) -> Link:
        """Link to a single embedded resource; its relation is set to 'self'."""
        pass

    def build_other_links_for_embedded(self, embedded: E) -> Iterable[Link]:
        return ()

    def _wrap_embedded(self, embedded: E) -> HalEmbeddedWrapper:
        return HalEmbeddedWrapper.wrap(embedded, self.embedded_type).with_links(
            self.build_self_link_for_embedded(embedded).with_relation(REL_SELF),
            self.build_other_links_for_embedded(embedded),
        )

    def _wrap_with_embedded(self, resource: R, embedded: Optional[E]) -> HalResourceWrapper:
        wrapper = self._wrap_resource(resource)
        if embedded is None:
            return wrapper
        return wrapper.with_embedded(self._wrap_embedded(embedded))

    def _wrap_with_embedded_list(self, resource: R, embedded_list: Iterable[E]) -> HalResourceWrapper:
        embedded_wrappers = [self._wrap_embedded(embedded) for embedded in embedded_list]
        return self._wrap_resource(resource).with_embedded_list(embedded_wrappers, self.embedded_type)


class SimpleHalAssembler(HalAssemblerBase[R]):
    """Wraps already available resources without embedded data."""

    @final
    def wrap_in_resource_wrapper(self, resource: R) -> HalResourceWrapper:
        return self._wrap_resource(resource)

    @final
    def wrap_in_list_wrapper(
        self,
        resources: Iterable[R],
        total_elements: Optional[int] = None,
        page_size: Optional[int] = None,
        offset: int = 0,
        sort: Optional[SortCriteria] = None,
    ) -> HalListWrapper:
        """
        Wrap resources into a list wrapper, keeping their order.

        Args:
            resources: The resources of this list (or page)
            total_elements: Number of resources over all pages, for paged lists
            page_size: Maximum resources per page, for paged lists
            offset: Number of resources before this page
            sort: Sort criteria echoed in the navigation links
        """
        wrappers = [self._wrap_resource(resource) for resource in resources]
        return self._assemble_list(wrappers, total_elements, page_size, offset, sort)


class EmbeddingHalAssembler(EmbeddingAssemblerBase[R, E]):
    """Wraps already available resources together with embedded resources."""

    @final
    def wrap_in_resource_wrapper(self, resource: R, embedded: Optional[E] = None) -> HalResourceWrapper:
        """Wrap a resource; a None embedded value leaves the embedded slot absent."""
        return self._wrap_with_embedded(resource, embedded)

    @final
    def wrap_in_resource_wrapper_with_embedded_list(self, resource: R, embedded_list: Iterable[E]) -> HalResourceWrapper:
        """Wrap a resource with a list of embedded resources (rendered even when empty)."""
        return self._wrap_with_embedded_list(resource, embedded_list)

    @final
    def wrap_in_list_wrapper(
        self,
        resources_with_embedded: Iterable[Tuple[R, Optional[E]]],
        total_elements: Optional[int] = None,
        page_size: Optional[int] = None,
        offset: int = 0,
        sort: Optional[SortCriteria] = None,
    ) -> HalListWrapper:
        """
        Wrap (resource, embedded) pairs into a list wrapper.

        Raises:
            HeterogeneousEmbeddedShape: If some pairs have an embedded value and others None
        """
        wrappers = [
            self._wrap_with_embedded(resource, embedded)
            for resource, embedded in resources_with_embedded
        ]
        return self._assemble_list(wrappers, total_elements, page_size, offset, sort)

    @final
    def wrap_in_list_wrapper_with_embedded_lists(
        self,
        resources_with_embedded_lists: Iterable[Tuple[R, Iterable[E]]],
        total_elements: Optional[int] = None,
        page_size: Optional[int] = None,
        offset: int = 0,
        sort: Optional[SortCriteria] = None,
    ) -> HalListWrapper:
        """Wrap (resource, embedded list) pairs into a list wrapper."""
        wrappers = [
            self._wrap_with_embedded_list(resource, embedded_list)
            for resource, embedded_list in resources_with_embedded_lists
        ]
        return self._assemble_list(wrappers, total_elements, page_size, offset, sort)
