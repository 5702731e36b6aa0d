"""
Page metadata and navigation links for list wrappers.

Navigation links are built from the caller's base link: they keep its path
and query and differ only in their 'page', 'size' and 'sort' values.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlsplit, urlunsplit

from halwrap.core.constants import (
    QUERY_PARAM_PAGE,
    QUERY_PARAM_SIZE,
    QUERY_PARAM_SORT,
    REL_FIRST,
    REL_LAST,
    REL_NEXT,
    REL_PREV,
    REL_SELF,
)
from halwrap.core.exceptions import InvalidPageParameters
from halwrap.models.link import Link
from halwrap.models.pagination import HalPageInfo, SortCriteria
from halwrap.services.uri_template_engine import expand_template_partially, parse_template

logger = logging.getLogger(__name__)

PAGING_PARAMETERS = (QUERY_PARAM_PAGE, QUERY_PARAM_SIZE, QUERY_PARAM_SORT)


def _validate_page_size_and_total(page_size: int, total_elements: int) -> None:
    if page_size <= 0:
        raise InvalidPageParameters(f"Page size must be positive, got {page_size}")
    if total_elements < 0:
        raise InvalidPageParameters(f"Total elements must be non-negative, got {total_elements}")


def calculate_total_pages(page_size: int, total_elements: int) -> int:
    """Number of pages needed for total_elements items, 0 for no items."""
    return (total_elements + page_size - 1) // page_size


def assemble_page_info(page_size: int, total_elements: int, offset: int = 0) -> HalPageInfo:
    """
    Build page metadata from an offset.

    Args:
        page_size: Maximum items per page
        total_elements: Number of items over all pages
        offset: Number of items skipped before this page

    Returns:
        Page metadata with the page number floor(offset / page_size)

    Raises:
        InvalidPageParameters: If a value is out of range
    """
    _validate_page_size_and_total(page_size, total_elements)
    if offset < 0:
        raise InvalidPageParameters(f"Offset must be non-negative, got {offset}")

    return HalPageInfo(
        page_size=page_size,
        current_page_number=offset // page_size,
        total_elements=total_elements,
        total_pages=calculate_total_pages(page_size, total_elements),
    )


def assemble_page_info_with_page_number(page_size: int, total_elements: int, page_number: int) -> HalPageInfo:
    """Build page metadata from a zero-based page number."""
    _validate_page_size_and_total(page_size, total_elements)
    if page_number < 0:
        raise InvalidPageParameters(f"Page number must be non-negative, got {page_number}")

    return HalPageInfo(
        page_size=page_size,
        current_page_number=page_number,
        total_elements=total_elements,
        total_pages=calculate_total_pages(page_size, total_elements),
    )


def _strip_paging_parameters(href: str) -> str:
    parts = urlsplit(href)
    if not parts.query:
        return href

    kept = [
        parameter
        for parameter in parts.query.split("&")
        if parameter and parameter.split("=", 1)[0] not in PAGING_PARAMETERS
    ]
    return urlunsplit(parts._replace(query="&".join(kept)))


def _page_link_template(base_link: Link) -> str:
    """Base href plus the paging variables it does not already declare, ahead of any fragment."""
    if base_link.templated:
        href = base_link.href
        declared = set(parse_template(href).variable_names)
    else:
        href = _strip_paging_parameters(base_link.href)
        declared = set()

    missing = [
        f"{name}*" if name == QUERY_PARAM_SORT else name
        for name in PAGING_PARAMETERS
        if name not in declared
    ]
    if not missing:
        return href

    location, marker, fragment = href.partition("#")
    return f"{location}{{?{','.join(missing)}}}{marker}{fragment}"


def _page_link(
    base_link: Link,
    template: str,
    rel: str,
    page_number: int,
    page_size: int,
    sort: Optional[SortCriteria],
) -> Link:
    bindings: Dict[str, Any] = {
        QUERY_PARAM_PAGE: page_number,
        QUERY_PARAM_SIZE: page_size,
        QUERY_PARAM_SORT: sort.to_query_values() if sort else None,
    }
    return base_link.model_copy(update={"href": expand_template_partially(template, bindings), "rel": rel})


def build_page_link(
    base_link: Link,
    rel: str,
    page_number: int,
    page_size: int,
    sort: Optional[SortCriteria] = None,
) -> Link:
    """
    Derive the link to one page from the list's base link.

    Only the paging variables are expanded; other template variables of the
    base stay in the href, and its title, type, hreflang and deprecation
    carry over.
    """
    return _page_link(base_link, _page_link_template(base_link), rel, page_number, page_size, sort)


def derive_navigation_links(
    base_link: Link,
    page_info: HalPageInfo,
    sort: Optional[SortCriteria] = None,
) -> Tuple[Link, ...]:
    """
    Derive self, first, prev, next and last links for a page.

    'self' is always present. 'first' and 'prev' only appear past the first
    page, 'next' and 'last' only before the last page, and none of them
    when there are no elements.

    Args:
        base_link: Link to the list resource, without paging parameters
        page_info: Metadata of the current page
        sort: Sort criteria rendered as 'sort=property,direction' parameters

    Returns:
        The navigation links, in the order self, first, prev, next, last
    """
    template = _page_link_template(base_link)
    current = page_info.current_page_number
    size = page_info.page_size

    links: List[Link] = [_page_link(base_link, template, REL_SELF, current, size, sort)]

    # An empty collection has no pages to navigate to, whatever the offset
    if page_info.total_pages == 0:
        return tuple(links)

    if current > 0:
        links.append(_page_link(base_link, template, REL_FIRST, 0, size, sort))
        links.append(_page_link(base_link, template, REL_PREV, current - 1, size, sort))

    if current + 1 < page_info.total_pages:
        links.append(_page_link(base_link, template, REL_NEXT, current + 1, size, sort))

    if current < page_info.total_pages - 1:
        links.append(_page_link(base_link, template, REL_LAST, page_info.total_pages - 1, size, sort))

    logger.debug(f"Derived navigation links {[link.rel for link in links]} for page {current}")
    return tuple(links)
