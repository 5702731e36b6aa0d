"""
FastAPI dependencies for HAL endpoints.

Provides page requests parsed from query parameters and the base link of
the current request.
"""

from typing import List, Optional

from fastapi import Query, Request

from halwrap.core.config import get_settings
from halwrap.core.constants import DEFAULT_PAGE_NUMBER
from halwrap.core.exceptions import InvalidPageParameters
from halwrap.models.link import Link
from halwrap.models.pagination import PageRequest, SortCriteria


def get_page_request(
    page: int = Query(DEFAULT_PAGE_NUMBER, ge=0, description="Zero-based page number"),
    size: Optional[int] = Query(None, ge=1, description="Maximum number of items per page"),
    sort: Optional[List[str]] = Query(None, description="Sort order as 'property,direction'"),
) -> PageRequest:
    """
    Parse page, size and sort query parameters.

    Raises:
        InvalidPageParameters: If size exceeds the configured maximum or a
            sort value is malformed
    """
    settings = get_settings()
    size = size if size is not None else settings.default_page_size
    if size > settings.max_page_size:
        raise InvalidPageParameters(f"Page size must not exceed {settings.max_page_size}, got {size}")

    try:
        sort_criteria = SortCriteria.parse(sort)
    except ValueError as invalid_sort:
        raise InvalidPageParameters(f"Invalid sort parameter: {invalid_sort}") from invalid_sort

    return PageRequest(page=page, size=size, sort=sort_criteria)


def get_request_link(request: Request) -> Link:
    """Absolute link to the requested path, without query parameters."""
    return Link.of(request.url.path).prepend_base_url(str(request.base_url))
