"""
Pagination models for HAL list responses.

HalPageInfo is rendered as the 'page' block; SortCriteria only feeds the
'sort' query parameters of navigation links.
"""

from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from halwrap.core.constants import (
    DEFAULT_PAGE_NUMBER,
    DEFAULT_PAGE_SIZE,
    PAGE_NUMBER_KEY,
    PAGE_SIZE_KEY,
    PAGE_TOTAL_ELEMENTS_KEY,
    PAGE_TOTAL_PAGES_KEY,
    SORT_ASCENDING,
    SORT_DESCENDING,
)


class SortDirection(str, Enum):
    """Sort direction, valued as rendered in query strings."""

    ASCENDING = SORT_ASCENDING
    DESCENDING = SORT_DESCENDING


class SortOrder(BaseModel):
    """Sort order for a single property."""

    model_config = ConfigDict(frozen=True)

    property: str = Field(min_length=1)
    direction: SortDirection = SortDirection.ASCENDING

    @classmethod
    def parse(cls, value: str) -> "SortOrder":
        """
        Parse a 'property,direction' query value.

        The direction is optional and case-insensitive; it defaults to ascending.
        """
        property_name, _, direction = value.partition(",")
        property_name = property_name.strip()
        if not property_name:
            raise ValueError(f"Sort value has no property: '{value}'")

        direction = direction.strip().lower()
        if not direction:
            return cls(property=property_name)
        return cls(property=property_name, direction=SortDirection(direction))

    def to_query_value(self) -> str:
        return f"{self.property},{self.direction.value}"


class SortCriteria(BaseModel):
    """Ordered list of sort orders."""

    model_config = ConfigDict(frozen=True)

    orders: Tuple[SortOrder, ...] = ()

    @classmethod
    def by(cls, *properties: str, direction: SortDirection = SortDirection.ASCENDING) -> "SortCriteria":
        return cls(orders=tuple(SortOrder(property=name, direction=direction) for name in properties))

    @classmethod
    def parse(cls, values: Optional[Iterable[str]]) -> "SortCriteria":
        """Parse repeated 'sort' query values."""
        if not values:
            return cls()
        return cls(orders=tuple(SortOrder.parse(value) for value in values if value.strip()))

    def and_then(self, other: "SortCriteria") -> "SortCriteria":
        return SortCriteria(orders=self.orders + other.orders)

    @property
    def is_empty(self) -> bool:
        return not self.orders

    def to_query_values(self) -> List[str]:
        return [order.to_query_value() for order in self.orders]

    def __iter__(self) -> Iterator[SortOrder]:
        return iter(self.orders)

    def __len__(self) -> int:
        return len(self.orders)


class HalPageInfo(BaseModel):
    """Page metadata of a list wrapper."""

    model_config = ConfigDict(frozen=True)

    page_size: int = Field(ge=1, description="Maximum number of items per page")
    current_page_number: int = Field(ge=0, description="Zero-based number of this page")
    total_elements: int = Field(ge=0, description="Number of items over all pages")
    total_pages: int = Field(ge=0, description="Number of pages")

    @property
    def has_next(self) -> bool:
        return self.current_page_number + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.current_page_number > 0

    def to_hal(self) -> Dict[str, int]:
        return {
            PAGE_SIZE_KEY: self.page_size,
            PAGE_TOTAL_ELEMENTS_KEY: self.total_elements,
            PAGE_TOTAL_PAGES_KEY: self.total_pages,
            PAGE_NUMBER_KEY: self.current_page_number,
        }


class PageRequest(BaseModel):
    """Page number, size and sort requested by a client."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=DEFAULT_PAGE_NUMBER, ge=0, description="Zero-based page number")
    size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, description="Maximum items per page")
    sort: SortCriteria = Field(default_factory=SortCriteria)

    @property
    def offset(self) -> int:
        """Number of items to skip."""
        return self.page * self.size
