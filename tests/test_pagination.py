"""
Unit tests for page metadata and navigation links.

Tests page arithmetic and the self/first/prev/next/last derivation.
"""

import pytest

# Import test dependencies
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from halwrap.core.exceptions import InvalidPageParameters, MissingMandatoryVariable
from halwrap.models.link import Link
from halwrap.models.pagination import PageRequest, SortCriteria, SortDirection, SortOrder
from halwrap.services.pagination_service import (
    assemble_page_info,
    assemble_page_info_with_page_number,
    build_page_link,
    derive_navigation_links,
)


def links_by_rel(links):
    return {link.rel: link.href for link in links}


class TestPageInfo:
    """Test page metadata arithmetic."""

    def test_first_page(self):
        """Test page number and total pages at offset 0."""
        page_info = assemble_page_info(page_size=2, total_elements=6, offset=0)

        assert page_info.current_page_number == 0
        assert page_info.total_pages == 3
        assert page_info.has_next is True
        assert page_info.has_previous is False

    def test_last_page(self):
        """Test page number from an offset."""
        page_info = assemble_page_info(page_size=2, total_elements=6, offset=4)

        assert page_info.current_page_number == 2
        assert page_info.total_pages == 3
        assert page_info.has_next is False

    @pytest.mark.parametrize("page_size,total,offset,number,pages", [
        (10, 0, 0, 0, 0),
        (10, 1, 0, 0, 1),
        (10, 10, 0, 0, 1),
        (10, 11, 0, 0, 2),
        (10, 95, 57, 5, 10),
        (3, 7, 2, 0, 3),
    ])
    def test_arithmetic(self, page_size, total, offset, number, pages):
        """Test floor page number and ceiling page count."""
        page_info = assemble_page_info(page_size, total, offset)

        assert page_info.current_page_number == number
        assert page_info.total_pages == pages

    def test_with_page_number(self):
        """Test assembling from a page number instead of an offset."""
        page_info = assemble_page_info_with_page_number(page_size=5, total_elements=12, page_number=2)

        assert page_info.current_page_number == 2
        assert page_info.total_pages == 3

    @pytest.mark.parametrize("page_size,total,offset", [
        (0, 10, 0),
        (-1, 10, 0),
        (10, -1, 0),
        (10, 10, -5),
    ])
    def test_invalid_parameters(self, page_size, total, offset):
        """Test that out-of-range values are rejected."""
        with pytest.raises(InvalidPageParameters):
            assemble_page_info(page_size, total, offset)

    def test_page_request_offset(self):
        """Test the offset derived from page and size."""
        assert PageRequest(page=3, size=25).offset == 75


class TestSortCriteria:
    """Test sort criteria parsing and rendering."""

    def test_parse(self):
        """Test parsing repeated sort values."""
        sort = SortCriteria.parse(["name,desc", "created", "id,ASC"])

        assert [order.to_query_value() for order in sort] == ["name,desc", "created,asc", "id,asc"]
        assert sort.orders[0].direction == SortDirection.DESCENDING

    def test_parse_invalid(self):
        """Test that unknown directions and missing properties fail."""
        with pytest.raises(ValueError):
            SortCriteria.parse(["name,sideways"])
        with pytest.raises(ValueError):
            SortOrder.parse(",asc")

    def test_by_and_then(self):
        """Test combining sort criteria."""
        sort = SortCriteria.by("name").and_then(SortCriteria.by("id", direction=SortDirection.DESCENDING))

        assert sort.to_query_values() == ["name,asc", "id,desc"]
        assert SortCriteria().is_empty is True


class TestNavigationLinks:
    """Test navigation link derivation."""

    def test_first_of_three_pages(self):
        """Test links on the first page: self, next and last only."""
        page_info = assemble_page_info(page_size=2, total_elements=6, offset=0)

        links = links_by_rel(derive_navigation_links(Link.of("/orders"), page_info))

        assert links == {
            "self": "/orders?page=0&size=2",
            "next": "/orders?page=1&size=2",
            "last": "/orders?page=2&size=2",
        }

    def test_last_of_three_pages(self):
        """Test links on the last page: self, prev and first only."""
        page_info = assemble_page_info(page_size=2, total_elements=6, offset=4)

        links = links_by_rel(derive_navigation_links(Link.of("/orders"), page_info))

        assert links == {
            "self": "/orders?page=2&size=2",
            "first": "/orders?page=0&size=2",
            "prev": "/orders?page=1&size=2",
        }

    def test_middle_page(self):
        """Test that all five links appear in the middle."""
        page_info = assemble_page_info(page_size=2, total_elements=6, offset=2)

        links = derive_navigation_links(Link.of("/orders"), page_info)

        assert [link.rel for link in links] == ["self", "first", "prev", "next", "last"]
        assert links_by_rel(links)["prev"] == "/orders?page=0&size=2"
        assert links_by_rel(links)["next"] == "/orders?page=2&size=2"

    @pytest.mark.parametrize("page_size,offset", [(1, 0), (10, 0), (10, 30)])
    def test_no_elements_only_self(self, page_size, offset):
        """Test that an empty collection only gets a self link."""
        page_info = assemble_page_info(page_size, 0, offset)

        links = derive_navigation_links(Link.of("/orders"), page_info)

        assert page_info.total_pages == 0
        assert [link.rel for link in links] == ["self"]

    def test_single_page(self):
        """Test that a single page only gets a self link."""
        page_info = assemble_page_info(page_size=10, total_elements=4, offset=0)

        assert [link.rel for link in derive_navigation_links(Link.of("/orders"), page_info)] == ["self"]

    def test_sort_parameters(self):
        """Test that sort criteria appear as property,direction pairs."""
        page_info = assemble_page_info(page_size=2, total_elements=6, offset=0)
        sort = SortCriteria.parse(["name,desc", "id,asc"])

        links = links_by_rel(derive_navigation_links(Link.of("/orders"), page_info, sort))

        assert links["self"] == "/orders?page=0&size=2&sort=name,desc&sort=id,asc"
        assert links["next"] == "/orders?page=1&size=2&sort=name,desc&sort=id,asc"

    def test_empty_sort_is_omitted(self):
        """Test that no sort parameter is rendered for empty criteria."""
        page_info = assemble_page_info(page_size=2, total_elements=2, offset=0)

        links = links_by_rel(derive_navigation_links(Link.of("/orders"), page_info, SortCriteria()))

        assert links["self"] == "/orders?page=0&size=2"

    def test_base_query_is_kept(self):
        """Test that other query parameters of the base link are kept."""
        page_info = assemble_page_info(page_size=2, total_elements=6, offset=0)

        links = links_by_rel(derive_navigation_links(Link.of("/orders?status=open&page=7&size=9"), page_info))

        assert links["self"] == "/orders?status=open&page=0&size=2"
        assert links["next"] == "/orders?status=open&page=1&size=2"

    def test_absolute_base_link(self):
        """Test that navigation links stay relative to the given base."""
        page_info = assemble_page_info(page_size=5, total_elements=6, offset=0)

        links = links_by_rel(derive_navigation_links(Link.of("http://testserver/orders"), page_info))

        assert links["last"] == "http://testserver/orders?page=1&size=5"

    def test_templated_base_link(self):
        """Test that declared paging variables are expanded and the others kept."""
        page_info = assemble_page_info(page_size=2, total_elements=6, offset=0)

        links = derive_navigation_links(Link.of("/orders{?size,page,status}"), page_info)
        self_link = links[0]

        assert self_link.href == "/orders?size=2&page=0{&status}"
        assert self_link.templated
        assert self_link.variable_names == ("status",)
        assert self_link.expand(status="open").href == "/orders?size=2&page=0&status=open"

    def test_templated_base_link_keeps_query_variables(self):
        """Test that paging parameters are added to a base with other optional variables."""
        page_info = assemble_page_info(page_size=2, total_elements=6, offset=2)

        links = links_by_rel(derive_navigation_links(Link.of("/orders{?status,expand*}"), page_info))

        assert links["self"] == "/orders?page=1&size=2{&status,expand*}"
        assert links["first"] == "/orders?page=0&size=2{&status,expand*}"
        assert links["next"] == "/orders?page=2&size=2{&status,expand*}"

    def test_templated_base_link_with_path_variable(self):
        """Test that an unbound path variable stays in the navigation links."""
        page_info = assemble_page_info(page_size=2, total_elements=6, offset=0)

        links = derive_navigation_links(Link.of("/customers/{customerId}/orders"), page_info)

        assert links[0].href == "/customers/{customerId}/orders?page=0&size=2"
        assert links[0].expand(customerId=7).href == "/customers/7/orders?page=0&size=2"

        with pytest.raises(MissingMandatoryVariable):
            links[0].expand()

    def test_base_link_attributes_are_kept(self):
        """Test that navigation links carry the attributes of the base link."""
        page_info = assemble_page_info(page_size=2, total_elements=6, offset=2)
        base_link = Link.of("/orders").with_title("Orders").with_type("application/hal+json").with_deprecated(True)

        links = derive_navigation_links(base_link, page_info)

        for link in links:
            assert link.title == "Orders"
            assert link.type == "application/hal+json"
            assert link.deprecated is True
        assert [link.rel for link in links] == ["self", "first", "prev", "next", "last"]
        assert base_link.rel is None

    def test_fragment_stays_last(self):
        """Test that paging parameters are placed before a fragment."""
        page_info = assemble_page_info(page_size=2, total_elements=6, offset=0)

        links = links_by_rel(derive_navigation_links(Link.of("/orders#top"), page_info))

        assert links["self"] == "/orders?page=0&size=2#top"
        assert links["next"] == "/orders?page=1&size=2#top"

    def test_fragment_after_query(self):
        """Test a base link with both a query and a fragment."""
        page_info = assemble_page_info(page_size=2, total_elements=2, offset=0)

        links = links_by_rel(derive_navigation_links(Link.of("/orders?status=open&page=3#top"), page_info))

        assert links["self"] == "/orders?status=open&page=0&size=2#top"

    def test_build_page_link(self):
        """Test deriving a single page link."""
        base_link = Link.of("/orders{?status}").with_title("Orders")

        link = build_page_link(base_link, "next", 3, 10, SortCriteria.parse(["name,desc"]))

        assert link.rel == "next"
        assert link.title == "Orders"
        assert link.href == "/orders?page=3&size=10&sort=name,desc{&status}"
