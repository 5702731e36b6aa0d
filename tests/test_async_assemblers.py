"""
Unit tests for the async assemblers.

Tests absent results, pairwise awaiting and order preservation.
"""

import asyncio
from typing import AsyncIterator, List

import pytest
from pydantic import BaseModel

# Import test dependencies
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from halwrap.models.link import Link
from halwrap.models.wrappers import EmbeddedShape
from halwrap.services.async_assemblers import (
    AsyncEmbeddingHalAssembler,
    AsyncHalAssembler,
    collect_values,
    gather_all,
    resolve_value,
)


class Order(BaseModel):
    id: int
    customer_id: int = 0


class Customer(BaseModel):
    id: int


class AsyncOrderAssembler(AsyncHalAssembler[Order]):
    resource_type = Order

    def build_self_link_for_resource(self, resource: Order) -> Link:
        return Link.of("/orders/{id}").expand(id=resource.id)

    def build_self_link_for_resource_list(self) -> Link:
        return Link.of("/orders")


class AsyncOrderCustomerAssembler(AsyncEmbeddingHalAssembler[Order, Customer]):
    resource_type = Order
    embedded_type = Customer

    def build_self_link_for_resource(self, resource: Order) -> Link:
        return Link.of("/orders/{id}").expand(id=resource.id)

    def build_self_link_for_resource_list(self) -> Link:
        return Link.of("/orders")

    def build_self_link_for_embedded(self, embedded: Customer) -> Link:
        return Link.of("/customers/{id}").expand(id=embedded.id)


async def produce(value, delay: float = 0):
    await asyncio.sleep(delay)
    return value


async def stream(values: List[Order]) -> AsyncIterator[Order]:
    for value in values:
        await asyncio.sleep(0)
        yield value


async def failing_stream() -> AsyncIterator[Order]:
    await asyncio.sleep(0)
    raise RuntimeError("stream failed")
    yield


async def record_cancellation(cancelled: List[str], name: str, delay: float = 10):
    try:
        await asyncio.sleep(delay)
    except asyncio.CancelledError:
        cancelled.append(name)
        raise
    return name


class TestProducers:
    """Test producer helpers."""

    @pytest.mark.asyncio
    async def test_resolve_value(self):
        """Test awaitables and plain values."""
        assert await resolve_value(produce(1)) == 1
        assert await resolve_value(2) == 2

    @pytest.mark.asyncio
    async def test_collect_values(self):
        """Test async iterables, awaitables of lists and plain iterables."""
        orders = [Order(id=1), Order(id=2)]

        assert await collect_values(stream(orders)) == orders
        assert await collect_values(produce(orders)) == orders
        assert await collect_values(iter(orders)) == orders
        assert await collect_values(None) == []

    @pytest.mark.asyncio
    async def test_gather_all_keeps_input_order(self):
        """Test that results follow the input order, not completion order."""
        assert await gather_all(produce("slow", 0.02), produce("fast"), produce("mid", 0.01)) == ["slow", "fast", "mid"]
        assert await gather_all() == []

    @pytest.mark.asyncio
    async def test_gather_all_cancels_siblings(self):
        """Test that a failure cancels the pending awaitables."""
        cancelled: List[str] = []

        with pytest.raises(RuntimeError):
            await gather_all(collect_values(failing_stream()), record_cancellation(cancelled, "total"))

        assert cancelled == ["total"]


class TestAsyncHalAssembler:
    """Test the flat async assembler."""

    @pytest.mark.asyncio
    async def test_wrap_resource(self):
        """Test wrapping a produced resource."""
        wrapper = await AsyncOrderAssembler().wrap_in_resource_wrapper(produce(Order(id=5)))

        assert wrapper.get_link("self").href == "/orders/5"

    @pytest.mark.asyncio
    async def test_absent_resource(self):
        """Test that an absent resource yields no wrapper."""
        assert await AsyncOrderAssembler().wrap_in_resource_wrapper(produce(None)) is None

    @pytest.mark.asyncio
    async def test_wrap_stream(self):
        """Test wrapping a stream in production order."""
        orders = [Order(id=2), Order(id=1), Order(id=3)]

        wrapper = await AsyncOrderAssembler().wrap_in_list_wrapper(stream(orders))

        assert [item.resource.id for item in wrapper.items] == [2, 1, 3]

    @pytest.mark.asyncio
    async def test_empty_stream(self):
        """Test that an empty stream yields an empty list wrapper."""
        wrapper = await AsyncOrderAssembler().wrap_in_list_wrapper(stream([]))

        assert wrapper.to_hal()["_embedded"] == {"orders": []}

    @pytest.mark.asyncio
    async def test_paged_stream_with_produced_total(self):
        """Test a produced total count for paged lists."""
        wrapper = await AsyncOrderAssembler().wrap_in_list_wrapper(
            stream([Order(id=1), Order(id=2)]),
            total_elements=produce(5),
            page_size=2,
        )

        assert wrapper.page_info.total_pages == 3
        assert wrapper.get_link("next").href == "/orders?page=1&size=2"

    @pytest.mark.asyncio
    async def test_failing_stream_cancels_total(self):
        """Test that the produced total is cancelled when the stream fails."""
        cancelled: List[str] = []

        with pytest.raises(RuntimeError, match="stream failed"):
            await AsyncOrderAssembler().wrap_in_list_wrapper(
                failing_stream(),
                total_elements=record_cancellation(cancelled, "total"),
                page_size=2,
            )

        assert cancelled == ["total"]


class TestAsyncEmbeddingHalAssembler:
    """Test the embedding async assembler."""

    @pytest.mark.asyncio
    async def test_wrap_with_embedded(self):
        """Test that both producers are combined."""
        wrapper = await AsyncOrderCustomerAssembler().wrap_in_resource_wrapper(
            produce(Order(id=1)), produce(Customer(id=9))
        )

        assert wrapper.embedded_shape == EmbeddedShape.SINGLE
        assert wrapper.embedded.get_link("self").href == "/customers/9"

    @pytest.mark.asyncio
    async def test_absent_resource_with_embedded(self):
        """Test that an absent main resource yields no wrapper."""
        result = await AsyncOrderCustomerAssembler().wrap_in_resource_wrapper(
            produce(None), produce(Customer(id=9))
        )

        assert result is None

    @pytest.mark.asyncio
    async def test_absent_embedded(self):
        """Test that an absent embedded value leaves the slot absent."""
        wrapper = await AsyncOrderCustomerAssembler().wrap_in_resource_wrapper(produce(Order(id=1)), produce(None))

        assert wrapper.embedded_shape == EmbeddedShape.ABSENT

    @pytest.mark.asyncio
    async def test_wrap_with_empty_embedded_stream(self):
        """Test an empty embedded stream renders an empty array."""
        wrapper = await AsyncOrderCustomerAssembler().wrap_in_resource_wrapper_with_embedded_list(
            produce(Order(id=1)), stream([])
        )

        assert wrapper.to_hal()["_embedded"] == {"customers": []}

    @pytest.mark.asyncio
    async def test_list_order_survives_slow_lookups(self):
        """Test that per-item lookups finishing out of order do not reorder items."""
        orders = [Order(id=1, customer_id=10), Order(id=2, customer_id=20), Order(id=3, customer_id=30)]
        delays = {10: 0.03, 20: 0.0, 30: 0.01}

        async def load_customer(order: Order) -> Customer:
            await asyncio.sleep(delays[order.customer_id])
            return Customer(id=order.customer_id)

        wrapper = await AsyncOrderCustomerAssembler().wrap_in_list_wrapper(stream(orders), load_customer)

        assert [item.resource.id for item in wrapper.items] == [1, 2, 3]
        assert [item.embedded.resource.id for item in wrapper.items] == [10, 20, 30]

    @pytest.mark.asyncio
    async def test_list_with_embedded_lists(self):
        """Test per-item embedded streams."""
        orders = [Order(id=1), Order(id=2)]

        def load_customers(order: Order):
            return stream([Customer(id=order.id * 10), Customer(id=order.id * 10 + 1)])

        wrapper = await AsyncOrderCustomerAssembler().wrap_in_list_wrapper_with_embedded_lists(orders, load_customers)
        document = wrapper.to_hal()

        customer_ids = [
            [customer["id"] for customer in order["_embedded"]["customers"]]
            for order in document["_embedded"]["orders"]
        ]
        assert customer_ids == [[10, 11], [20, 21]]
