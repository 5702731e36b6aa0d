"""
Assemblers for asynchronously produced resources.

Single values come as awaitables (a None result means "absent"); sequences
come as async iterables, awaitables of iterables, or plain iterables. Each
producer is consumed once. Pairs of producers are awaited together with
``gather_all``, which keeps results in input order, so list items are never
reordered by per-item embedded lookups. A failing producer cancels its
siblings.
"""

import asyncio
import inspect
import logging
from typing import Any, AsyncIterable, Awaitable, Callable, Iterable, List, Optional, Union, final

from halwrap.models.pagination import SortCriteria
from halwrap.models.wrappers import HalListWrapper, HalResourceWrapper
from halwrap.services.assemblers import E, EmbeddingAssemblerBase, HalAssemblerBase, R

logger = logging.getLogger(__name__)

Producer = Union[Awaitable[Any], Any]
SequenceProducer = Union[AsyncIterable[Any], Awaitable[Iterable[Any]], Iterable[Any]]


async def resolve_value(producer: Producer) -> Any:
    """Await a producer, or return a plain value as is."""
    if inspect.isawaitable(producer):
        return await producer
    return producer


async def collect_values(producer: Optional[SequenceProducer]) -> List[Any]:
    """Gather all values of a sequence producer, in production order."""
    if producer is None:
        return []
    if hasattr(producer, "__aiter__"):
        return [value async for value in producer]
    if inspect.isawaitable(producer):
        values = await producer
        return list(values) if values is not None else []
    return list(producer)


async def gather_all(*awaitables: Awaitable[Any]) -> List[Any]:
    """
    Await all awaitables concurrently and return their results in input order.

    When one fails, the others are cancelled and awaited before the error
    propagates, so no sibling keeps running after the caller has failed.
    """
    tasks = [asyncio.ensure_future(awaitable) for awaitable in awaitables]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class AsyncHalAssembler(HalAssemblerBase[R]):
    """Wraps asynchronously produced resources without embedded data."""

    @final
    async def wrap_in_resource_wrapper(self, resource: Producer) -> Optional[HalResourceWrapper]:
        """Wrap the produced resource; an absent resource yields None."""
        value = await resolve_value(resource)
        if value is None:
            return None
        return self._wrap_resource(value)

    @final
    async def wrap_in_list_wrapper(
        self,
        resources: SequenceProducer,
        total_elements: Producer = None,
        page_size: Optional[int] = None,
        offset: int = 0,
        sort: Optional[SortCriteria] = None,
    ) -> HalListWrapper:
        """
        Wrap produced resources into a list wrapper, in production order.

        An empty producer yields an empty list wrapper. For paged lists the
        total count may itself be produced asynchronously; it is awaited
        together with the resources.
        """
        values, total = await gather_all(collect_values(resources), resolve_value(total_elements))
        wrappers = [self._wrap_resource(value) for value in values]
        return self._assemble_list(wrappers, total, page_size, offset, sort)


class AsyncEmbeddingHalAssembler(EmbeddingAssemblerBase[R, E]):
    """Wraps asynchronously produced resources together with embedded resources."""

    @final
    async def wrap_in_resource_wrapper(
        self,
        resource: Producer,
        embedded: Producer = None,
    ) -> Optional[HalResourceWrapper]:
        """
        Wrap a produced resource with a produced embedded resource.

        Both producers are awaited together. An absent resource yields None;
        an absent embedded value leaves the embedded slot absent.
        """
        value, embedded_value = await gather_all(resolve_value(resource), resolve_value(embedded))
        if value is None:
            return None
        return self._wrap_with_embedded(value, embedded_value)

    @final
    async def wrap_in_resource_wrapper_with_embedded_list(
        self,
        resource: Producer,
        embedded_list: SequenceProducer,
    ) -> Optional[HalResourceWrapper]:
        """Wrap a produced resource with a produced list of embedded resources."""
        value, embedded_values = await gather_all(resolve_value(resource), collect_values(embedded_list))
        if value is None:
            return None
        return self._wrap_with_embedded_list(value, embedded_values)

    @final
    async def wrap_in_list_wrapper(
        self,
        resources: SequenceProducer,
        load_embedded: Callable[[R], Producer],
        total_elements: Producer = None,
        page_size: Optional[int] = None,
        offset: int = 0,
        sort: Optional[SortCriteria] = None,
    ) -> HalListWrapper:
        """
        Wrap produced resources, each with the embedded value loaded for it.

        Args:
            resources: Producer of the resources
            load_embedded: Returns the embedded value (or an awaitable of it) for a resource
            total_elements: Number of resources over all pages, for paged lists
            page_size: Maximum resources per page, for paged lists
            offset: Number of resources before this page
            sort: Sort criteria echoed in the navigation links

        Raises:
            HeterogeneousEmbeddedShape: If some resources have an embedded value and others None
        """
        values, total = await gather_all(collect_values(resources), resolve_value(total_elements))
        embedded_values = await gather_all(*(resolve_value(load_embedded(value)) for value in values))

        wrappers = [
            self._wrap_with_embedded(value, embedded_value)
            for value, embedded_value in zip(values, embedded_values)
        ]
        return self._assemble_list(wrappers, total, page_size, offset, sort)

    @final
    async def wrap_in_list_wrapper_with_embedded_lists(
        self,
        resources: SequenceProducer,
        load_embedded_list: Callable[[R], SequenceProducer],
        total_elements: Producer = None,
        page_size: Optional[int] = None,
        offset: int = 0,
        sort: Optional[SortCriteria] = None,
    ) -> HalListWrapper:
        """Wrap produced resources, each with the embedded list loaded for it."""
        values, total = await gather_all(collect_values(resources), resolve_value(total_elements))
        embedded_lists = await gather_all(*(collect_values(load_embedded_list(value)) for value in values))

        wrappers = [
            self._wrap_with_embedded_list(value, embedded_list)
            for value, embedded_list in zip(values, embedded_lists)
        ]
        return self._assemble_list(wrappers, total, page_size, offset, sort)
