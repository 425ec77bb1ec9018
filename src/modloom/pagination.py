"""Offset based pagination over mod.io list endpoints.

A `Paginator` walks a list endpoint page by page. The server-reported
`result_offset` and `result_limit` of each page are authoritative: the next
request asks for `offset + limit`, and an empty page ends the walk even if
`result_total` has not been reached yet.

A `Query` is the lazy entry point returned by `ModioClient.query()`; every
accessor on it is derived from repeated `Paginator.next()` calls.
"""

from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from .filters import Filter
from .log_config import logger
from .models.base import ListResponse

if TYPE_CHECKING:
    from .client import ModioClient
    from .routing import ListRoute

T = TypeVar("T")


# --- Cursor states ---


@dataclass(frozen=True)
class Start:
    """No page has been requested yet."""


@dataclass(frozen=True)
class Next:
    """The last page reported `offset` and `limit`; more may follow."""

    offset: int
    limit: int


@dataclass(frozen=True)
class Completed:
    """The walk is over; no further request is sent."""


CursorState = Start | Next | Completed


@dataclass
class Page(Generic[T]):
    """One page of a list endpoint.

    Attributes:
        items: The items of the page.
        count: Number of items on the page, as reported by the server.
        total: Total number of matching items, as reported by the server.
        limit: The page size applied by the server.
        offset: The offset applied by the server.
    """

    items: list[T] = field(default_factory=list)
    count: int = 0
    total: int = 0
    limit: int = 0
    offset: int = 0

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


class Paginator(Generic[T]):
    """Fetches the pages of a list endpoint one at a time.

    A paginator is single-pass and must be driven by one caller at a time.

    Attributes:
        total: The total reported by the first page, or None before it is fetched.
    """

    def __init__(
        self,
        client: "ModioClient",
        route: "ListRoute",
        model: type[T],
        filter: Filter,
    ):
        self._client = client
        self._route = route
        self._model = model
        self._filter = filter
        self._state: CursorState = Start()
        self.total: int | None = None

    @property
    def state(self) -> CursorState:
        return self._state

    async def next(self) -> Page[T] | None:
        """Fetches the next page.

        Returns:
            Page[T] | None: The next page, or None once the list is exhausted.
        """
        state = self._state
        if isinstance(state, Completed):
            return None
        if isinstance(state, Next):
            filter = self._filter.offset(state.offset + state.limit)
        else:
            filter = self._filter

        # A failed fetch leaves the paginator exhausted.
        self._state = Completed()
        logger.debug(
            f"Fetching page of {self._route.path} with {filter.to_query()}"
        )
        envelope: ListResponse[T] = await self._client.request(
            self._route, model=ListResponse[self._model], filter=filter
        )
        if not envelope.data:
            logger.debug(f"Empty page for {self._route.path}, pagination completed.")
            return None

        if self.total is None:
            self.total = envelope.total
            logger.info(f"Paginating {self._route.path}: {envelope.total} item(s) reported.")
        self._state = Next(envelope.offset, envelope.limit)
        return Page(
            items=envelope.data,
            count=envelope.count,
            total=envelope.total,
            limit=envelope.limit,
            offset=envelope.offset,
        )

    def __aiter__(self) -> AsyncIterator[Page[T]]:
        return self

    async def __anext__(self) -> Page[T]:
        page = await self.next()
        if page is None:
            raise StopAsyncIteration
        return page


class ItemStream(Generic[T]):
    """A single-pass async iterator over the items of every page."""

    def __init__(self, paginator: Paginator[T]):
        self._paginator = paginator
        self._buffer: Iterator[T] = iter(())
        self._yielded = 0

    def size_hint(self) -> tuple[int, int | None]:
        """Returns `(remaining, total)` based on the total of the first page.

        Before the first page is fetched the total is unknown: `(0, None)`.
        """
        total = self._paginator.total
        if total is None:
            return 0, None
        return max(total - self._yielded, 0), total

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        while True:
            item = next(self._buffer, _EXHAUSTED)
            if item is not _EXHAUSTED:
                self._yielded += 1
                return item
            page = await self._paginator.next()
            if page is None:
                raise StopAsyncIteration
            self._buffer = iter(page.items)


_EXHAUSTED = object()


class Query(Generic[T]):
    """A lazy query over a list endpoint.

    Nothing is sent until one of the accessors is awaited or iterated. Each
    accessor starts a fresh walk from the first page.

    Typical usage:
    ```python
    query = client.query(Routes.get_mods(5), Mod, NAME.like("Foo*"))
    mods = await query.collect()
    first = await query.filter(with_limit(1)).first()
    ```
    """

    def __init__(
        self,
        client: "ModioClient",
        route: "ListRoute",
        model: type[T],
        filter: Filter | None = None,
    ):
        self._client = client
        self._route = route
        self._model = model
        self._filter = filter or Filter()

    def filter(self, filter: Filter) -> "Query[T]":
        """Returns a new query with `filter` replacing the current one."""
        return Query(self._client, self._route, self._model, filter)

    def paged(self) -> Paginator[T]:
        return Paginator(self._client, self._route, self._model, self._filter)

    def iter(self) -> ItemStream[T]:
        return ItemStream(self.paged())

    async def first_page(self) -> list[T]:
        page = await self.paged().next()
        return page.items if page is not None else []

    async def first(self) -> T | None:
        items = await self.first_page()
        return items[0] if items else None

    async def collect(self) -> list[T]:
        """Fetches every page and returns all items in order."""
        items: list[T] = []
        async for page in self.paged():
            items.extend(page.items)
        logger.debug(f"Collected {len(items)} item(s) from {self._route.path}")
        return items

    def __aiter__(self) -> AsyncIterator[T]:
        return self.iter()
