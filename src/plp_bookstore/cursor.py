"""
Cursor - Lazy query builder over the books collection.

Collects find options (sort, skip, limit, projection, hint) and runs
the query against the driver only when results are requested.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, AsyncIterator, Generic, TypeVar

from pymongo.errors import PyMongoError

from .types import QueryError

if TYPE_CHECKING:
    from pymongo.asynchronous.collection import AsyncCollection

    from .types import Filter, IndexKeys, Projection, Sort

T = TypeVar("T", bound=dict[str, Any])

__all__ = ["Cursor"]


class Cursor(Generic[T]):
    """
    Async cursor for query results.

    Supports chaining sort, limit, skip, projection and index hints
    before the query runs.

    Example:
        cursor = books.find({"genre": "Fiction"}).sort("price", -1).limit(5)
        async for book in cursor:
            print(book["title"])
    """

    __slots__ = (
        "_collection",
        "_filter",
        "_projection",
        "_sort",
        "_limit",
        "_skip",
        "_hint",
        "_results",
        "_position",
    )

    def __init__(
        self,
        collection: AsyncCollection,
        filter: Filter | None = None,
        projection: Projection = None,
    ) -> None:
        """
        Initialize a cursor.

        Args:
            collection: The driver collection to query.
            filter: Query filter.
            projection: Fields to include/exclude.
        """
        self._collection = collection
        self._filter: Filter = filter or {}
        self._projection: Projection = projection
        self._sort: Sort = None
        self._limit: int = 0
        self._skip: int = 0
        self._hint: IndexKeys | str | None = None
        self._results: list[T] | None = None
        self._position: int = 0

    def sort(self, key_or_list: str | list[tuple[str, int]], direction: int = 1) -> Cursor[T]:
        """
        Sort the results.

        Args:
            key_or_list: Field name or list of (field, direction) tuples.
            direction: Sort direction (1 for ascending, -1 for descending).
                       Only used if key_or_list is a string.

        Returns:
            Self for chaining.
        """
        if isinstance(key_or_list, str):
            self._sort = [(key_or_list, direction)]
        else:
            self._sort = key_or_list
        return self

    def limit(self, limit: int) -> Cursor[T]:
        """Limit the number of results. Zero means no limit."""
        self._limit = limit
        return self

    def skip(self, skip: int) -> Cursor[T]:
        """Skip the first N results."""
        self._skip = skip
        return self

    def project(self, projection: Projection) -> Cursor[T]:
        """Set field projection."""
        self._projection = projection
        return self

    def hint(self, index: IndexKeys | str) -> Cursor[T]:
        """
        Force the query to use an index.

        Args:
            index: Index name or its key specification.

        Returns:
            Self for chaining.
        """
        self._hint = index
        return self

    def _options(self) -> dict[str, Any]:
        options: dict[str, Any] = {}

        if self._projection:
            if isinstance(self._projection, list):
                options["projection"] = {field: 1 for field in self._projection}
            else:
                options["projection"] = dict(self._projection)

        if self._sort:
            options["sort"] = self._sort

        if self._limit > 0:
            options["limit"] = self._limit

        if self._skip > 0:
            options["skip"] = self._skip

        if self._hint is not None:
            options["hint"] = self._hint

        return options

    async def _execute(self) -> list[T]:
        """
        Run the query and cache the results.

        Raises:
            QueryError: If the server rejects the query.
        """
        if self._results is not None:
            return self._results

        try:
            driver_cursor = self._collection.find(dict(self._filter), **self._options())
            result = await driver_cursor.to_list()
        except PyMongoError as e:
            raise QueryError(str(e), code=getattr(e, "code", None)) from e

        self._results = result if isinstance(result, list) else []
        return self._results

    async def to_list(self, length: int | None = None) -> list[T]:
        """
        Convert cursor to a list.

        Args:
            length: Maximum number of documents to return.
                    If None, returns all documents.
        """
        results = await self._execute()
        if length is not None:
            return results[:length]
        return results

    async def explain(self) -> dict[str, Any]:
        """
        Return the server's query plan for this cursor's query.

        Raises:
            QueryError: If the server rejects the explain command.
        """
        try:
            plan = await self._collection.find(dict(self._filter), **self._options()).explain()
        except PyMongoError as e:
            raise QueryError(str(e), code=getattr(e, "code", None)) from e
        return plan if isinstance(plan, dict) else {}

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        if self._results is None:
            await self._execute()

        assert self._results is not None

        if self._position >= len(self._results):
            raise StopAsyncIteration

        doc = self._results[self._position]
        self._position += 1
        return doc
