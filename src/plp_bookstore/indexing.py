"""
Index management for the books collection.

Creates the basic single-field, compound and text indexes, lists them,
compares an unhinted query with one forced onto the genre/price index,
and runs a full-text search.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from .console import print_documents, print_table, section
from .types import QueryTiming

if TYPE_CHECKING:
    from rich.console import Console

    from .collection import BookCollection
    from .cursor import Cursor
    from .types import BookDocument, IndexKeys

logger = logging.getLogger(__name__)

TITLE_INDEX: IndexKeys = [("title", 1)]
AUTHOR_INDEX: IndexKeys = [("author", 1)]
GENRE_PRICE_INDEX: IndexKeys = [("genre", 1), ("price", -1)]
TEXT_INDEX: IndexKeys = [("title", "text"), ("author", "text"), ("publisher", "text")]

BASIC_INDEXES: list[IndexKeys] = [TITLE_INDEX, AUTHOR_INDEX, GENRE_PRICE_INDEX, TEXT_INDEX]


async def create_basic_indexes(books: BookCollection) -> list[str]:
    """Create every basic index in order and return their names."""
    return [await books.create_index(keys) for keys in BASIC_INDEXES]


async def list_indexes(books: BookCollection) -> list[dict[str, Any]]:
    return await books.list_indexes()


async def time_query(label: str, cursor: Cursor[BookDocument]) -> QueryTiming:
    """Run a cursor to completion and measure the elapsed wall-clock time."""
    started = time.perf_counter()
    docs = await cursor.to_list()
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.debug("%s: %d docs in %.3f ms", label, len(docs), elapsed_ms)
    return QueryTiming(label=label, elapsed_ms=elapsed_ms, returned=len(docs))


async def compare_index_performance(books: BookCollection) -> list[QueryTiming]:
    """
    Time a plain genre query against a genre/price query hinted onto
    the compound index. The hinted query fails if that index is missing.
    """
    plain = await time_query("Query without index", books.find({"genre": "Fiction"}))
    hinted = await time_query(
        "Query using index",
        books.find({"genre": "Fiction", "price": {"$lt": 20}}).hint(GENRE_PRICE_INDEX),
    )
    return [plain, hinted]


async def text_search(books: BookCollection, term: str) -> list[BookDocument]:
    """Full-text search over title, author and publisher."""
    return await books.find({"$text": {"$search": term}}).to_list()


async def drop_index_by_name(books: BookCollection, name: str) -> None:
    await books.drop_index(name)


async def run_indexing(books: BookCollection, console: Console) -> None:
    """Run the index demo sequence, printing each step."""
    section(console, "CREATING BASIC INDEXES")
    for name in await create_basic_indexes(books):
        console.print(f"[green]✓[/green] Index ready: {name}")

    print_table(console, "Current indexes in collection", await list_indexes(books))

    section(console, "TESTING INDEXED QUERIES")
    timings = await compare_index_performance(books)
    print_table(
        console,
        "Query timings",
        [
            {"query": t.label, "elapsed_ms": t.elapsed_ms, "returned": t.returned}
            for t in timings
        ],
    )

    section(console, 'FULL-TEXT SEARCH FOR "Python"')
    print_documents(console, "Text search results", await text_search(books, "Python"))
