"""Load the sample books into the collection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .sample_data import BOOKS

if TYPE_CHECKING:
    from rich.console import Console

    from .collection import BookCollection
    from .types import Document, InsertManyResult

logger = logging.getLogger(__name__)


async def seed_books(
    books: BookCollection,
    documents: list[Document] | None = None,
    reset: bool = True,
) -> InsertManyResult:
    """
    Insert copies of ``documents`` (the sample books by default).

    Args:
        books: Target collection.
        documents: Documents to insert. The caller's dicts are not mutated.
        reset: Drop the collection first so reruns do not duplicate books.
    """
    if documents is None:
        documents = BOOKS
    if reset:
        await books.drop()
        logger.info("Dropped %s before seeding", books.full_name)

    result = await books.insert_many([dict(doc) for doc in documents])
    logger.info("Inserted %d books into %s", result.inserted_count, books.full_name)
    return result


async def run_seed(books: BookCollection, console: Console) -> None:
    result = await seed_books(books)
    console.print(f"\n[green]✓[/green] {result.inserted_count} books inserted into {books.full_name}")
