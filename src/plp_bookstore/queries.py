"""
CRUD, advanced queries and query-plan inspection for the books collection.

``run_queries`` is the fixed sequence the ``plp-queries`` script runs:
basic CRUD, filtered/projected/sorted/paginated finds, three
aggregations, two index creations and an explain of a title lookup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from . import aggregations
from .console import print_documents, print_table, section
from .indexing import TITLE_INDEX

if TYPE_CHECKING:
    from rich.console import Console

    from .collection import BookCollection
    from .types import BookDocument, DeleteResult, IndexKeys, UpdateResult

SUMMARY_PROJECTION = {"title": 1, "author": 1, "price": 1, "_id": 0}

AUTHOR_YEAR_INDEX: IndexKeys = [("author", 1), ("published_year", -1)]


async def find_by_genre(books: BookCollection, genre: str) -> list[BookDocument]:
    return await books.find({"genre": genre}).to_list()


async def find_published_after(books: BookCollection, year: int) -> list[BookDocument]:
    """Books with ``published_year`` strictly greater than ``year``."""
    return await books.find({"published_year": {"$gt": year}}).to_list()


async def find_by_author(books: BookCollection, author: str) -> list[BookDocument]:
    return await books.find({"author": author}).to_list()


async def update_price(books: BookCollection, title: str, price: float) -> UpdateResult:
    """Set the price of the first book with the given title."""
    return await books.update_one({"title": title}, {"$set": {"price": price}})


async def delete_by_title(books: BookCollection, title: str) -> DeleteResult:
    return await books.delete_one({"title": title})


async def find_in_stock_published_after(books: BookCollection, year: int) -> list[BookDocument]:
    return (
        await books.find({"in_stock": True, "published_year": {"$gt": year}})
        .project(SUMMARY_PROJECTION)
        .to_list()
    )


async def list_summaries(books: BookCollection) -> list[BookDocument]:
    """Every book reduced to title, author and price."""
    return await books.find({}, SUMMARY_PROJECTION).to_list()


async def sort_by_price(books: BookCollection, descending: bool = False) -> list[BookDocument]:
    return await books.find().sort("price", -1 if descending else 1).to_list()


async def paginate(books: BookCollection, page: int = 1, per_page: int = 5) -> list[BookDocument]:
    """
    Return one page of books in natural order.

    Args:
        books: The books collection.
        page: 1-based page number.
        per_page: Books per page.

    Raises:
        ValueError: If ``page`` or ``per_page`` is below 1.
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")
    return await books.find().skip((page - 1) * per_page).limit(per_page).to_list()


async def create_query_indexes(books: BookCollection) -> list[str]:
    """Create the title and author/published_year indexes and return their names."""
    return [await books.create_index(TITLE_INDEX), await books.create_index(AUTHOR_YEAR_INDEX)]


async def explain_title_query(books: BookCollection, title: str) -> dict[str, Any]:
    """Return the ``executionStats`` section of the plan for a title lookup."""
    plan = await books.find({"title": title}).explain()
    stats = plan.get("executionStats")
    return dict(stats) if isinstance(stats, dict) else {}


async def run_queries(books: BookCollection, console: Console) -> None:
    """Run the full query sequence, printing each result."""
    section(console, "BASIC CRUD OPERATIONS")

    print_documents(console, "Books in Fiction genre", await find_by_genre(books, "Fiction"))
    print_documents(console, "Books published after 1950", await find_published_after(books, 1950))
    print_documents(console, "Books by George Orwell", await find_by_author(books, "George Orwell"))

    updated = await update_price(books, "1984", 13.99)
    console.print(f'\nUpdated {updated.modified_count} book price for "1984"')

    deleted = await delete_by_title(books, "Moby Dick")
    console.print(f'\nDeleted {deleted.deleted_count} book(s) with title "Moby Dick"')

    section(console, "ADVANCED QUERIES")

    print_table(
        console,
        "In-stock books published after 2010",
        await find_in_stock_published_after(books, 2010),
    )
    print_table(console, "Projected books (title, author, price)", await list_summaries(books))
    print_documents(console, "Books sorted by price (ascending)", await sort_by_price(books))
    print_documents(
        console,
        "Books sorted by price (descending)",
        await sort_by_price(books, descending=True),
    )
    page = 1
    print_documents(console, f"Books - Page {page}", await paginate(books, page))

    section(console, "AGGREGATION PIPELINES")

    print_table(console, "Average price by genre", await aggregations.average_price_by_genre(books))
    print_table(console, "Author with the most books", await aggregations.top_authors(books))
    print_table(console, "Books grouped by decade", await aggregations.books_by_decade(books))

    section(console, "INDEXING")

    title_index, compound_index = await create_query_indexes(books)
    console.print(f"\nCreated index on title: {title_index}")
    console.print(f"Created compound index on author and published_year: {compound_index}")

    stats = await explain_title_query(books, "1984")
    summary = {k: v for k, v in stats.items() if not isinstance(v, (dict, list))}
    print_table(console, "Explain (execution stats) for title search", [summary] if summary else [])
