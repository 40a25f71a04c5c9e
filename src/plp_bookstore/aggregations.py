"""
Aggregation pipelines over the books collection.

Each ``*_pipeline`` function returns the stage list sent to the server
unchanged; the matching coroutine runs it and returns the result rows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .console import print_table, section

if TYPE_CHECKING:
    from rich.console import Console

    from .collection import BookCollection
    from .types import Pipeline

PRICE_BOUNDARIES = [0, 10, 15, 25]
PRICE_DEFAULT_BUCKET = "Above $25"


def average_price_by_genre_pipeline() -> Pipeline:
    return [
        {"$group": {"_id": "$genre", "averagePrice": {"$avg": "$price"}}},
        {"$sort": {"averagePrice": -1}},
    ]


def top_authors_pipeline(limit: int = 1) -> Pipeline:
    return [
        {"$group": {"_id": "$author", "totalBooks": {"$sum": 1}}},
        {"$sort": {"totalBooks": -1}},
        {"$limit": limit},
    ]


def books_by_decade_pipeline() -> Pipeline:
    """Label each book with its decade (``"1940s"``) and count per label."""
    decade = {
        "$concat": [
            {"$toString": {"$multiply": [{"$floor": {"$divide": ["$published_year", 10]}}, 10]}},
            "s",
        ]
    }
    return [
        {"$project": {"decade": decade}},
        {"$group": {"_id": "$decade", "count": {"$sum": 1}}},
        {"$sort": {"_id": 1}},
    ]


def total_pages_by_genre_pipeline() -> Pipeline:
    return [
        {"$group": {"_id": "$genre", "totalPages": {"$sum": "$pages"}}},
        {"$sort": {"totalPages": -1}},
    ]


def top_publishers_pipeline(limit: int = 3) -> Pipeline:
    return [
        {"$group": {"_id": "$publisher", "totalBooks": {"$sum": 1}}},
        {"$sort": {"totalBooks": -1}},
        {"$limit": limit},
    ]


def books_by_price_range_pipeline() -> Pipeline:
    """
    Bucket books by price.

    Buckets are ``[0, 10)``, ``[10, 15)`` and ``[15, 25)``, keyed by their
    lower bound; anything else lands in ``"Above $25"``.
    """
    return [
        {
            "$bucket": {
                "groupBy": "$price",
                "boundaries": PRICE_BOUNDARIES,
                "default": PRICE_DEFAULT_BUCKET,
                "output": {
                    "totalBooks": {"$sum": 1},
                    "avgPrice": {"$avg": "$price"},
                    "books": {"$push": "$title"},
                },
            }
        }
    ]


def average_pages_by_author_pipeline() -> Pipeline:
    return [
        {"$group": {"_id": "$author", "averagePages": {"$avg": "$pages"}}},
        {"$sort": {"averagePages": -1}},
    ]


def stock_status_pipeline() -> Pipeline:
    return [{"$group": {"_id": "$in_stock", "total": {"$sum": 1}}}]


async def average_price_by_genre(books: BookCollection) -> list[dict[str, Any]]:
    return await books.aggregate(average_price_by_genre_pipeline())


async def top_authors(books: BookCollection, limit: int = 1) -> list[dict[str, Any]]:
    return await books.aggregate(top_authors_pipeline(limit))


async def books_by_decade(books: BookCollection) -> list[dict[str, Any]]:
    return await books.aggregate(books_by_decade_pipeline())


async def total_pages_by_genre(books: BookCollection) -> list[dict[str, Any]]:
    return await books.aggregate(total_pages_by_genre_pipeline())


async def top_publishers(books: BookCollection, limit: int = 3) -> list[dict[str, Any]]:
    return await books.aggregate(top_publishers_pipeline(limit))


async def books_by_price_range(books: BookCollection) -> list[dict[str, Any]]:
    return await books.aggregate(books_by_price_range_pipeline())


async def average_pages_by_author(books: BookCollection) -> list[dict[str, Any]]:
    return await books.aggregate(average_pages_by_author_pipeline())


async def stock_status(books: BookCollection) -> list[dict[str, Any]]:
    return await books.aggregate(stock_status_pipeline())


async def run_aggregations(books: BookCollection, console: Console) -> None:
    """Run every aggregation in order and print each result table."""
    section(console, "AGGREGATION PIPELINES")

    print_table(console, "Average price by genre", await average_price_by_genre(books))
    print_table(console, "Author with the most books", await top_authors(books))
    print_table(console, "Number of books grouped by decade", await books_by_decade(books))
    print_table(console, "Total pages by genre", await total_pages_by_genre(books))
    print_table(console, "Top 3 publishers with most books", await top_publishers(books))
    print_table(console, "Books categorized by price range", await books_by_price_range(books))
    print_table(console, "Average pages per author", await average_pages_by_author(books))
    print_table(
        console,
        "Stock status (True = in stock, False = out of stock)",
        await stock_status(books),
    )
