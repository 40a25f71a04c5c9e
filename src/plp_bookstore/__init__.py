"""
plp-bookstore - MongoDB demonstration scripts for a books collection.

This package runs fixed sequences of operations against a ``books``
collection and prints the results:
- CRUD and advanced queries (filters, projection, sorting, pagination)
- Aggregation pipelines (group, sort, limit, project, bucket)
- Index management (single-field, compound and text indexes, hints, explain)

Example usage:
    from plp_bookstore import BookstoreClient, Settings

    async def main():
        async with BookstoreClient(Settings.from_env()) as client:
            books = client.books

            # Find documents
            async for book in books.find({"genre": "Fiction"}).sort("price"):
                print(book["title"])

            # Aggregate
            rows = await books.aggregate([
                {"$group": {"_id": "$genre", "averagePrice": {"$avg": "$price"}}}
            ])

    import asyncio
    asyncio.run(main())

Console scripts: ``plp-queries``, ``plp-aggregations``, ``plp-indexing``
and ``plp-seed``.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .client import BookstoreClient
from .collection import BookCollection
from .config import Settings
from .cursor import Cursor
from .types import (
    BookDocument,
    BookstoreError,
    ConnectionError,
    DeleteResult,
    InsertManyResult,
    OperationFailure,
    QueryError,
    QueryTiming,
    UpdateResult,
    WriteError,
)

__all__ = [
    # Main classes
    "BookstoreClient",
    "BookCollection",
    "Cursor",
    "Settings",
    # Documents and results
    "BookDocument",
    "InsertManyResult",
    "UpdateResult",
    "DeleteResult",
    "QueryTiming",
    # Exceptions
    "BookstoreError",
    "ConnectionError",
    "QueryError",
    "WriteError",
    "OperationFailure",
    # Version
    "__version__",
]
