"""
BookCollection - Operations on the books collection.

Wraps a PyMongo async collection, converting driver results into the
package's result types and driver errors into its exception hierarchy.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pymongo.errors import PyMongoError

from .cursor import Cursor
from .types import (
    BookDocument,
    DeleteResult,
    InsertManyResult,
    OperationFailure,
    QueryError,
    UpdateResult,
    WriteError,
)

if TYPE_CHECKING:
    from pymongo.asynchronous.collection import AsyncCollection

    from .types import Document, Filter, IndexKeys, Pipeline, Projection, Update

__all__ = ["BookCollection"]

logger = logging.getLogger(__name__)


class BookCollection:
    """
    The ``books`` collection with async operations.

    Example:
        books = client.books

        fiction = await books.find({"genre": "Fiction"}).to_list()
        await books.update_one({"title": "1984"}, {"$set": {"price": 13.99}})
        rows = await books.aggregate([{"$group": {"_id": "$genre"}}])
    """

    __slots__ = ("_collection", "_database_name", "_name")

    def __init__(self, collection: AsyncCollection, database_name: str, name: str) -> None:
        """
        Initialize a collection wrapper.

        Args:
            collection: The driver collection.
            database_name: Name of the parent database.
            name: Collection name.
        """
        self._collection = collection
        self._database_name = database_name
        self._name = name

    @property
    def name(self) -> str:
        """Get the collection name."""
        return self._name

    @property
    def full_name(self) -> str:
        """Get the full collection name (database.collection)."""
        return f"{self._database_name}.{self._name}"

    def find(
        self,
        filter: Filter | None = None,
        projection: Projection = None,
    ) -> Cursor[BookDocument]:
        """
        Find documents matching the filter.

        Args:
            filter: Query filter.
            projection: Fields to include/exclude.

        Returns:
            Cursor for iterating over results.

        Example:
            cursor = books.find({}).sort("price").skip(5).limit(5)
            docs = await cursor.to_list()
        """
        return Cursor[BookDocument](self._collection, filter, projection)

    async def insert_many(self, documents: list[Document]) -> InsertManyResult:
        """
        Insert multiple documents.

        Raises:
            WriteError: If the insert fails.
        """
        if not documents:
            return InsertManyResult()

        try:
            result = await self._collection.insert_many([dict(doc) for doc in documents])
        except PyMongoError as e:
            raise WriteError(str(e), code=getattr(e, "code", None)) from e

        return InsertManyResult(
            inserted_ids=list(result.inserted_ids),
            acknowledged=result.acknowledged,
        )

    async def update_one(
        self,
        filter: Filter,
        update: Update,
        upsert: bool = False,
    ) -> UpdateResult:
        """
        Update a single document.

        Args:
            filter: Query filter to match the document.
            update: Update operations ($set, $unset, $inc, etc.).
            upsert: If True, insert if no document matches.

        Returns:
            UpdateResult with match/modify counts.

        Raises:
            WriteError: If the update fails.
        """
        try:
            result = await self._collection.update_one(dict(filter), dict(update), upsert=upsert)
        except PyMongoError as e:
            raise WriteError(str(e), code=getattr(e, "code", None)) from e

        return UpdateResult(
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted_id=result.upserted_id,
            acknowledged=result.acknowledged,
        )

    async def delete_one(self, filter: Filter) -> DeleteResult:
        """
        Delete a single document.

        Raises:
            WriteError: If the delete fails.
        """
        try:
            result = await self._collection.delete_one(dict(filter))
        except PyMongoError as e:
            raise WriteError(str(e), code=getattr(e, "code", None)) from e

        return DeleteResult(
            deleted_count=result.deleted_count,
            acknowledged=result.acknowledged,
        )

    async def count_documents(self, filter: Filter | None = None) -> int:
        """
        Count documents matching the filter.

        Raises:
            QueryError: If the count fails.
        """
        try:
            result = await self._collection.count_documents(dict(filter or {}))
        except PyMongoError as e:
            raise QueryError(str(e), code=getattr(e, "code", None)) from e
        return result if isinstance(result, int) else 0

    async def aggregate(self, pipeline: Pipeline) -> list[dict[str, Any]]:
        """
        Run an aggregation pipeline.

        Args:
            pipeline: List of aggregation stages.

        Returns:
            List of aggregation results.

        Raises:
            OperationFailure: If the server rejects the pipeline.
        """
        try:
            cursor = await self._collection.aggregate(pipeline)
            result = await cursor.to_list()
        except PyMongoError as e:
            raise OperationFailure(str(e), code=getattr(e, "code", None)) from e
        return result if isinstance(result, list) else []

    async def create_index(
        self,
        keys: IndexKeys | str,
        **kwargs: Any,
    ) -> str:
        """
        Create an index on the collection.

        Creating an index that already exists with the same definition
        returns its name without building a second index.

        Args:
            keys: Index keys as list of (field, direction) tuples,
                  or a single field name. Direction may be ``"text"``.
            **kwargs: Additional index options (unique, name, etc.).

        Returns:
            Name of the index.

        Raises:
            OperationFailure: If the server rejects the index definition.
        """
        if isinstance(keys, str):
            keys = [(keys, 1)]

        try:
            result = await self._collection.create_index(keys, **kwargs)
        except PyMongoError as e:
            raise OperationFailure(str(e), code=getattr(e, "code", None)) from e

        name = result if isinstance(result, str) else ""
        logger.info("Index %s ready on %s", name, self.full_name)
        return name

    async def list_indexes(self) -> list[dict[str, Any]]:
        """
        List index descriptions for the collection.

        Raises:
            QueryError: If the listing fails.
        """
        try:
            cursor = await self._collection.list_indexes()
            indexes = await cursor.to_list()
        except PyMongoError as e:
            raise QueryError(str(e), code=getattr(e, "code", None)) from e
        return [dict(index) for index in indexes]

    async def drop_index(self, index_name: str) -> None:
        """
        Drop an index from the collection.

        Raises:
            OperationFailure: If the index does not exist.
        """
        try:
            await self._collection.drop_index(index_name)
        except PyMongoError as e:
            raise OperationFailure(str(e), code=getattr(e, "code", None)) from e
        logger.info("Index %s dropped from %s", index_name, self.full_name)

    async def drop(self) -> None:
        """Drop the collection."""
        try:
            await self._collection.drop()
        except PyMongoError as e:
            raise WriteError(str(e), code=getattr(e, "code", None)) from e

    def __repr__(self) -> str:
        return f"BookCollection({self.full_name!r})"
