"""
Type definitions for plp-bookstore.

Provides the book document shape, result types that mirror PyMongo's
result objects for insert, update and delete operations, and the
exception hierarchy raised by the data-access layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, TypedDict


class BookDocument(TypedDict, total=False):
    """A document in the ``books`` collection."""

    _id: Any
    title: str
    author: str
    genre: str
    published_year: int
    price: float
    pages: int
    publisher: str
    in_stock: bool


@dataclass
class InsertManyResult:
    """
    Result of an insert_many operation.

    Attributes:
        inserted_ids: List of _ids of the inserted documents.
        acknowledged: Whether the write was acknowledged.
    """

    inserted_ids: list[Any] = field(default_factory=list)
    acknowledged: bool = True

    @property
    def inserted_count(self) -> int:
        return len(self.inserted_ids)


@dataclass
class UpdateResult:
    """
    Result of an update_one operation.

    Attributes:
        matched_count: Number of documents matched.
        modified_count: Number of documents modified.
        upserted_id: The _id of the upserted document (if any).
        acknowledged: Whether the write was acknowledged.
    """

    matched_count: int = 0
    modified_count: int = 0
    upserted_id: Any = None
    acknowledged: bool = True


@dataclass
class DeleteResult:
    """
    Result of a delete_one operation.

    Attributes:
        deleted_count: Number of documents deleted.
        acknowledged: Whether the write was acknowledged.
    """

    deleted_count: int = 0
    acknowledged: bool = True


@dataclass
class QueryTiming:
    """Wall-clock timing of one query run to completion."""

    label: str
    elapsed_ms: float
    returned: int


# Type aliases for clarity
Document = Mapping[str, Any]
Filter = Mapping[str, Any]
Update = Mapping[str, Any]
Pipeline = list[dict[str, Any]]
IndexKeys = list[tuple[str, Any]]
Projection = Mapping[str, Any] | Sequence[str] | None
Sort = list[tuple[str, int]] | None


class BookstoreError(Exception):
    """Base exception for bookstore operations."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ConnectionError(BookstoreError):
    """Error raised when connecting to the database fails."""

    pass


class QueryError(BookstoreError):
    """Error raised when a query fails."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        suggestion: str | None = None,
    ) -> None:
        super().__init__(message, code)
        self.suggestion = suggestion


class WriteError(BookstoreError):
    """Error raised when a write operation fails."""

    pass


class OperationFailure(BookstoreError):
    """Error raised when the server rejects an aggregation or index command."""

    pass
