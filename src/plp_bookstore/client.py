"""
BookstoreClient - The single connection handle used by a script run.

Opens one PyMongo async client, verifies it with a ping, and hands out
the books collection. Closing is idempotent so a script's cleanup block
can always call it.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from .collection import BookCollection
from .config import Settings
from .types import BookstoreError, ConnectionError

__all__ = ["BookstoreClient"]

logger = logging.getLogger(__name__)


class BookstoreClient:
    """
    Connection to the bookstore database.

    Example:
        client = BookstoreClient(Settings.from_env())
        await client.connect()
        books = client.books
        ...
        await client.close()

        # Or use as async context manager
        async with BookstoreClient() as client:
            fiction = await client.books.find({"genre": "Fiction"}).to_list()
    """

    __slots__ = ("_settings", "_client", "_collections", "_options")

    def __init__(
        self,
        settings: Settings | None = None,
        **options: Any,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Connection settings. If not provided, they are read
                      from the environment.
            **options: Additional keyword arguments for AsyncMongoClient.
        """
        self._settings = settings or Settings.from_env()
        self._client: AsyncMongoClient | None = None
        self._collections: dict[str, BookCollection] = {}
        self._options = options

    @property
    def uri(self) -> str:
        """Get the connection URI."""
        return self._settings.uri

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def is_connected(self) -> bool:
        """Check if the client is connected."""
        return self._client is not None

    async def connect(self) -> BookstoreClient:
        """
        Connect to the database and verify the server responds.

        Returns:
            Self for chaining.

        Raises:
            ConnectionError: If the URI is invalid or the ping fails.
        """
        if self._client is not None:
            return self

        client: AsyncMongoClient | None = None
        try:
            client = AsyncMongoClient(
                self.uri,
                serverSelectionTimeoutMS=self._settings.timeout_ms,
                **self._options,
            )
            await client.admin.command("ping")
        except PyMongoError as e:
            if client is not None:
                await client.close()
            raise ConnectionError(f"Failed to connect to {self.uri}: {e}") from e

        self._client = client
        logger.info("Connected to %s (database %s)", self.uri, self._settings.database)
        return self

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            logger.info("Connection to %s closed", self.uri)
        self._collections.clear()

    def _ensure_connected(self) -> AsyncMongoClient:
        if self._client is None:
            raise BookstoreError("Client is not connected. Call connect() first.")
        return self._client

    def collection(self, name: str | None = None) -> BookCollection:
        """
        Get a collection in the configured database.

        Args:
            name: Collection name. Defaults to the configured books collection.
        """
        client = self._ensure_connected()
        name = name or self._settings.collection

        if name not in self._collections:
            database = client[self._settings.database]
            self._collections[name] = BookCollection(database[name], self._settings.database, name)
        return self._collections[name]

    @property
    def books(self) -> BookCollection:
        """The configured books collection."""
        return self.collection()

    async def __aenter__(self) -> BookstoreClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        status = "connected" if self.is_connected else "disconnected"
        return f"BookstoreClient({self.uri!r}, {status})"
