"""
Runtime configuration for the bookstore scripts.

Connection details come from the environment (optionally via a ``.env``
file) so the scripts carry no hard-coded addresses.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

__all__ = ["Settings", "setup_logging"]

DEFAULT_URI = "mongodb://localhost:27017"
DEFAULT_DATABASE = "plp_bookstore"
DEFAULT_COLLECTION = "books"
DEFAULT_TIMEOUT_MS = 5000

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    """
    Connection and logging settings.

    Attributes:
        uri: MongoDB connection URI.
        database: Database holding the books collection.
        collection: Name of the books collection.
        timeout_ms: Server selection timeout for the initial ping.
        log_level: Root logger level name.
    """

    uri: str = DEFAULT_URI
    database: str = DEFAULT_DATABASE
    collection: str = DEFAULT_COLLECTION
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        """
        Build settings from environment variables.

        Reads ``MONGO_URL``, ``BOOKSTORE_DB``, ``BOOKSTORE_COLLECTION``,
        ``BOOKSTORE_TIMEOUT_MS`` and ``BOOKSTORE_LOG_LEVEL`` after loading
        any ``.env`` file in the working directory. Variables already set
        in the process take precedence over the file.

        Raises:
            ValueError: If ``BOOKSTORE_TIMEOUT_MS`` is not an integer.
        """
        load_dotenv()
        timeout = os.environ.get("BOOKSTORE_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS))
        try:
            timeout_ms = int(timeout)
        except ValueError as e:
            raise ValueError(f"BOOKSTORE_TIMEOUT_MS must be an integer, got {timeout!r}") from e

        return cls(
            uri=os.environ.get("MONGO_URL", DEFAULT_URI),
            database=os.environ.get("BOOKSTORE_DB", DEFAULT_DATABASE),
            collection=os.environ.get("BOOKSTORE_COLLECTION", DEFAULT_COLLECTION),
            timeout_ms=timeout_ms,
            log_level=os.environ.get("BOOKSTORE_LOG_LEVEL", "INFO").upper(),
        )


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for script runs.

    Does nothing if the root logger already has handlers, so repeated
    calls (or a host application's own setup) are left alone.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
