"""
Console entry points.

Each script opens one connection, runs its fixed operation sequence
against the books collection and closes the connection whether or not
the sequence succeeded. Failures are logged and reported through the
exit status.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from rich.console import Console

from .aggregations import run_aggregations
from .client import BookstoreClient
from .collection import BookCollection
from .config import Settings, setup_logging
from .indexing import run_indexing
from .queries import run_queries
from .seed import run_seed

__all__ = [
    "aggregations_main",
    "indexing_main",
    "queries_main",
    "run_script",
    "seed_main",
]

logger = logging.getLogger(__name__)

Runner = Callable[[BookCollection, Console], Awaitable[None]]


async def run_script(
    name: str,
    runner: Runner,
    settings: Settings | None = None,
    console: Console | None = None,
) -> int:
    """
    Run one script's operation sequence inside a scoped connection.

    Args:
        name: Script name used in log messages.
        runner: Coroutine function taking the books collection and a console.
        settings: Connection settings; read from the environment if omitted.
        console: Output console; stdout if omitted.

    Returns:
        0 if every operation succeeded, 1 if the sequence was aborted.
    """
    settings = settings or Settings.from_env()
    console = console or Console()
    client = BookstoreClient(settings)

    try:
        await client.connect()
        console.print(f"[green]✓[/green] Connected to MongoDB for {name}")
        await runner(client.books, console)
    except Exception:
        logger.exception("Error during %s", name)
        return 1
    finally:
        await client.close()
        console.print("\n🔒 MongoDB connection closed")
    return 0


def _main(name: str, runner: Runner) -> int:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    return asyncio.run(run_script(name, runner, settings))


def queries_main() -> int:
    return _main("queries", run_queries)


def aggregations_main() -> int:
    return _main("aggregation pipelines", run_aggregations)


def indexing_main() -> int:
    return _main("indexing demo", run_indexing)


def seed_main() -> int:
    return _main("seeding", run_seed)
