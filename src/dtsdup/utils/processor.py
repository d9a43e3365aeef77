import asyncio
import logging
import multiprocessing
import pathlib
from multiprocessing.pool import ThreadPool
from typing import Awaitable

from ..scan.extractor import extract_declarations_from_file

logger = logging.getLogger(__name__)


def probe_path(path: pathlib.Path) -> bool:
    """Check whether a path exists without following a failed lookup into an error.

    Returns False when the path (or one of its parents) does not exist. Any other
    OSError, e.g. a permission error, is raised to the caller.
    """
    try:
        path.stat()
    except (FileNotFoundError, NotADirectoryError):
        return False
    return True


class Processor:
    """Worker pool for the blocking filesystem work of a validation run.

    Each operation is submitted to the pool and returned as an awaitable bound to the
    running event loop, so the caller can fan out reads while keeping all bookkeeping
    on the loop's thread.
    """

    def __init__(self, concurrency: int | None = None):
        if concurrency is None:
            concurrency = multiprocessing.cpu_count()

        self._concurrency = concurrency
        self._pool: ThreadPool = ThreadPool(self._concurrency)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self._pool.close()

    @property
    def concurrency(self):
        return self._concurrency

    def extract(self, path: pathlib.Path) -> Awaitable[list[tuple[str, pathlib.Path]]]:
        logger.debug(f"Starting declaration extraction for: {path}")

        async def log_and_extract():
            result = await self._evaluate(extract_declarations_from_file, path)
            logger.debug(f"Completed declaration extraction for: {path} (declarations={len(result)})")
            return result

        return log_and_extract()

    def probe(self, path: pathlib.Path) -> Awaitable[bool]:
        """Check existence of an external declaration file.

        :return: True if the path exists, False if it does not. Other OS errors and a ValueError
            for an unrepresentable path are raised."""
        return self._evaluate(probe_path, path)

    def _evaluate(self, func, *args):
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def set_result(value):
            if not future.cancelled():
                future.set_result(value)

        def set_exception(exception):
            if not future.cancelled():
                future.set_exception(exception)

        self._pool.apply_async(func, args=args,
                               callback=lambda v: loop.call_soon_threadsafe(set_result, v),
                               error_callback=lambda e: loop.call_soon_threadsafe(set_exception, e))

        return future
