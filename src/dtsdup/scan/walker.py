import logging
import os
import stat
from asyncio import TaskGroup
from pathlib import Path
from typing import Callable, Generator

from ..errors import FileReadError, PathAccessError, ValidateError, handle_error
from ..utils.processor import Processor
from ..utils.throttler import Throttler
from .registry import ModuleRegistry

logger = logging.getLogger(__name__)

DECLARATION_FILE_SUFFIX = '.d.ts'


class FileContext:
    """Context object for a file or directory during traversal.

    The stat result is taken with ``follow_symlinks=False`` and loaded lazily, so a
    symbolic link is reported as neither a directory nor a regular file and is never
    descended into.
    """
    def __init__(self, path: Path | None = None, st: os.stat_result | None = None):
        self._stat: os.stat_result | None = st
        self._path: Path | None = path

    @property
    def stat(self) -> os.stat_result:
        if self._stat is None:
            if self._path is None:
                raise LookupError("stat not available and path not provided")
            self._stat = self._path.stat(follow_symlinks=False)
        return self._stat

    def is_file(self):
        return stat.S_ISREG(self.stat.st_mode)

    def is_dir(self):
        return stat.S_ISDIR(self.stat.st_mode)


def walk(path: Path,
         on_error: Callable[[Path, OSError], None] | None = None) -> Generator[tuple[Path, FileContext], None, None]:
    """Recursively traverse a directory in listing order.

    Args:
        path: Directory to traverse
        on_error: Called with (path, error) when a directory cannot be listed or an entry
                  cannot be queried; the entry is skipped. Without it the error propagates.
    """
    try:
        children = list(path.iterdir())
    except OSError as e:
        if on_error is None:
            raise
        on_error(path, e)
        return

    for child in children:
        context = FileContext(child)
        try:
            is_dir = context.is_dir()
        except OSError as e:
            if on_error is None:
                raise
            on_error(child, e)
            continue

        yield child, context

        if is_dir:
            yield from walk(child, on_error)


def is_declaration_file(path: Path) -> bool:
    return path.name.endswith(DECLARATION_FILE_SUFFIX)


class TypingsWalker:
    """Builds a ModuleRegistry from a typings tree.

    Declaration files are read concurrently on the processor, but registry insertion
    only happens here, on the coordinating coroutine, in traversal order. The first
    file (in traversal order) that declares an identifier therefore always wins.
    """

    def __init__(self, processor: Processor, recovered_errors: list[ValidateError] | None = None):
        self._processor = processor
        self._recovered_errors = recovered_errors if recovered_errors is not None else []

    @property
    def recovered_errors(self) -> list[ValidateError]:
        return self._recovered_errors

    async def run(self, root: Path) -> ModuleRegistry:
        """Walk root and return the registry of identifiers found below it.

        Raises:
            PathAccessError: root cannot be queried
        """
        try:
            root_stat = root.stat()
        except OSError as e:
            raise PathAccessError(root, e) from e

        root_context = FileContext(root, root_stat)
        if root_context.is_dir():
            candidates = (
                (file_path, context)
                for file_path, context in walk(root, self._handle_walk_error)
                if context.is_file())
        elif root_context.is_file():
            candidates = iter([(root, root_context)])
        else:
            logger.info(f"Typings root is neither a directory nor a regular file: {root}")
            candidates = iter([])

        pending = []
        async with TaskGroup() as tg:
            throttler = Throttler(tg, self._processor.concurrency * 2)
            for file_path, _ in candidates:
                if is_declaration_file(file_path):
                    pending.append(await throttler.schedule(self._read_declarations(file_path)))

        registry = ModuleRegistry()
        for task in pending:
            for module_id, declared_at_path in task.result():
                if not registry.add(module_id, declared_at_path):
                    logger.debug(f"Ignoring repeated declaration of {module_id} in {declared_at_path}")

        logger.info(f"Discovered {len(registry)} custom module ids in {len(pending)} declaration files under {root}")
        return registry

    async def _read_declarations(self, file_path: Path) -> list[tuple[str, Path]]:
        try:
            return await self._processor.extract(file_path)
        except (OSError, UnicodeDecodeError) as e:
            handle_error(FileReadError(file_path, e), self._recovered_errors)
            return []

    def _handle_walk_error(self, path: Path, error: OSError):
        handle_error(FileReadError(path, error), self._recovered_errors)


async def walk_typings(root: Path, processor: Processor,
                       recovered_errors: list[ValidateError] | None = None) -> ModuleRegistry:
    """Walk a typings tree and collect its custom module identifiers (first declaration wins)."""
    return await TypingsWalker(processor, recovered_errors).run(root)
