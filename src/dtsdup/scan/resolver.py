import logging
from asyncio import TaskGroup
from pathlib import Path
from typing import Sequence

from ..errors import ProbeError, ValidateError, handle_error
from ..utils.processor import Processor
from ..utils.throttler import Throttler
from .registry import ModuleRecord, ModuleRegistry

logger = logging.getLogger(__name__)

SEARCH_ROOT_SEPARATOR = ';'
EXTERNAL_TYPINGS_SUBPATH = Path('win_b64', 'typings')


def split_search_roots(preq_path: str) -> list[str]:
    """Split a ``;``-joined list of search roots.

    Empty segments (e.g. from a trailing ``;``) are kept; they are probed relative to the
    current working directory.
    """
    return preq_path.split(SEARCH_ROOT_SEPARATOR)


def external_declaration_path(search_root: str, record: ModuleRecord) -> Path:
    """Location of the compiled counterpart of record under a search root."""
    return Path(search_root) / EXTERNAL_TYPINGS_SUBPATH / record.relative_external_path


class DuplicateResolver:
    """Probes search roots for compiled declarations of registered identifiers."""

    def __init__(self, processor: Processor, recovered_errors: list[ValidateError] | None = None):
        self._processor = processor
        self._recovered_errors = recovered_errors if recovered_errors is not None else []

    async def run(self, registry: ModuleRegistry, search_roots: Sequence[str]) -> list[ModuleRecord]:
        """Mark every record that has an external counterpart.

        Returns:
            Records found to exist externally, in registry order
        """
        for search_root in search_roots:
            if not search_root:
                logger.debug("Empty search root is probed relative to the current working directory")

        records = registry.records()
        async with TaskGroup() as tg:
            throttler = Throttler(tg, self._processor.concurrency * 2)
            for record in records:
                await throttler.schedule(self._resolve_record(record, search_roots))

        duplicates = [record for record in records if record.exists_externally]
        logger.info(f"Found {len(duplicates)} of {len(records)} module ids in external typings")
        return duplicates

    async def _resolve_record(self, record: ModuleRecord, search_roots: Sequence[str]):
        # Roots are probed in order and the first hit wins.
        for search_root in search_roots:
            candidate = external_declaration_path(search_root, record)
            if await self._probe(candidate):
                logger.debug(f"{record.id} is also declared at {candidate}")
                record.mark_external(candidate)
                return

    async def _probe(self, path: Path) -> bool:
        try:
            return await self._processor.probe(path)
        except (OSError, ValueError) as e:
            # ValueError: the path cannot be represented, e.g. an embedded null byte.
            handle_error(ProbeError(path, e), self._recovered_errors, logging.DEBUG)
            return False


async def resolve_duplicates(registry: ModuleRegistry, search_roots: Sequence[str], processor: Processor,
                             recovered_errors: list[ValidateError] | None = None) -> list[ModuleRecord]:
    """Find the registered identifiers that also exist as compiled declarations under a search root."""
    return await DuplicateResolver(processor, recovered_errors).run(registry, search_roots)
