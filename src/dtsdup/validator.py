import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from .errors import PathAccessError, ValidateError, handle_error
from .report.classification import ClassificationResult, ValidateStatus, classify
from .report.console import ConsoleReporter
from .report.store import ResultStore, ValidateResult
from .scan.registry import ModuleRecord, ModuleRegistry
from .scan.resolver import resolve_duplicates
from .scan.walker import walk_typings
from .settings import SETTING_LOGGING_LEVEL, SETTING_LOGGING_PATH, ValidateConfig, ValidateSettings
from .utils.processor import Processor

logger = logging.getLogger(__name__)


@dataclass
class ValidationRun:
    """Everything a validation run produced.

    Attributes:
        registry: All custom module ids found in the typings tree
        duplicates: Records that also exist under a search root, in registry order
        classification: Partition of duplicates against the known-duplicates baseline
        result: The persisted form of the classification
        recovered_errors: Errors that were logged and recovered from during the run
    """
    registry: ModuleRegistry
    duplicates: list[ModuleRecord]
    classification: ClassificationResult
    result: ValidateResult
    recovered_errors: list[ValidateError] = field(default_factory=list)

    @property
    def status(self) -> ValidateStatus:
        return self.classification.status


class TypingsValidator:
    """Workflow layer for checking a typings tree for duplicated module declarations.

    The full pipeline is: walk the typings directory, extract module ids, probe the
    search roots, classify against the known duplicates, then print and persist the
    result. Filesystem work is delegated to the Processor.
    """

    def __init__(self, processor: Processor, config: ValidateConfig,
                 settings: ValidateSettings | None = None, reporter: ConsoleReporter | None = None):
        self._processor = processor
        self._config = config
        self._settings = settings if settings is not None else ValidateSettings()
        self._reporter = reporter if reporter is not None else ConsoleReporter()

    @property
    def config(self) -> ValidateConfig:
        return self._config

    def configure_logging_from_settings(self) -> bool:
        """Configure logging from the config file if a log path is specified.

        Preserves the current logging level if already configured, unless the settings
        name a level themselves. Only the log file destination is replaced.

        Returns:
            True if logging was configured, False otherwise
        """
        log_path_setting = self._settings.get(SETTING_LOGGING_PATH)
        if not log_path_setting:
            return False

        level_setting = self._settings.get(SETTING_LOGGING_LEVEL)
        if level_setting:
            level = logging.getLevelName(str(level_setting).upper())
            if not isinstance(level, int):
                level = logging.INFO
        else:
            level = logging.root.level if logging.root.level != logging.NOTSET else logging.INFO

        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)

        logging.basicConfig(
            filename=str(log_path_setting),
            level=level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        return True

    def validate(self) -> ValidationRun:
        """Run the complete validation pipeline.

        Raises:
            PathAccessError: The typings directory cannot be accessed
        """
        return asyncio.run(self._validate())

    def inspect(self) -> Iterator[str]:
        """Walk the typings directory and yield one line per discovered module id.

        Yields:
            Tab-separated module id and the file it was first declared in
        """
        registry = asyncio.run(walk_typings(Path(self._config.typings_directory), self._processor))
        for record in registry:
            yield f"{record.id}\t{record.declared_at_path}"

    async def _validate(self) -> ValidationRun:
        config = self._config
        reporter = self._reporter
        recovered_errors: list[ValidateError] = []

        logger.info(f"Validating {config.typings_directory} against {config.preq_path}")

        reporter.begin("Extracting Module IDs")
        try:
            registry = await walk_typings(Path(config.typings_directory), self._processor, recovered_errors)
        except PathAccessError:
            reporter.fail()
            raise
        reporter.succeed(f"Extracted {len(registry)} Module IDs")

        reporter.begin("Testing for Duplicate module definitions")
        duplicates = await resolve_duplicates(registry, config.search_roots, self._processor, recovered_errors)
        classification = classify(duplicates, config.known_duplicate_module_ids)
        reporter.finish_duplicate_phase(classification.status)

        result = ValidateResult.from_classification(classification, config.typings_directory, config.preq_path)
        reporter.print_result(result)

        persist_error = ResultStore(Path(config.out_file_path)).write_result(result)
        if persist_error is not None:
            handle_error(persist_error, recovered_errors)

        logger.info(f"Validation finished with status {classification.status}")
        return ValidationRun(registry, duplicates, classification, result, recovered_errors)
