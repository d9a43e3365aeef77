"""Error taxonomy for typings validation.

Every error carries a policy that states whether it aborts the run or is recovered
from and recorded on the run:

- FATAL errors propagate to the caller (the CLI maps them to exit code 2).
- RECOVERED errors are logged and collected in ``ValidationRun.recovered_errors``;
  the pipeline continues as if the failed operation yielded nothing.

``handle_error`` applies that policy at the point where an error occurs.
"""
import logging
from enum import StrEnum
from pathlib import Path

logger = logging.getLogger(__name__)


class ErrorPolicy(StrEnum):
    FATAL = 'fatal'
    RECOVERED = 'recovered'


class ValidateError(Exception):
    """Base class for all errors raised or recorded by dtsdup."""
    policy: ErrorPolicy = ErrorPolicy.FATAL


class ConfigurationError(ValidateError):
    """Configuration is missing a required value or could not be loaded."""
    policy = ErrorPolicy.FATAL


class PathAccessError(ValidateError):
    """The typings root cannot be queried."""
    policy = ErrorPolicy.FATAL

    def __init__(self, path: Path, cause: OSError | None = None):
        super().__init__(f"Cannot access typings directory: {path}"
                         + (f" ({cause.strerror or cause})" if cause is not None else ""))
        self.path = path
        self.cause = cause


class FileReadError(ValidateError):
    """A declaration file (or directory) could not be read; it contributes no identifiers."""
    policy = ErrorPolicy.RECOVERED

    def __init__(self, path: Path, cause: Exception):
        super().__init__(f"Cannot read {path}: {cause}")
        self.path = path
        self.cause = cause


class ProbeError(ValidateError):
    """An external path existence check failed for a reason other than "not found"."""
    policy = ErrorPolicy.RECOVERED

    def __init__(self, path: Path, cause: OSError | ValueError):
        super().__init__(f"Cannot probe {path}: {cause}")
        self.path = path
        self.cause = cause


class PersistError(ValidateError):
    """The result file could not be written."""
    policy = ErrorPolicy.RECOVERED

    def __init__(self, path: Path, cause: OSError):
        super().__init__(f"Cannot write result to {path}: {cause}")
        self.path = path
        self.cause = cause


def handle_error(error: ValidateError, recovered_errors: list[ValidateError], level: int = logging.WARNING) -> None:
    """Raise error if its policy is FATAL, otherwise log it at level and record it.

    Raises:
        ValidateError: error itself, when its policy is FATAL
    """
    if error.policy is ErrorPolicy.FATAL:
        raise error

    logger.log(level, str(error))
    recovered_errors.append(error)
