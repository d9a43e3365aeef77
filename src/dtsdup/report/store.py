"""Persistence of validation results."""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..errors import PersistError
from .classification import ClassificationResult, ValidateStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidateResult:
    """Outcome of a validation run as persisted to the result file.

    The JSON field names are the camelCase names consumed by existing build tooling.
    """
    status: ValidateStatus
    typings_directory: str
    preq_path: str
    new_duplicate_modules: tuple[str, ...] = ()
    known_duplicate_modules: tuple[str, ...] = ()
    redundant_duplicate_modules: tuple[str, ...] = ()

    @classmethod
    def from_classification(cls, classification: ClassificationResult,
                            typings_directory: str, preq_path: str) -> "ValidateResult":
        return cls(
            status=classification.status,
            typings_directory=typings_directory,
            preq_path=preq_path,
            new_duplicate_modules=classification.new_duplicate_module_ids,
            known_duplicate_modules=classification.known_duplicate_module_ids,
            redundant_duplicate_modules=classification.redundant_duplicate_module_ids,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for JSON serialization."""
        return {
            'status': str(self.status),
            'typingsDirectory': self.typings_directory,
            'preqPath': self.preq_path,
            'newDuplicateModules': list(self.new_duplicate_modules),
            'knownDuplicateModules': list(self.known_duplicate_modules),
            'redundantDuplicateModules': list(self.redundant_duplicate_modules),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ValidateResult":
        """Load result from dictionary.

        Raises:
            KeyError: A required field is missing
            ValueError: status is not a known value
        """
        return cls(
            status=ValidateStatus(data['status']),
            typings_directory=data['typingsDirectory'],
            preq_path=data['preqPath'],
            new_duplicate_modules=tuple(data.get('newDuplicateModules', ())),
            known_duplicate_modules=tuple(data.get('knownDuplicateModules', ())),
            redundant_duplicate_modules=tuple(data.get('redundantDuplicateModules', ())),
        )


class ResultStore:
    """Reads and writes the JSON result file of a validation run."""

    def __init__(self, out_path: Path) -> None:
        self.out_path: Path = out_path

    def write_result(self, result: ValidateResult) -> PersistError | None:
        """Write result to the output path, replacing any existing file.

        Writing is best effort: a failure is returned instead of raised, so the caller can
        apply the recovered policy and the run still completes with its console output and
        exit status.

        Returns:
            None on success, the PersistError describing the failure otherwise
        """
        try:
            with open(self.out_path, 'w', encoding='utf-8') as f:
                json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            return PersistError(self.out_path, e)

        logger.info(f"Wrote validation result to {self.out_path}")
        return None

    def read_result(self) -> ValidateResult:
        """Read a previously written result.

        Raises:
            FileNotFoundError: If the result file doesn't exist
            json.JSONDecodeError: If the file is not valid JSON
        """
        with open(self.out_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return ValidateResult.from_dict(data)
