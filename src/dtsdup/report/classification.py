"""Classification of external duplicates against a known-duplicates baseline."""
from dataclasses import dataclass
from enum import StrEnum
from typing import Sequence

from ..scan.registry import ModuleRecord


class ValidateStatus(StrEnum):
    SUCCESS = 'Success'
    WARNING = 'Warning'
    ERROR = 'Error'


@dataclass(frozen=True)
class ClassificationResult:
    """Partition of duplicate identifiers relative to the baseline.

    Attributes:
        new_duplicate_module_ids: Duplicates not in the baseline, in discovery order
        known_duplicate_module_ids: The baseline, passed through unchanged
        redundant_duplicate_module_ids: Baseline entries that are no longer duplicated, in baseline order
        status: SUCCESS without duplicates, ERROR with any new duplicate, WARNING otherwise
    """
    new_duplicate_module_ids: tuple[str, ...]
    known_duplicate_module_ids: tuple[str, ...]
    redundant_duplicate_module_ids: tuple[str, ...]
    status: ValidateStatus


def classify(external_duplicates: Sequence[ModuleRecord], known_baseline_ids: Sequence[str]) -> ClassificationResult:
    known = set(known_baseline_ids)
    found = {record.id for record in external_duplicates}

    new_ids = tuple(record.id for record in external_duplicates if record.id not in known)
    redundant_ids = tuple(module_id for module_id in known_baseline_ids if module_id not in found)

    if not external_duplicates:
        status = ValidateStatus.SUCCESS
    elif new_ids:
        status = ValidateStatus.ERROR
    else:
        status = ValidateStatus.WARNING

    return ClassificationResult(
        new_duplicate_module_ids=new_ids,
        known_duplicate_module_ids=tuple(known_baseline_ids),
        redundant_duplicate_module_ids=redundant_ids,
        status=status,
    )
