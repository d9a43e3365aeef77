from .errors import (ValidateError, ConfigurationError, PathAccessError, FileReadError, ProbeError, PersistError,
                     ErrorPolicy, handle_error)
from .settings import ValidateConfig, ValidateSettings, load_validate_config
from .validator import TypingsValidator, ValidationRun
from .report.classification import ClassificationResult, ValidateStatus, classify
from .report.store import ResultStore, ValidateResult
from .scan.registry import ModuleRecord, ModuleRegistry
from .utils.processor import Processor
