import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigurationError
from .scan.resolver import split_search_roots

DEFAULT_CONFIG_PATH = './tools_config.json'
DEFAULT_TYPINGS_DIRECTORY = './'
DEFAULT_OUT_FILE_PATH = './validate_result.json'

# Settings key constants
SETTING_TYPINGS_DIRECTORY = 'validateConfig.typingsDirectory'
SETTING_PREQ_PATH = 'validateConfig.preqPath'
SETTING_KNOWN_DUPLICATE_MODULE_IDS = 'validateConfig.knownDuplicateModuleIds'
SETTING_OUT_FILE_PATH = 'validateConfig.outFilePath'
SETTING_LOGGING_PATH = 'logging.path'
SETTING_LOGGING_LEVEL = 'logging.level'


class ValidateSettings:
    """Settings manager for the tools configuration file.

    Provides a read-only key-value interface over the raw data of a JSON file, or of a
    TOML file when the path ends with ``.toml``. This class is agnostic to the schema;
    load_validate_config() interprets the ``validateConfig`` section.

    Example:
        settings = ValidateSettings(Path('tools_config.json'))
        preq_path = settings.get(SETTING_PREQ_PATH)
    """

    def __init__(self, config_path: Path | None = None, required: bool = False):
        """Load settings from config_path if it exists.

        Args:
            config_path: Path of the configuration file; None gives empty settings
            required: Raise if the file does not exist instead of using empty settings

        Raises:
            ConfigurationError: The file is required but missing, unreadable or malformed
        """
        self.config_path = config_path
        self._settings = {}

        if config_path is None:
            return

        if not config_path.exists():
            if required:
                raise ConfigurationError(f"Config file not found: {config_path}")
            return

        try:
            if config_path.suffix == '.toml':
                with open(config_path, 'rb') as f:
                    self._settings = tomllib.load(f)
            else:
                with open(config_path, 'r', encoding='utf-8') as f:
                    self._settings = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Cannot load config file {config_path}: {e}") from e

        if not isinstance(self._settings, dict):
            raise ConfigurationError(f"Config file {config_path} does not contain an object")

    def get(self, key: str, default=None):
        """Get a setting value by key with optional default.

        Dot notation accesses nested keys: 'validateConfig.preqPath' reads
        settings['validateConfig']['preqPath']. Returns the default value if the key path
        does not exist or if any intermediate value is not a dictionary.
        """
        keys = key.split('.')
        value = self._settings

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_str(self, key: str, default: str | None = None) -> str | None:
        value = self.get(key)
        if value is None:
            return default
        if not isinstance(value, str):
            raise ConfigurationError(f"Setting {key} must be a string")
        return value.strip()


@dataclass
class ValidateConfig:
    """Effective configuration of a validation run after merging file and overrides."""
    typings_directory: str
    preq_path: str
    known_duplicate_module_ids: list[str] = field(default_factory=list)
    out_file_path: str = DEFAULT_OUT_FILE_PATH

    @property
    def search_roots(self) -> list[str]:
        return split_search_roots(self.preq_path)


def _strip(value: str | None) -> str | None:
    return None if value is None else value.strip()


def load_validate_config(
        config_path: str | None = None,
        *,
        typings_directory: str | None = None,
        preq_path: str | None = None,
        out_file_path: str | None = None,
        require_preq_path: bool = True) -> tuple[ValidateConfig, ValidateSettings]:
    """Build the effective configuration from defaults, the config file and overrides.

    The default config file is optional; an explicitly named one must exist. Each
    non-None override replaces the corresponding value from the file.

    Args:
        config_path: Config file path, or None for ./tools_config.json
        typings_directory: Override for validateConfig.typingsDirectory
        preq_path: Override for validateConfig.preqPath (``;``-separated search roots)
        out_file_path: Override for validateConfig.outFilePath
        require_preq_path: Raise if no preqPath is configured

    Returns:
        Tuple of (effective configuration, raw settings)

    Raises:
        ConfigurationError: The config file cannot be loaded, a value has the wrong type,
                            or preqPath is required but missing
    """
    explicit = config_path is not None
    path = Path((config_path if explicit else DEFAULT_CONFIG_PATH).strip())
    settings = ValidateSettings(path, required=explicit)

    known_ids = settings.get(SETTING_KNOWN_DUPLICATE_MODULE_IDS, [])
    if not isinstance(known_ids, list) or not all(isinstance(item, str) for item in known_ids):
        raise ConfigurationError(f"Setting {SETTING_KNOWN_DUPLICATE_MODULE_IDS} must be a list of strings")

    resolved_preq_path = _strip(preq_path) or settings.get_str(SETTING_PREQ_PATH)
    if not resolved_preq_path:
        if require_preq_path:
            raise ConfigurationError("No PreReq Path defined")
        resolved_preq_path = ''

    config = ValidateConfig(
        typings_directory=_strip(typings_directory) or settings.get_str(SETTING_TYPINGS_DIRECTORY)
        or DEFAULT_TYPINGS_DIRECTORY,
        preq_path=resolved_preq_path,
        known_duplicate_module_ids=list(known_ids),
        out_file_path=_strip(out_file_path) or settings.get_str(SETTING_OUT_FILE_PATH) or DEFAULT_OUT_FILE_PATH,
    )
    return config, settings
