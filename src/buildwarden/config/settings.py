from pathlib import Path

import tomllib


# Settings key constants
SETTING_LOGGING_PATH = 'logging.path'
SETTING_CONSISTENCY_PROPERTY = 'consistency.property'
SETTING_CONSISTENCY_FILES = 'consistency.files'
SETTING_REPORTS_DESTINATION = 'reports.destination'
SETTING_CODE_QUALITY_ENABLED = 'code_quality.enabled'
SETTING_CI_MARKER = 'ci.marker'

DEFAULT_CONSISTENCY_PROPERTY = 'org.gradle.jvmargs'
DEFAULT_CONSISTENCY_FILES = ('gradle.properties', '../gradle.properties')
DEFAULT_REPORTS_DESTINATION = 'build'
DEFAULT_CI_MARKER = 'CI'


class WorkspaceSettings:
    """Settings manager for a build directory.

    Provides a read-only key-value interface to access settings from .buildwarden/settings.toml.
    This class is agnostic to the schema and usage of settings - it simply loads the TOML
    file and provides access to the raw data structure. Consumers of this class are
    responsible for interpreting and validating the settings according to their needs.

    Example:
        settings = WorkspaceSettings(build_dir)
        key = settings.get(SETTING_CONSISTENCY_PROPERTY, DEFAULT_CONSISTENCY_PROPERTY)
        destination = settings.get('reports.destination', 'build')
    """

    def __init__(self, build_dir: Path):
        """Initialize settings from TOML file.

        Loads settings from .buildwarden/settings.toml if it exists. If the file does not exist,
        an empty settings dictionary is used, and all get() calls will return their defaults.

        Args:
            build_dir: Path to the build directory

        Raises:
            tomllib.TOMLDecodeError: The settings file exists but is not valid TOML
        """
        self._build_dir = build_dir
        self._settings = {}

        settings_file = get_settings_file_path(build_dir)
        if settings_file.exists():
            with open(settings_file, 'rb') as f:
                self._settings = tomllib.load(f)

    @classmethod
    def from_dict(cls, build_dir: Path, data: dict) -> 'WorkspaceSettings':
        """Create settings from an already parsed table instead of the settings file."""
        settings = cls.__new__(cls)
        settings._build_dir = build_dir
        settings._settings = data
        return settings

    def get(self, key: str, default=None):
        """Get a setting value by key with optional default.

        Supports both simple keys and dot notation for accessing nested keys (e.g.,
        'reports.destination' accesses settings['reports']['destination']). Returns the default
        value if the key path does not exist or if any intermediate value is not a dictionary.

        Args:
            key: Setting key path using dot notation for nested keys
            default: Default value to return if key not found

        Returns:
            Setting value at the specified key path, or default if not found

        Examples:
            >>> settings.get(SETTING_CONSISTENCY_FILES, [])
            ['gradle.properties', '../gradle.properties']
            >>> settings.get('nonexistent.key', 'fallback')
            'fallback'
        """
        keys = key.split('.')
        value = self._settings

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_flag(self, key: str, default: bool = False) -> bool:
        """Get a boolean setting, accepting TOML booleans or the strings 'true' and 'false'."""
        value = self.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() == 'true'


def get_settings_file_path(build_dir: Path) -> Path:
    return build_dir / '.buildwarden' / 'settings.toml'
