import os
from pathlib import Path
from typing import Any, NamedTuple

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib  # pyright: ignore[reportMissingImports]

from .errors import ConfigError
from .utils.processor import DEFAULT_CHUNK_SIZE

CONFIG_ENVIRONMENT_VARIABLE = 'FIND_DUPS_CONFIG'

# Settings key constants
SETTING_WORKERS = 'scan.workers'
SETTING_CHUNK_SIZE = 'scan.chunk_size'
SETTING_QUEUE_SIZE = 'scan.queue_size'
SETTING_STRICT = 'scan.strict'
SETTING_LOG_PATH = 'logging.path'
SETTING_LOG_LEVEL = 'logging.level'


class Settings:
    """Read-only view of an optional TOML configuration file.

    The file is located through an explicit path or, failing that, the FIND_DUPS_CONFIG
    environment variable. Without either, every get() call returns its default.

    Example:
        settings = Settings.load(args.config)
        workers = settings.get(SETTING_WORKERS)
        log_path = settings.get('logging.path')
    """

    def __init__(self, data: dict[str, Any] | None = None, path: Path | None = None):
        self._settings = data if data is not None else {}
        self._path = path

    @classmethod
    def load(cls, path: str | os.PathLike | None = None) -> 'Settings':
        """Load settings from path, or from the file named by FIND_DUPS_CONFIG.

        Raises:
            ConfigError: The file cannot be read or is not valid TOML
        """
        if path is None:
            path = os.environ.get(CONFIG_ENVIRONMENT_VARIABLE) or None

        if path is None:
            return cls()

        path = Path(path)
        try:
            with open(path, 'rb') as f:
                return cls(tomllib.load(f), path)
        except OSError as e:
            raise ConfigError(f"unable to read configuration file {path}: {e.strerror}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"invalid configuration file {path}: {e}") from e

    @property
    def path(self) -> Path | None:
        return self._path

    def get(self, key: str, default=None):
        """Get a setting value by key with optional default.

        Dot notation reaches into tables, e.g. 'scan.workers' accesses
        settings['scan']['workers']. Returns the default if any part of the key path is missing
        or an intermediate value is not a table.
        """
        value = self._settings

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value


class ScanOptions(NamedTuple):
    """Runtime options for a run, resolved from the command line, settings and defaults."""
    workers: int | None = None  # None means one worker per CPU
    chunk_size: int = DEFAULT_CHUNK_SIZE
    queue_size: int | None = None  # None derives the capacity from the worker count
    strict: bool = False  # Exit non-zero when any file was skipped

    @classmethod
    def resolve(cls, settings: Settings, **overrides) -> 'ScanOptions':
        """Combine settings with command-line overrides; overrides that are None are ignored.

        Raises:
            ConfigError: A numeric option is not a positive integer, or strict is not a boolean
        """
        def pick(name, key, default):
            value = overrides.get(name)
            if value is None:
                value = settings.get(key, default)
            return value

        options = cls(
            workers=pick('workers', SETTING_WORKERS, None),
            chunk_size=pick('chunk_size', SETTING_CHUNK_SIZE, DEFAULT_CHUNK_SIZE),
            queue_size=pick('queue_size', SETTING_QUEUE_SIZE, None),
            strict=pick('strict', SETTING_STRICT, False),
        )

        if not isinstance(options.strict, bool):
            raise ConfigError(f"strict must be true or false, got {options.strict!r}")

        for name in ('workers', 'chunk_size', 'queue_size'):
            value = getattr(options, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

        return options
