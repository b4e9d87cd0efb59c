"""Error types raised and reported while scanning for duplicates."""

from pathlib import Path


class ScanError(Exception):
    """A per-item failure that is reported and skipped without aborting the run.

    Attributes:
        path: The filesystem entry that could not be processed
        cause: The underlying exception, usually an OSError
    """

    def __init__(self, path: Path, cause: BaseException | str):
        super().__init__(path, cause)
        self.path = path
        self.cause = cause

    @property
    def description(self) -> str:
        if isinstance(self.cause, OSError) and self.cause.strerror:
            return self.cause.strerror
        return str(self.cause)

    def __str__(self):
        return f"{self.path}: {self.description}"


class EnumerationError(ScanError):
    """An entry could not be listed or inspected during traversal."""


class HashError(ScanError):
    """A file was listed but could not be read to the end."""


class SetupError(Exception):
    """The run cannot start, e.g. no usable root paths were given."""


class ConfigError(SetupError):
    """A configuration value is missing or malformed."""
