import asyncio
import logging
import os
from pathlib import Path
from typing import Iterable

from .commands.compare import do_compare, ComparisonResult
from .commands.hash_list import do_hash, HashListing
from .commands.pipeline import ErrorCallback
from .commands.scan import do_scan, ScanArgs, ScanResult
from .errors import EnumerationError, SetupError
from .settings import Settings, ScanOptions, SETTING_LOG_PATH, SETTING_LOG_LEVEL
from .utils.processor import Processor
from .utils.walker import check_roots, log_enumeration_error

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Scanner:
    """Workflow layer for duplicate detection over a set of root paths.

    Scanner validates the roots, runs one of the operations below on a fresh event loop, and
    returns its result:
    - scan(): group files by content and report the groups with duplicates
    - hash(): list the digest of every file
    - compare(): partition content between a left and a right set of roots

    The worker pool belongs to the caller, who closes it (see Processor).
    """

    def __init__(self, processor: Processor, options: ScanOptions | None = None,
                 settings: Settings | None = None, on_error: ErrorCallback | None = None):
        """Initialize the scanner.

        Args:
            processor: Worker pool used for hashing
            options: Resolved runtime options; defaults apply when omitted
            settings: Configuration file contents, consulted for logging
            on_error: Receives each EnumerationError and HashError as it happens
        """
        self._processor = processor
        self._options = options if options is not None else ScanOptions()
        self._settings = settings if settings is not None else Settings()
        self._on_error = on_error

    @property
    def options(self) -> ScanOptions:
        return self._options

    def configure_logging_from_settings(self) -> bool:
        """Configure logging from the settings file if it names a log path.

        Preserves the current logging level if already configured (e.g., from CLI arguments),
        unless the settings file names one.

        Returns:
            True if logging was configured, False otherwise
        """
        log_path = self._settings.get(SETTING_LOG_PATH)
        if not log_path:
            return False

        level_name = self._settings.get(SETTING_LOG_LEVEL)
        if level_name:
            level = getattr(logging, str(level_name).upper(), logging.INFO)
        else:
            level = logging.root.level if logging.root.level != logging.NOTSET else logging.INFO

        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)

        logging.basicConfig(filename=str(log_path), level=level, format=LOG_FORMAT)
        return True

    def scan(self, paths: Iterable[str | os.PathLike]) -> ScanResult:
        """Find groups of files with identical content.

        Raises:
            SetupError: None of the paths is a usable file or directory
        """
        roots, root_errors = self._check_roots(paths)
        logger.info(f"Scanning {len(roots)} roots with {self._processor.concurrency} workers")
        result = asyncio.run(do_scan(roots, self._args()))
        return result._replace(error_count=result.error_count + root_errors)

    def hash(self, paths: Iterable[str | os.PathLike]) -> HashListing:
        """Compute the digest of every file under paths.

        Raises:
            SetupError: None of the paths is a usable file or directory
        """
        roots, root_errors = self._check_roots(paths)
        result = asyncio.run(do_hash(roots, self._args()))
        return result._replace(error_count=result.error_count + root_errors)

    def compare(self, left: Iterable[str | os.PathLike], right: Iterable[str | os.PathLike]) -> ComparisonResult:
        """Partition content between two sets of roots.

        Raises:
            SetupError: One of the sides has no usable file or directory
        """
        try:
            left_roots, left_errors = self._check_roots(left)
        except SetupError as e:
            raise SetupError(f"left-hand side: {e}") from e

        try:
            right_roots, right_errors = self._check_roots(right)
        except SetupError as e:
            raise SetupError(f"right-hand side: {e}") from e

        result = asyncio.run(do_compare(left_roots, right_roots, self._args()))
        return result._replace(error_count=result.error_count + left_errors + right_errors)

    def _check_roots(self, paths: Iterable[str | os.PathLike]) -> tuple[list[Path], int]:
        report = self._on_error if self._on_error is not None else log_enumeration_error
        errors = 0

        def count_and_report(error: EnumerationError):
            nonlocal errors
            errors += 1
            report(error)

        return check_roots(paths, count_and_report), errors

    def _args(self) -> ScanArgs:
        return ScanArgs(self._processor, self._options.queue_size, self._on_error)
