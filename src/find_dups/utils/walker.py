import logging
import os
import stat
from pathlib import Path
from typing import Callable, Iterable, Iterator

from ..errors import EnumerationError, SetupError

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[EnumerationError], None]


def log_enumeration_error(error: EnumerationError):
    logger.warning(f"Unable to enumerate {error.path}: {error.description}")


def check_roots(roots: Iterable[str | os.PathLike], on_error: ErrorCallback | None = None) -> list[Path]:
    """Validate the root paths named by the user before any work starts.

    Roots are followed if they are symlinks, since the user named them explicitly. Roots that do
    not exist, cannot be inspected, or are neither regular files nor directories are reported
    through on_error and dropped.

    Args:
        roots: Paths given on the command line
        on_error: Receives an EnumerationError for each unusable root

    Returns:
        The usable roots, in the order given

    Raises:
        SetupError: No usable root remains
    """
    if on_error is None:
        on_error = log_enumeration_error

    checked = []
    for root in roots:
        path = Path(root)
        try:
            st = path.stat()
        except OSError as e:
            on_error(EnumerationError(path, e))
            continue

        if not (stat.S_ISDIR(st.st_mode) or stat.S_ISREG(st.st_mode)):
            on_error(EnumerationError(path, "not a regular file or directory"))
            continue

        checked.append(path)

    if not checked:
        raise SetupError("no valid input paths given")

    return checked


def walk_files(roots: Iterable[Path], on_error: ErrorCallback | None = None) -> Iterator[Path]:
    """Lazily enumerate the regular files under the given roots.

    Every call returns a fresh generator, so the walk can be repeated. Directories are visited
    depth-first with entries sorted by name. Symlinks found inside a tree are resolved when they
    point at regular files and skipped when they point at directories, which keeps the walk free
    of cycles. A file reachable through several roots, overlapping subtrees, or links is yielded
    once, under the first path it was reached by.

    Errors on individual entries are passed to on_error and the walk continues.

    Args:
        roots: Files or directories to enumerate
        on_error: Receives an EnumerationError for each entry that could not be inspected

    Yields:
        Paths of regular files, each formed by joining its root with the names below it
    """
    if on_error is None:
        on_error = log_enumeration_error

    yielded: set[Path] = set()
    visited: set[tuple[int, int]] = set()

    for root in roots:
        root = Path(root)
        try:
            st = root.stat()
        except OSError as e:
            on_error(EnumerationError(root, e))
            continue

        if stat.S_ISDIR(st.st_mode):
            candidates = _walk_directory(root, st, on_error, visited)
        elif stat.S_ISREG(st.st_mode):
            candidates = iter([root])
        else:
            logger.info(f"Skipping special file: {root}")
            continue

        for path in candidates:
            try:
                real_path = path.resolve(strict=True)
            except (OSError, RuntimeError) as e:
                on_error(EnumerationError(path, e))
                continue

            if real_path in yielded:
                logger.debug(f"Already enumerated as {real_path}: {path}")
                continue

            yielded.add(real_path)
            yield path


def _walk_directory(
        root: Path,
        root_stat: os.stat_result,
        on_error: ErrorCallback,
        visited: set[tuple[int, int]]) -> Iterator[Path]:
    # Explicit stack so deep trees do not hit the recursion limit
    stack: list[tuple[Path, os.stat_result]] = [(root, root_stat)]

    while stack:
        directory, directory_stat = stack.pop()

        identity = (directory_stat.st_dev, directory_stat.st_ino)
        if identity in visited:
            logger.debug(f"Directory already visited: {directory}")
            continue
        visited.add(identity)

        try:
            children = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            on_error(EnumerationError(directory, e))
            continue

        subdirectories = []
        for child in children:
            try:
                child_stat = child.lstat()
            except OSError as e:
                on_error(EnumerationError(child, e))
                continue

            if stat.S_ISLNK(child_stat.st_mode):
                try:
                    child_stat = child.stat()
                except OSError as e:
                    on_error(EnumerationError(child, e))
                    continue

                if stat.S_ISDIR(child_stat.st_mode):
                    logger.info(f"Not following symlink to directory: {child}")
                    continue

            if stat.S_ISDIR(child_stat.st_mode):
                subdirectories.append((child, child_stat))
            elif stat.S_ISREG(child_stat.st_mode):
                yield child
            else:
                logger.info(f"Skipping special file: {child}")

        # Reversed so the first subdirectory by name is popped first
        stack.extend(reversed(subdirectories))
