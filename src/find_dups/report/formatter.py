"""Text rendering of scan results.

Reports go to the output stream and are stable for a given set of groups: ordering never
depends on the order in which files finished hashing. Errors and the run summary go to the
error stream so the report itself stays machine readable.
"""

import sys
from pathlib import Path
from typing import Iterable, TextIO

from ..errors import ScanError
from ..grouping.grouper import Sides
from ..grouping.records import DigestGroup, FileRecord

NO_DUPLICATES = "no duplicates found"


def sort_groups(groups: Iterable[DigestGroup]) -> list[DigestGroup]:
    """Order groups by member count descending, then digest ascending, with members sorted by path."""
    ordered = [DigestGroup(group.digest, sorted(group.members, key=lambda r: r.path)) for group in groups]
    ordered.sort(key=lambda group: (-len(group), group.digest))
    return ordered


def quote(path: Path) -> str:
    return f"'{path}'"


class ReportFormatter:
    def __init__(self, output: TextIO | None = None, errors: TextIO | None = None):
        self._output = output if output is not None else sys.stdout
        self._errors = errors if errors is not None else sys.stderr

    def _print(self, line: str = ""):
        print(line, file=self._output)

    def write_groups(self, groups: Iterable[DigestGroup]):
        """Write one block per duplicate group: the hex digest, then one member path per line."""
        ordered = sort_groups(groups)
        if not ordered:
            self._print(NO_DUPLICATES)
            return

        for i, group in enumerate(ordered):
            if i > 0:
                self._print()
            self._print(group.digest.hex())
            for record in group.members:
                self._print(str(record.path))

    def write_records(self, records: Iterable[FileRecord]):
        """Write a digest listing in the layout used by sha256sum, sorted by path."""
        for record in sorted(records, key=lambda r: r.path):
            self._print(f"{record.hexdigest}  {record.path}")

    def write_sides(self, sides: Sides, *, show_left: bool = True, show_right: bool = True,
                    show_both: bool = False):
        """Write a left/right comparison.

        Files only on the left are prefixed with '<=', files only on the right with '=>'.
        Content on both sides is written as a '<=>' line followed by its indented paths, with
        blocks ordered by their first left-hand path.
        """
        if show_left:
            for path in sorted(sides.left_only):
                self._print(f"<= {quote(path)}")

        if show_right:
            for path in sorted(sides.right_only):
                self._print(f"=> {quote(path)}")

        if show_both:
            blocks = sorted(((sorted(left), sorted(right)) for left, right in sides.both),
                            key=lambda block: block[0][0])
            for left_paths, right_paths in blocks:
                self._print("<=>")
                for path in left_paths:
                    self._print(f"  <= {quote(path)}")
                for path in right_paths:
                    self._print(f"  => {quote(path)}")

    def write_error(self, error: ScanError):
        print(f"ERROR: {error.path}: {error.description}", file=self._errors)

    def write_summary(self, files_scanned: int, error_count: int, *, groups: list[DigestGroup] | None = None,
                      aborted: bool = False):
        parts = [f"{files_scanned} files scanned"]
        if groups is not None:
            duplicate_files = sum(len(group) for group in groups)
            parts.append(f"{len(groups)} duplicate groups ({duplicate_files} files)")
        parts.append(f"{error_count} errors")

        print(", ".join(parts), file=self._errors)

        if aborted:
            print("Scan was interrupted; results are partial.", file=self._errors)
        elif error_count:
            print("Some files could not be read; results are partial.", file=self._errors)
