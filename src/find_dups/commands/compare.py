import logging
from pathlib import Path
from typing import NamedTuple

from .scan import ScanArgs, create_pipeline
from ..grouping.grouper import Sides, split_sides

logger = logging.getLogger(__name__)


class ComparisonResult(NamedTuple):
    sides: Sides
    files_scanned: int
    error_count: int
    aborted: bool = False


async def do_compare(left: list[Path], right: list[Path], args: ScanArgs) -> ComparisonResult:
    """Fingerprint both sets of roots and partition their content.

    Each side is scanned by its own pipeline, so a file is counted once per side it is reachable
    from. A file reachable from both sides is reported as shared content.
    """
    left_pipeline = create_pipeline(args)
    left_grouper = await left_pipeline.run(left)
    logger.info(f"Left side: {left_grouper.file_count} files")

    right_pipeline = create_pipeline(args)
    right_grouper = await right_pipeline.run(right)
    logger.info(f"Right side: {right_grouper.file_count} files")

    sides = split_sides(left_grouper.paths_by_digest(), right_grouper.paths_by_digest())

    return ComparisonResult(
        sides,
        left_grouper.file_count + right_grouper.file_count,
        left_pipeline.error_count + right_pipeline.error_count,
        left_pipeline.aborted or right_pipeline.aborted)
