from pathlib import Path
from typing import NamedTuple

from .pipeline import ScanPipeline, ErrorCallback
from ..grouping.records import DigestGroup
from ..utils.processor import Processor


class ScanArgs(NamedTuple):
    """Arguments shared by the scan, hash and compare operations."""
    processor: Processor  # Worker pool used for fingerprinting
    queue_size: int | None = None  # Capacity of the results queue; None derives it from the pool size
    on_error: ErrorCallback | None = None  # Receives each per-file error as it happens


class ScanResult(NamedTuple):
    groups: list[DigestGroup]  # Duplicate groups only, unsorted
    files_scanned: int
    error_count: int
    aborted: bool = False


def create_pipeline(args: ScanArgs) -> ScanPipeline:
    return ScanPipeline(args.processor, on_error=args.on_error, queue_size=args.queue_size)


async def do_scan(roots: list[Path], args: ScanArgs) -> ScanResult:
    """Group the files under roots by content and keep the groups with duplicates."""
    pipeline = create_pipeline(args)
    grouper = await pipeline.run(roots)
    return ScanResult(grouper.groups(), grouper.file_count, pipeline.error_count, pipeline.aborted)
