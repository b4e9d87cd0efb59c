from pathlib import Path
from typing import NamedTuple

from .scan import ScanArgs, create_pipeline
from ..grouping.records import FileRecord


class HashListing(NamedTuple):
    records: list[FileRecord]  # Every file read successfully, unsorted
    error_count: int
    aborted: bool = False

    @property
    def files_scanned(self) -> int:
        return len(self.records)


async def do_hash(roots: list[Path], args: ScanArgs) -> HashListing:
    """Fingerprint every file under roots."""
    pipeline = create_pipeline(args)
    grouper = await pipeline.run(roots)
    return HashListing(grouper.records(), pipeline.error_count, pipeline.aborted)
