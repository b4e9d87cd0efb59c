import asyncio
import logging
from asyncio import TaskGroup
from pathlib import Path
from typing import Callable, Iterable

from ..errors import ScanError, HashError
from ..grouping.grouper import DuplicateGrouper
from ..grouping.records import FileRecord
from ..utils.processor import Processor
from ..utils.throttler import Throttler
from ..utils.walker import walk_files

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[ScanError], None]

# Marks the end of the record stream on the results queue
_END = object()


def log_scan_error(error: ScanError):
    logger.warning(f"Skipped {error.path}: {error.description}")


class ScanPipeline:
    """Feeds enumerated files through the worker pool into a grouper.

    Enumeration runs on the event loop between scheduling steps. Each file becomes one task,
    scheduled through a Throttler that bounds unfinished tasks to twice the pool size. Finished
    records pass through a bounded queue to a single task that inserts them into the grouper.
    When the grouper falls behind, the queue fills, tasks holding throttler slots wait on it,
    and the enumerator waits for a slot.

    Per-file errors are passed to on_error and counted; they do not cancel other work.
    """

    def __init__(
            self,
            processor: Processor,
            grouper: DuplicateGrouper | None = None,
            *,
            on_error: ErrorCallback | None = None,
            queue_size: int | None = None):
        if queue_size is None:
            queue_size = processor.concurrency * 4

        if queue_size < 1:
            raise ValueError(f"queue_size must be positive, got {queue_size}")

        self._processor = processor
        self._grouper = grouper if grouper is not None else DuplicateGrouper()
        self._on_error = on_error if on_error is not None else log_scan_error
        self._queue_size = queue_size
        self._throttler: Throttler | None = None
        self._aborted = False
        self._error_count = 0

    @property
    def grouper(self) -> DuplicateGrouper:
        return self._grouper

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def aborted(self) -> bool:
        return self._aborted

    def abort(self):
        """Stop feeding new files and cancel files in flight.

        Records already handed to the grouper are kept, so the grouping reflects a subset of
        the files. Must be called from the event loop running run().
        """
        if not self._aborted:
            logger.info("Aborting scan")
        self._aborted = True
        if self._throttler is not None:
            self._throttler.cancel_all()

    async def run(self, roots: Iterable[Path]) -> DuplicateGrouper:
        """Enumerate, fingerprint, and group every regular file under roots.

        Returns:
            The grouper holding one record for every file read successfully
        """
        queue: asyncio.Queue = asyncio.Queue(self._queue_size)

        async with TaskGroup() as tg:
            tg.create_task(self._drain(queue))

            try:
                async with TaskGroup() as producers:
                    self._throttler = Throttler(producers, self._processor.concurrency * 2)

                    for path in walk_files(roots, self._report_error):
                        if self._aborted:
                            break
                        await self._throttler.schedule(self._fingerprint(path, queue))
            finally:
                self._throttler = None

            await queue.put(_END)

        logger.info(f"Grouped {self._grouper.file_count} files with {self._error_count} errors")
        return self._grouper

    async def _fingerprint(self, path: Path, queue: asyncio.Queue):
        if self._aborted:
            return

        try:
            record = await self._processor.fingerprint(path)
        except OSError as e:
            self._report_error(HashError(path, e))
            return

        await queue.put(record)

    async def _drain(self, queue: asyncio.Queue):
        while True:
            record: FileRecord = await queue.get()
            if record is _END:
                break
            self._grouper.add(record)

    def _report_error(self, error: ScanError):
        self._error_count += 1
        self._on_error(error)
