import asyncio
import hashlib
import logging
import multiprocessing
import signal
from multiprocessing.pool import Pool
from pathlib import Path
from typing import Awaitable

from ..grouping.records import FileRecord

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


def compute_fingerprint(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> tuple[int, bytes]:
    """Stream a file through SHA-256.

    Only one chunk is held in memory at a time. Any OSError raised while opening or reading
    propagates; no digest is produced for a partially read file.

    :return: The number of bytes read and the digest."""
    hasher = hashlib.sha256()
    size = 0

    with open(path, "rb") as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)
            size += len(chunk)

    return size, hasher.digest()


def _ignore_interrupt():
    # The controlling process handles SIGINT and terminates the pool
    signal.signal(signal.SIGINT, signal.SIG_IGN)


class Processor:
    def __init__(self, concurrency: int | None = None, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if concurrency is None:
            concurrency = multiprocessing.cpu_count()

        if concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {concurrency}")

        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        self._concurrency = concurrency
        self._chunk_size = chunk_size
        # Started by the first fingerprint
        self._pool: Pool | None = None
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.close()
        else:
            self.terminate()

    def close(self):
        """Let queued work finish and shut the pool down."""
        if not self._closed:
            self._closed = True
            if self._pool is not None:
                self._pool.close()
                self._pool.join()

    def terminate(self):
        """Stop the pool immediately, abandoning reads in progress."""
        if not self._closed:
            self._closed = True
            if self._pool is not None:
                logger.info("Terminating worker pool")
                self._pool.terminate()
                self._pool.join()

    @property
    def started(self) -> bool:
        """Whether worker processes have been spawned."""
        return self._pool is not None

    def _get_pool(self) -> Pool:
        if self._closed:
            raise ValueError("Processor is closed")
        if self._pool is None:
            logger.debug(f"Starting {self._concurrency} worker processes")
            self._pool = Pool(self._concurrency, initializer=_ignore_interrupt)
        return self._pool

    @property
    def concurrency(self):
        return self._concurrency

    @property
    def chunk_size(self):
        return self._chunk_size

    def fingerprint(self, path: Path) -> Awaitable[FileRecord]:
        """Hash a file in the worker pool.

        :return: An awaitable FileRecord. OSError from the worker is raised when awaited."""
        logger.debug(f"Starting hash computation for: {path}")

        async def compute_and_wrap():
            size, digest = await self._evaluate(compute_fingerprint, path, self._chunk_size)
            logger.debug(f"Completed hash computation for: {path}")
            return FileRecord(path, size, digest)

        return compute_and_wrap()

    def _evaluate(self, func, *args):
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def resolve(v):
            # The awaiting task may have been cancelled while the worker was busy
            if not future.done():
                future.set_result(v)

        def reject(e):
            if not future.done():
                future.set_exception(e)

        def deliver(callback, value):
            try:
                loop.call_soon_threadsafe(callback, value)
            except RuntimeError:
                logger.debug(f"Event loop closed before {func.__name__}{args} completed")

        self._get_pool().apply_async(func, args=args,
                                     callback=lambda v: deliver(resolve, v),
                                     error_callback=lambda e: deliver(reject, e))

        return future
