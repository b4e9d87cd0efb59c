import asyncio
from asyncio import TaskGroup, Semaphore


class Throttler:
    """Limits how many scheduled tasks may be unfinished at once.

    schedule() waits for a free slot before creating the task, so a producer looping over
    schedule() is held back while the limit is reached. This is how slow consumers push back
    on the producer.
    """

    def __init__(self, task_group: TaskGroup, concurrency: int):
        """Initialize the throttler.

        Args:
            task_group: The TaskGroup to which tasks will be added
            concurrency: Maximum number of unfinished tasks
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {concurrency}")

        self._task_group = task_group
        self._semaphore = Semaphore(concurrency)
        self._tasks: set[asyncio.Task] = set()

    async def schedule(self, coro, name=None) -> asyncio.Task:
        """Schedule a coroutine once a slot is free.

        The slot is released when the task finishes, whether it returns, raises, or is cancelled.

        Args:
            coro: The coroutine to execute
            name: Optional name for the task

        Returns:
            The created asyncio.Task
        """
        try:
            await self._semaphore.acquire()
        except BaseException:
            coro.close()
            raise

        try:
            task = self._task_group.create_task(coro, name=name)
        except BaseException:
            self._semaphore.release()
            raise

        self._tasks.add(task)
        task.add_done_callback(self._finished)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def cancel_all(self):
        """Cancel every unfinished task scheduled through this throttler."""
        for task in list(self._tasks):
            task.cancel()

    def _finished(self, task: asyncio.Task):
        self._tasks.discard(task)
        self._semaphore.release()
