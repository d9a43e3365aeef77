from asyncio import TaskGroup, Semaphore
import asyncio


class Throttler:
    """Concurrency throttler that limits the number of simultaneously running tasks.

    Uses a semaphore to control how many tasks scheduled into a TaskGroup execute at
    once. ``schedule`` waits for a free permit before creating the task, so a producer
    loop is naturally paced by its consumers.
    """

    def __init__(self, task_group: TaskGroup, concurrency: int):
        """Initialize the throttler.

        Args:
            task_group: The TaskGroup to which tasks will be added
            concurrency: Maximum number of tasks that can run concurrently
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be positive: {concurrency}")

        self._task_group = task_group
        self._semaphore = Semaphore(concurrency)

    async def schedule(self, coro, name=None) -> asyncio.Task:
        """Schedule a coroutine to run with concurrency control.

        Acquires a semaphore permit before starting the task; the permit is released
        when the task finishes, whether it succeeds or fails.

        Args:
            coro: The coroutine to execute
            name: Optional name for the task

        Returns:
            The created asyncio.Task
        """
        await self._semaphore.acquire()

        async def wrapper():
            try:
                return await coro
            finally:
                self._semaphore.release()

        try:
            return self._task_group.create_task(wrapper(), name=name)
        except BaseException:
            self._semaphore.release()
            coro.close()
            raise
