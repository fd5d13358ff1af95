r"""Bounded worker pool for outbound dispatches.

The pool bounds the number of concurrent HTTP dispatches when callers
are numerous. Callers still block until their own call completes: each
job carries a ``concurrent.futures.Future`` that acts as a one-shot
reply channel. The pool does not change the semantics of a call.

The process-wide pool is started lazily by ``get_worker_pool()`` and
stopped by ``shutdown_worker_pool()``.
"""

from __future__ import annotations

__all__ = ["WorkerPool", "get_worker_pool", "shutdown_worker_pool"]

import contextvars
import logging
import queue
import threading
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any, NamedTuple

from dbxcore.core.config import DEFAULT_NUM_WORKERS, DEFAULT_QUEUE_SIZE
from dbxcore.exceptions import Canceled

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)

# Interval at which idle workers check the shutdown signal
_POLL_INTERVAL = 0.1


class _Job(NamedTuple):
    func: Callable[..., Any]
    args: tuple[Any, ...]
    future: Future
    context: contextvars.Context


class WorkerPool:
    """Fixed set of worker threads draining a bounded job queue.

    Args:
        num_workers: The number of worker threads. Must be > 0.
        max_queue_size: The bound of the job queue. ``submit`` blocks
            while the queue is full. Must be > 0.

    Example:
        ```pycon
        >>> from dbxcore.pool import WorkerPool
        >>> pool = WorkerPool(num_workers=2)
        >>> pool.start()
        >>> pool.submit(sum, [1, 2, 3]).result()
        6
        >>> pool.shutdown()

        ```
    """

    def __init__(
        self,
        num_workers: int = DEFAULT_NUM_WORKERS,
        max_queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        if num_workers <= 0:
            msg = f"num_workers must be > 0, got {num_workers}"
            raise ValueError(msg)
        if max_queue_size <= 0:
            msg = f"max_queue_size must be > 0, got {max_queue_size}"
            raise ValueError(msg)
        self._num_workers = num_workers
        self._queue: queue.Queue[_Job] = queue.Queue(maxsize=max_queue_size)
        self._stop_event = threading.Event()
        self._threads: list[threading.Thread] = []
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(num_workers={self._num_workers}, "
            f"max_queue_size={self._queue.maxsize}, running={self.is_running()})"
        )

    @property
    def num_workers(self) -> int:
        return self._num_workers

    def is_running(self) -> bool:
        r"""Indicate if the workers are started and not shut down."""
        return bool(self._threads) and not self._stop_event.is_set()

    def start(self) -> None:
        r"""Start the worker threads. Calling it again is a no-op."""
        with self._lock:
            if self._threads:
                return
            self._stop_event.clear()
            for index in range(self._num_workers):
                thread = threading.Thread(
                    target=self._worker_loop, name=f"dbxcore-worker-{index}", daemon=True
                )
                thread.start()
                self._threads.append(thread)
        logger.debug(f"Started worker pool with {self._num_workers} workers")

    def submit(self, func: Callable[..., Any], *args: Any) -> Future:
        """Queue a job and return the future of its result.

        The job runs in a copy of the caller's context, so context
        variables such as the correlation ID are visible to ``func``.
        If the pool is shut down before the job is queued, including
        while ``submit`` waits for room in a full queue, the returned
        future fails with ``Canceled``.

        Args:
            func: The function to run in a worker.
            *args: The positional arguments of ``func``.

        Returns:
            The future that receives the result or the exception of the
            job.

        Raises:
            RuntimeError: If the pool was never started.
        """
        job = _Job(func=func, args=args, future=Future(), context=contextvars.copy_context())
        while True:
            # Every put happens before shutdown sets the stop event
            with self._lock:
                if self._stop_event.is_set():
                    _cancel(job)
                    return job.future
                if not self._threads:
                    msg = "worker pool is not running"
                    raise RuntimeError(msg)
                try:
                    self._queue.put_nowait(job)
                except queue.Full:
                    pass
                else:
                    return job.future
            self._stop_event.wait(_POLL_INTERVAL)

    def shutdown(self, timeout: float | None = None) -> None:
        """Broadcast the shutdown signal and wait for the workers.

        Jobs still queued are failed with ``Canceled``.

        Args:
            timeout: Optional time in seconds to wait for each worker.
        """
        with self._lock:
            self._stop_event.set()
            threads, self._threads = self._threads, []
        for thread in threads:
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning(f"{thread.name} did not stop within {timeout}s")

        pending = 0
        while True:
            try:
                job = self._queue.get_nowait()
            except queue.Empty:
                break
            _cancel(job)
            pending += 1
        logger.debug(f"Worker pool stopped ({pending} pending jobs canceled)")

    def _worker_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                job = self._queue.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                continue
            if not job.future.set_running_or_notify_cancel():
                continue
            try:
                result = job.context.run(job.func, *job.args)
            except Exception as exc:  # noqa: BLE001
                job.future.set_exception(exc)
            else:
                job.future.set_result(result)


def _cancel(job: _Job) -> None:
    if job.future.set_running_or_notify_cancel():
        job.future.set_exception(Canceled("worker pool was shut down"))


_pool: WorkerPool | None = None
_pool_lock = threading.Lock()


def get_worker_pool(
    num_workers: int = DEFAULT_NUM_WORKERS,
    max_queue_size: int = DEFAULT_QUEUE_SIZE,
) -> WorkerPool:
    """Return the process-wide worker pool, starting it if needed.

    Initialization is idempotent: the sizing arguments only apply to the
    call that creates the pool.

    Args:
        num_workers: The number of worker threads.
        max_queue_size: The bound of the job queue.

    Returns:
        The running process-wide pool.
    """
    global _pool  # noqa: PLW0603
    with _pool_lock:
        if _pool is None or not _pool.is_running():
            _pool = WorkerPool(num_workers=num_workers, max_queue_size=max_queue_size)
            _pool.start()
        return _pool


def shutdown_worker_pool(timeout: float | None = None) -> None:
    """Stop the process-wide worker pool if it is running.

    Args:
        timeout: Optional time in seconds to wait for each worker.
    """
    global _pool  # noqa: PLW0603
    with _pool_lock:
        pool, _pool = _pool, None
    if pool is not None:
        pool.shutdown(timeout=timeout)
