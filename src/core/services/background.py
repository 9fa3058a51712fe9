"""Bounded task runner for non-critical side effects.

Storage cleanup after deletion, primary reassignment and view analytics
run here so that their failures never fail the request. Failures are
logged and counted, never raised to the submitter.

Lambda freezes the execution environment as soon as a handler returns,
so handlers that schedule work call `drain_before_return` to let it
finish inside the invocation.
"""

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any

from aws_lambda_powertools import Logger

from core.config import get_settings
from core.utils.constants import BACKGROUND_DRAIN_RESERVE_MS

logger = Logger(UTC=True)


class BackgroundTaskRunner:
    """Thread pool with a bounded backlog.

    At most ``max_workers + queue_size`` tasks may be in flight; further
    submissions block until a slot frees up (backpressure).
    """

    def __init__(self, *, max_workers: int, queue_size: int) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="photo-bg")
        self._slots = threading.BoundedSemaphore(max_workers + queue_size)
        self._lock = threading.Lock()
        self._in_flight: set[Future[Any]] = set()
        self._closed = False

        self.completed = 0
        self.failed = 0

    def submit(self, name: str, fn: Callable[..., Any], **kwargs: Any) -> Future[Any]:
        """Schedule `fn(**kwargs)`; blocks while the backlog is full.

        Raises:
            RuntimeError: If the runner has been shut down
        """
        if self._closed:
            raise RuntimeError("Background runner is shut down")

        self._slots.acquire()
        try:
            future = self._executor.submit(self._run, name, fn, kwargs)
        except RuntimeError:
            self._slots.release()
            raise

        with self._lock:
            self._in_flight.add(future)
        future.add_done_callback(self._forget)

        logger.debug("Background task submitted", extra={"task": name})
        return future

    def spawn(self, name: str, fn: Callable[..., Any], **kwargs: Any) -> bool:
        """Fire-and-forget `submit`; a refused task is logged instead of raised."""
        try:
            self.submit(name, fn, **kwargs)
        except RuntimeError:
            logger.warning("Background task refused", extra={"task": name})
            return False
        return True

    def drain(self, timeout: float | None = None) -> bool:
        """Wait for in-flight tasks; returns False if some are still running."""
        with self._lock:
            pending = set(self._in_flight)

        if not pending:
            return True

        _, not_done = wait(pending, timeout=timeout)
        if not_done:
            logger.warning("Background drain timed out", extra={"still_running": len(not_done)})
        return not not_done

    def shutdown(self, timeout: float | None = None) -> None:
        """Drain outstanding work, then stop accepting tasks."""
        self._closed = True
        self.drain(timeout)
        self._executor.shutdown(wait=False)

    @property
    def in_flight(self) -> int:
        with self._lock:
            return len(self._in_flight)

    def _run(self, name: str, fn: Callable[..., Any], kwargs: dict[str, Any]) -> Any:
        try:
            result = fn(**kwargs)
        except Exception:
            with self._lock:
                self.failed += 1
            logger.exception("Background task failed", extra={"task": name})
            return None
        finally:
            self._slots.release()

        with self._lock:
            self.completed += 1
        logger.debug("Background task completed", extra={"task": name})
        return result

    def _forget(self, future: Future[Any]) -> None:
        with self._lock:
            self._in_flight.discard(future)


_default_runner: BackgroundTaskRunner | None = None
_default_lock = threading.Lock()


def get_background_runner() -> BackgroundTaskRunner:
    """Return the process-wide runner, created from settings on first use."""
    global _default_runner

    with _default_lock:
        if _default_runner is None:
            settings = get_settings()
            _default_runner = BackgroundTaskRunner(
                max_workers=settings.background_workers,
                queue_size=settings.background_queue_size,
            )
        return _default_runner


def drain_before_return(
    context: Any,
    *,
    runner: BackgroundTaskRunner | None = None,
    reserve_ms: int = BACKGROUND_DRAIN_RESERVE_MS,
) -> bool:
    """Wait for scheduled work, bounded by the invocation's remaining time.

    Returns False when the deadline left work unfinished; that work is
    logged by `drain` and resumes only if the environment is reused.
    """
    runner = runner or get_background_runner()
    budget_ms = max(context.get_remaining_time_in_millis() - reserve_ms, 0)

    return runner.drain(timeout=budget_ms / 1000)
