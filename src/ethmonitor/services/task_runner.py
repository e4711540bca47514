"""Run a batch of per-item tasks on a bounded executor with per-task timeouts."""

import logging
import threading
import time
import weakref
from concurrent.futures import FIRST_COMPLETED, Executor, Future, wait
from typing import Callable, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class PoolProgress:
    """Last time any tracked task on one executor started or finished."""

    def __init__(self):
        self._lock = threading.Lock()
        self._last = time.monotonic()

    def touch(self) -> None:
        with self._lock:
            self._last = time.monotonic()

    @property
    def last(self) -> float:
        with self._lock:
            return self._last


_progress: "weakref.WeakKeyDictionary[Executor, PoolProgress]" = weakref.WeakKeyDictionary()
_progress_lock = threading.Lock()


def pool_progress(executor: Executor) -> PoolProgress:
    """Return the progress tracker shared by every batch on `executor`."""
    with _progress_lock:
        progress = _progress.get(executor)
        if progress is None:
            progress = PoolProgress()
            _progress[executor] = progress
        return progress


def submit_tracked(executor: Executor, fn: Callable[..., R], *args) -> "Future[R]":
    """Submit `fn(*args)`, counting its start and finish as progress of the pool."""
    progress = pool_progress(executor)

    def _run() -> R:
        progress.touch()
        try:
            return fn(*args)
        finally:
            progress.touch()

    return executor.submit(_run)


def run_batch(
    executor: Executor,
    fn: Callable[[T], R],
    items: Iterable[T],
    timeout_seconds: float,
    label: str = "task",
) -> list[Optional[R]]:
    """
    Apply `fn` to every item concurrently and wait for all of them.

    Returns one slot per item, in input order. A slot is None when its task
    raised or ran longer than `timeout_seconds`; both cases are logged and
    never propagate. Timed-out tasks are abandoned, not awaited.

    A task's clock starts when a worker picks it up. Tasks still queued are
    cancelled only when no tracked task on the whole executor, from this
    batch or any other, has started or finished for `timeout_seconds`. That
    only happens when every worker is stuck on abandoned work.
    """
    items = list(items)
    if not items:
        return []

    progress = pool_progress(executor)
    submitted_at = time.monotonic()
    started: dict[int, float] = {}

    def _run(index: int, item: T) -> R:
        started[index] = time.monotonic()
        progress.touch()
        try:
            return fn(item)
        finally:
            progress.touch()

    futures: dict[Future, int] = {
        executor.submit(_run, index, item): index for index, item in enumerate(items)
    }
    results: list[Optional[R]] = [None] * len(items)
    pending = set(futures)

    while pending:
        last_progress = max(progress.last, submitted_at)
        wait_for = _seconds_until_next_deadline(pending, futures, started, last_progress, timeout_seconds)
        done, _ = wait(pending, timeout=wait_for, return_when=FIRST_COMPLETED)
        now = time.monotonic()

        for future in done:
            pending.discard(future)
            index = futures[future]
            if future.cancelled():
                continue
            error = future.exception()
            if error is not None:
                logger.warning("%s %d failed: %s", label, index, error)
            else:
                results[index] = future.result()

        last_progress = max(progress.last, submitted_at)
        for future in list(pending):
            index = futures[future]
            begin = started.get(index)
            if begin is not None:
                if now - begin >= timeout_seconds:
                    pending.discard(future)
                    future.cancel()
                    logger.warning("%s %d timed out after %.1fs", label, index, timeout_seconds)
            elif now - last_progress >= timeout_seconds and future.cancel():
                pending.discard(future)
                logger.warning("%s %d never started; pool is stuck", label, index)

    return results


def _seconds_until_next_deadline(
    pending: set[Future],
    futures: dict[Future, int],
    started: dict[int, float],
    last_progress: float,
    timeout_seconds: float,
) -> float:
    deadline = last_progress + timeout_seconds
    for future in pending:
        begin = started.get(futures[future])
        if begin is not None:
            deadline = min(deadline, begin + timeout_seconds)
    return max(0.0, deadline - time.monotonic())
