"""
Unit tests for run_batch.

Tests cover:
- Results in input order
- Failed tasks become None without affecting others
- Tasks running past the timeout are abandoned
- Batches sharing one executor wait for each other instead of cancelling
- Queued tasks are cancelled once every worker is stuck
- Empty input
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from ethmonitor.services import run_batch
from ethmonitor.services.task_runner import pool_progress, submit_tracked


@pytest.fixture
def pool():
    executor = ThreadPoolExecutor(max_workers=4)
    yield executor
    executor.shutdown(wait=False, cancel_futures=True)


class TestRunBatch:
    """Tests for batch execution semantics."""

    def test_results_keep_input_order(self, pool):
        """
        GIVEN tasks that finish in reverse order
        WHEN the batch completes
        THEN results still follow the input order
        """
        def slow_square(n):
            time.sleep(0.01 * (5 - n))
            return n * n

        assert run_batch(pool, slow_square, range(5), timeout_seconds=2) == [0, 1, 4, 9, 16]

    def test_failed_task_becomes_none(self, pool):
        def invert(n):
            return 1 / n

        results = run_batch(pool, invert, [1, 0, 2], timeout_seconds=2)

        assert results == [1.0, None, 0.5]

    def test_slow_task_is_dropped_after_timeout(self, pool):
        """
        GIVEN one task that blocks far longer than the timeout
        WHEN the batch runs with a 0.2s timeout
        THEN the batch returns promptly with that slot empty
        """
        release = threading.Event()

        def task(n):
            if n == 1:
                release.wait(timeout=5)
            return n

        try:
            started = time.monotonic()
            results = run_batch(pool, task, [0, 1, 2], timeout_seconds=0.2)
            elapsed = time.monotonic() - started
        finally:
            release.set()

        assert results == [0, None, 2]
        assert elapsed < 2

    def test_timeout_counts_from_task_start(self):
        """
        GIVEN a single worker and four 0.1s tasks with a 0.3s timeout
        WHEN the tasks queue behind each other
        THEN none of them is dropped, though the batch outlasts one timeout
        """
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            def task(n):
                time.sleep(0.1)
                return n

            results = run_batch(executor, task, [0, 1, 2, 3], timeout_seconds=0.3)
        finally:
            executor.shutdown(wait=False)

        assert results == [0, 1, 2, 3]

    def test_empty_input(self, pool):
        assert run_batch(pool, lambda n: n, [], timeout_seconds=1) == []


# =============================================================================
# SHARED EXECUTOR
# =============================================================================


class TestSharedExecutor:
    """Tests for several batches running on the same executor."""

    def test_queued_batch_waits_while_other_batch_makes_progress(self):
        """
        GIVEN two workers busy with sixteen healthy 0.1s tasks from one batch
        WHEN a second batch queues behind them with a 0.5s timeout
        THEN the second batch completes although it waited longer than its timeout
        """
        executor = ThreadPoolExecutor(max_workers=2)
        first_started = threading.Event()
        first_results = []

        def busy(n):
            first_started.set()
            time.sleep(0.1)
            return n

        def run_first():
            first_results.extend(run_batch(executor, busy, range(16), timeout_seconds=0.5))

        thread = threading.Thread(target=run_first)
        try:
            thread.start()
            assert first_started.wait(timeout=2)

            begin = time.monotonic()
            second = run_batch(executor, lambda n: n * 10, [1, 2], timeout_seconds=0.5)
            waited = time.monotonic() - begin
            thread.join(timeout=5)
        finally:
            executor.shutdown(wait=False)

        assert second == [10, 20]
        assert first_results == list(range(16))
        assert waited > 0.5

    def test_tracked_submissions_count_as_progress(self):
        """
        GIVEN a single worker running a chain of tracked 0.1s submissions
        WHEN a batch queued behind them outlasts its 0.3s timeout
        THEN its task still runs
        """
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            futures = [submit_tracked(executor, time.sleep, 0.1) for _ in range(6)]

            results = run_batch(executor, lambda n: n, [7], timeout_seconds=0.3)
            for future in futures:
                future.result(timeout=5)
        finally:
            executor.shutdown(wait=False)

        assert results == [7]

    def test_queued_tasks_cancelled_when_every_worker_is_stuck(self):
        """
        GIVEN one worker blocked by an abandoned task
        WHEN a batch queues behind it with a 0.2s timeout
        THEN the queued task is cancelled and the batch returns
        """
        executor = ThreadPoolExecutor(max_workers=1)
        release = threading.Event()
        try:
            blocker = submit_tracked(executor, release.wait, 5)

            begin = time.monotonic()
            results = run_batch(executor, lambda n: n, [1, 2], timeout_seconds=0.2)
            elapsed = time.monotonic() - begin
        finally:
            release.set()
            executor.shutdown(wait=False)

        assert results == [None, None]
        assert elapsed < 2
        assert blocker.result(timeout=5) is True

    def test_progress_is_tracked_per_executor(self):
        first = ThreadPoolExecutor(max_workers=1)
        second = ThreadPoolExecutor(max_workers=1)
        try:
            assert pool_progress(first) is pool_progress(first)
            assert pool_progress(first) is not pool_progress(second)
        finally:
            first.shutdown(wait=False)
            second.shutdown(wait=False)
