"""Tests for the bounded worker pool used by migrations."""

import threading
import time

from utils.batching import run_bounded


class TestRunBounded:
    def test_empty(self):
        outcome = run_bounded(lambda x: x, [])
        assert outcome.succeeded == []
        assert outcome.failed == []

    def test_failures_do_not_stop_the_rest(self):
        def work(n):
            if n % 2:
                raise ValueError(f"odd {n}")
            return n

        outcome = run_bounded(work, range(6), max_workers=3)

        assert outcome.succeeded == [0, 2, 4]
        assert [item for item, _ in outcome.failed] == [1, 3, 5]
        assert all(isinstance(e, ValueError) for _, e in outcome.failed)

    def test_concurrency_is_bounded(self):
        lock = threading.Lock()
        active = 0
        peak = 0

        def work(n):
            nonlocal active, peak
            with lock:
                active += 1
                peak = max(peak, active)
            time.sleep(0.01)
            with lock:
                active -= 1
            return n

        outcome = run_bounded(work, range(12), max_workers=2)

        assert len(outcome.succeeded) == 12
        assert peak <= 2
