import threading
import time

import pytest

from loyalty.services.worker_pool import Job, WorkerPool


def _jobs(count):
    return [Job(id=i, order_number=1000 + i) for i in range(1, count + 1)]


class TestWorkerPool:
    def test_every_job_yields_exactly_one_result(self):
        pool = WorkerPool(size=4)

        results = pool.run(_jobs(50), lambda job: job.order_number * 2)

        assert len(results) == 50
        assert sorted(r.job_id for r in results) == list(range(1, 51))
        assert all(r.success for r in results)
        assert all(r.value == r.order_number * 2 for r in results)

    def test_empty_batch_completes_with_no_results(self):
        on_result = []
        results = WorkerPool(size=3).run([], lambda job: None, on_result.append)

        assert results == []
        assert on_result == []

    def test_more_workers_than_jobs(self):
        results = WorkerPool(size=10).run(_jobs(3), lambda job: job.id)

        assert sorted(r.value for r in results) == [1, 2, 3]

    def test_handler_errors_become_failed_results(self):
        def handler(job):
            if job.id % 2 == 0:
                raise RuntimeError(f"boom {job.id}")
            return job.id

        results = WorkerPool(size=3).run(_jobs(10), handler)

        failed = [r for r in results if not r.success]
        succeeded = [r for r in results if r.success]
        assert len(results) == 10
        assert sorted(r.job_id for r in failed) == [2, 4, 6, 8, 10]
        assert all(isinstance(r.error, RuntimeError) for r in failed)
        assert sorted(r.job_id for r in succeeded) == [1, 3, 5, 7, 9]

    def test_concurrency_is_bounded_by_pool_size(self):
        lock = threading.Lock()
        active = 0
        peak = 0

        def handler(job):
            nonlocal active, peak
            with lock:
                active += 1
                peak = max(peak, active)
            time.sleep(0.01)
            with lock:
                active -= 1

        WorkerPool(size=3).run(_jobs(20), handler)

        assert 1 <= peak <= 3

    def test_listener_receives_every_result(self):
        seen = []

        results = WorkerPool(size=2).run(_jobs(7), lambda job: job.id, seen.append)

        assert len(seen) == 7
        assert sorted(r.job_id for r in seen) == sorted(r.job_id for r in results)

    def test_listener_error_does_not_drop_results(self):
        def on_result(result):
            raise ValueError("listener failure")

        results = WorkerPool(size=2).run(_jobs(5), lambda job: job.id, on_result)

        assert len(results) == 5

    @pytest.mark.parametrize("size", [0, -1])
    def test_rejects_non_positive_size(self, size):
        with pytest.raises(ValueError):
            WorkerPool(size=size)
