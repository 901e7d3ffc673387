"""
고정 크기 워커 풀

작업 큐 -> N개 워커 스레드 -> 결과 큐 -> 결과 리스너 구조로 외부 호출의
동시성을 워커 수로 제한합니다.

- 생산자는 마지막 작업을 넣은 뒤 워커 수만큼 종료 신호를 넣어 큐를 닫습니다.
- 각 워커는 소비한 작업마다 정확히 하나의 결과를 냅니다.
- 모든 워커가 종료된 뒤(join) 결과 큐를 닫고, 리스너가 남은 결과를 모두
  소비하면 배치가 끝납니다.
- 워커 간 결과 순서는 보장되지 않습니다.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

_CLOSED = object()


@dataclass(frozen=True)
class Job:
    """처리할 주문 하나"""

    id: int
    order_number: int


@dataclass
class JobResult:
    """작업 처리 결과"""

    job_id: int
    order_number: int
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def success(self) -> bool:
        return self.error is None


class WorkerPool:
    def __init__(self, size: int = 10, logger: Optional[logging.Logger] = None):
        if size <= 0:
            raise ValueError(f"worker pool size must be positive, got {size}")
        self.size = size
        self.logger = logger or logging.getLogger(__name__)

    def run(
        self,
        jobs: Iterable[Job],
        handler: Callable[[Job], Any],
        on_result: Optional[Callable[[JobResult], None]] = None,
    ) -> List[JobResult]:
        """작업을 모두 처리하고 결과 목록을 반환 (순서 무관)"""
        job_queue: "queue.Queue[Any]" = queue.Queue(maxsize=self.size)
        result_queue: "queue.Queue[Any]" = queue.Queue()
        results: List[JobResult] = []

        producer = threading.Thread(
            target=self._produce, args=(jobs, job_queue), name="accrual-producer"
        )
        listener = threading.Thread(
            target=self._listen,
            args=(result_queue, results, on_result),
            name="accrual-listener",
        )
        workers = [
            threading.Thread(
                target=self._work,
                args=(job_queue, result_queue, handler),
                name=f"accrual-worker-{i}",
            )
            for i in range(1, self.size + 1)
        ]

        self.logger.info(f"Starting {self.size} workers")
        listener.start()
        producer.start()
        for worker in workers:
            worker.start()

        producer.join()
        for worker in workers:
            worker.join()
        result_queue.put(_CLOSED)
        listener.join()
        return results

    def _produce(self, jobs: Iterable[Job], job_queue: "queue.Queue[Any]") -> None:
        try:
            for job in jobs:
                job_queue.put(job)
        finally:
            for _ in range(self.size):
                job_queue.put(_CLOSED)

    def _work(
        self,
        job_queue: "queue.Queue[Any]",
        result_queue: "queue.Queue[Any]",
        handler: Callable[[Job], Any],
    ) -> None:
        while True:
            job = job_queue.get()
            if job is _CLOSED:
                return
            try:
                result = JobResult(job.id, job.order_number, value=handler(job))
            except Exception as e:
                result = JobResult(job.id, job.order_number, error=e)
            result_queue.put(result)

    def _listen(
        self,
        result_queue: "queue.Queue[Any]",
        results: List[JobResult],
        on_result: Optional[Callable[[JobResult], None]],
    ) -> None:
        while True:
            result = result_queue.get()
            if result is _CLOSED:
                return
            results.append(result)
            if on_result is None:
                continue
            try:
                on_result(result)
            except Exception:
                self.logger.exception(f"Result listener failed for job {result.job_id}")
