"""
적립 주문 처리기 (백그라운드 폴링)

고정 주기마다 미처리 주문(NEW, PROCESSING)을 읽어 워커 풀로 적립 시스템에
조회하고, 응답을 주문 레코드에 반영합니다.

- 주기 하나가 끝나야 다음 주기가 시작됩니다 (주기 간 겹침 없음).
- 미처리 주문 조회 실패는 해당 주기를 건너뛰고 다음 주기에 재시도합니다.
- 주문 하나의 실패는 같은 배치의 다른 주문에 영향을 주지 않습니다.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from loyalty.schemas.order import Order
from loyalty.services.accrual_service import (
    AccrualClient,
    AccrualError,
    AccrualRateLimitError,
)
from loyalty.services.reconciliation_service import (
    AccrualStorage,
    ReconciliationService,
)
from loyalty.services.worker_pool import Job, JobResult, WorkerPool


class ProcessorState(str, Enum):
    IDLE = "IDLE"
    POLLING = "POLLING"
    STOPPED = "STOPPED"


@dataclass
class CycleReport:
    """폴링 주기 하나의 결과 요약"""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    fetch_failed: bool = False


class OrderProcessor:
    def __init__(
        self,
        storage: AccrualStorage,
        client: AccrualClient,
        interval: float,
        workers: int = 10,
        logger: Optional[logging.Logger] = None,
    ):
        if interval <= 0:
            raise ValueError(f"polling interval must be positive, got {interval}")
        if workers <= 0:
            raise ValueError(f"worker count must be positive, got {workers}")

        self.storage = storage
        self.client = client
        self.interval = interval
        self.workers = workers
        self.logger = logger or logging.getLogger(__name__)

        self.pool = WorkerPool(workers, logger=self.logger)
        self.reconciler = ReconciliationService(storage, logger=self.logger)
        self.state = ProcessorState.IDLE

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """백그라운드 스레드에서 폴링 루프 시작"""
        if self.is_running:
            self.logger.warning("Order processor already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run,
            args=(self._stop_event,),
            name="accrual-processor",
            daemon=True,
        )
        self._thread.start()
        self.logger.info(
            f"Order processor started (interval={self.interval}s, workers={self.workers})"
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        """중지 신호를 보내고 진행 중인 주기가 끝날 때까지 대기"""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                self.logger.warning("Order processor did not stop within timeout")
            else:
                self._thread = None
        self.state = ProcessorState.STOPPED
        self.logger.info("Order processor stopped")

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        """stop_event가 설정될 때까지 interval마다 poll_once 실행

        첫 주기는 interval만큼 기다린 뒤 시작합니다. 주기 도중 중지 신호가
        와도 진행 중인 배치는 끝까지 처리합니다.
        """
        stop_event = stop_event or self._stop_event
        while not stop_event.wait(self.interval):
            try:
                self.poll_once()
            except Exception:
                self.logger.exception("Unexpected error in polling cycle")
                self.state = ProcessorState.IDLE

    def poll_once(self) -> CycleReport:
        self.state = ProcessorState.POLLING
        try:
            try:
                order_ids = self.storage.fetch_unprocessed_order_ids()
            except Exception:
                self.logger.exception("Failed to fetch unprocessed orders")
                return CycleReport(fetch_failed=True)

            jobs = [
                Job(id=i, order_number=order_id)
                for i, order_id in enumerate(order_ids, start=1)
            ]
            if jobs:
                self.logger.info(f"Processing {len(jobs)} unprocessed orders")

            results = self.pool.run(jobs, self._process_order, self._log_result)
            report = summarize(results)
            if report.total:
                self.logger.info(
                    f"Cycle finished: {report.succeeded} succeeded, {report.failed} failed"
                )
            return report
        finally:
            self.state = ProcessorState.IDLE

    def _process_order(self, job: Job) -> Order:
        accrual = self.client.fetch(job.order_number)
        return self.reconciler.apply(accrual)

    def _log_result(self, result: JobResult) -> None:
        if result.success:
            self.logger.info(f"Job {result.job_id} (order {result.order_number}) done")
            return

        error = result.error
        if isinstance(error, AccrualRateLimitError):
            self.logger.warning(
                f"Accrual system rate limited order {result.order_number}: {error.message}"
            )
        elif isinstance(error, AccrualError):
            self.logger.warning(
                f"Accrual lookup failed for order {result.order_number}: {error.message}"
            )
        else:
            self.logger.error(
                f"Failed to process order {result.order_number}: {error}",
                exc_info=error,
            )


def summarize(results: List[JobResult]) -> CycleReport:
    succeeded = sum(1 for result in results if result.success)
    return CycleReport(
        total=len(results), succeeded=succeeded, failed=len(results) - succeeded
    )
