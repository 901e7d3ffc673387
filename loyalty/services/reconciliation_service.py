import logging
from typing import List, Optional, Protocol

from loyalty.models.order import OrderStatus
from loyalty.schemas.accrual import AccrualResponse
from loyalty.schemas.order import Order


class AccrualStorage(Protocol):
    """적립 처리기가 사용하는 저장소 인터페이스"""

    def fetch_unprocessed_order_ids(self) -> List[int]: ...

    def update_order(self, order_id: int, status: OrderStatus, amount: float) -> Order: ...

    def update_order_status(self, order_id: int, status: OrderStatus) -> Order: ...


class ReconciliationService:
    """적립 시스템 응답을 주문 레코드에 반영

    - PROCESSED: 상태와 금액을 함께 덮어씀
    - 그 외: 상태만 갱신, 금액은 유지

    두 경우 모두 증분이 아닌 덮어쓰기이므로 같은 응답을 여러 번 적용해도
    결과가 같습니다 (중복 적립 없음).
    """

    def __init__(self, storage: AccrualStorage, logger: Optional[logging.Logger] = None):
        self.storage = storage
        self.logger = logger or logging.getLogger(__name__)

    def apply(self, accrual: AccrualResponse) -> Order:
        order_number = accrual.order_number
        if accrual.is_final:
            amount = accrual.accrual or 0
            order = self.storage.update_order(order_number, OrderStatus.PROCESSED, amount)
            self.logger.info(f"Order {order_number} processed, accrual {amount}")
            return order

        status = accrual.status.to_order_status()
        order = self.storage.update_order_status(order_number, status)
        if status.is_terminal:
            self.logger.info(f"Order {order_number} rejected by accrual system")
        else:
            self.logger.debug(f"Order {order_number} status updated to {status.value}")
        return order


def reconcile(
    storage: AccrualStorage,
    accrual: AccrualResponse,
    logger: Optional[logging.Logger] = None,
) -> Order:
    return ReconciliationService(storage, logger=logger).apply(accrual)
