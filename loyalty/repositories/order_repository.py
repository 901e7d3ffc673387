"""
주문 리포지토리 - 주문 원장 데이터 접근

주문 테이블은 포인트 원장을 겸합니다:
1. 적립 주문: NEW로 생성되고, 적립 시스템 응답에 따라 상태와 금액이 갱신됨
2. 출금: 음수 sum을 가진 PROCESSED 주문으로 즉시 기록됨
3. 잔액: 캐시 컬럼 없이 SUM 집계로 매번 계산됨 (O(사용자 주문 수))
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from loyalty.models.order import Order as OrderModel, OrderStatus
from loyalty.repositories.base import BaseRepository
from loyalty.schemas.order import Order


class OrderRepository(BaseRepository[OrderModel, Order]):
    """주문 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(OrderModel, Order, db)

    def create_order(
        self,
        order_id: int,
        user_id: int,
        status: OrderStatus = OrderStatus.NEW,
        amount: float = 0,
        uploaded_at: Optional[datetime] = None,
    ) -> Optional[Order]:
        values = {
            "id": order_id,
            "user_id": user_id,
            "status": status.value,
            "sum": amount,
        }
        if uploaded_at is not None:
            values["uploaded_at"] = uploaded_at
        return self.create(**values)

    def get_user_orders(self, user_id: int) -> List[Order]:
        """사용자 주문 목록 (업로드 시간순)"""
        model_instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .order_by(self.model_class.uploaded_at, self.model_class.id)
            .all()
        )
        return self._to_schemas(model_instances)

    def get_user_withdrawals(self, user_id: int) -> List[Order]:
        """사용자 출금 내역 (sum < 0, 처리 시간순)"""
        model_instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id, self.model_class.sum < 0)
            .order_by(self.model_class.uploaded_at, self.model_class.id)
            .all()
        )
        return self._to_schemas(model_instances)

    def get_current_balance(self, user_id: int) -> float:
        """현재 잔액 = 사용자 주문 sum의 합계 (주문이 없으면 0)"""
        balance = (
            self.db.query(func.coalesce(func.sum(self.model_class.sum), 0))
            .filter(self.model_class.user_id == user_id)
            .scalar()
        )
        return float(balance or 0)

    def get_withdrawn_balance(self, user_id: int) -> float:
        """누적 출금액 = 음수 sum 합계의 절댓값"""
        withdrawn = (
            self.db.query(func.coalesce(func.sum(self.model_class.sum), 0))
            .filter(self.model_class.user_id == user_id, self.model_class.sum < 0)
            .scalar()
        )
        return abs(float(withdrawn or 0))

    def get_unprocessed_ids(self) -> List[int]:
        """적립 시스템 확인이 필요한 주문 번호 (NEW, PROCESSING)"""
        rows = (
            self.db.query(self.model_class.id)
            .filter(
                self.model_class.status.in_(
                    [status.value for status in OrderStatus.pending()]
                )
            )
            .order_by(self.model_class.uploaded_at, self.model_class.id)
            .all()
        )
        return [row[0] for row in rows]

    def update_order(
        self, order_id: int, status: OrderStatus, amount: float
    ) -> Optional[Order]:
        """상태와 금액을 덮어쓰기 (증분이 아니므로 멱등)"""
        return self._overwrite(order_id, status=status.value, sum=amount)

    def update_order_status(
        self, order_id: int, status: OrderStatus
    ) -> Optional[Order]:
        """상태만 덮어쓰기, sum은 그대로 유지"""
        return self._overwrite(order_id, status=status.value)

    def _overwrite(self, order_id: int, **values) -> Optional[Order]:
        result = self.db.execute(
            update(self.model_class)
            .where(self.model_class.id == order_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        self.db.flush()
        self.db.expire_all()
        return self.get_by_id(order_id)
