"""
주문 데이터 모델

주문(Order)은 포인트 원장의 역할을 겸합니다. 적립 주문은 양수 ``sum``,
출금(withdrawal)은 음수 ``sum``을 가지는 PROCESSED 주문으로 기록되며,
사용자 잔액은 이 테이블의 합계로 매번 계산됩니다.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from loyalty.models.base import BaseModel, BigIntegerPK


class OrderStatus(str, Enum):
    """주문 상태 (closed state machine)"""

    NEW = "NEW"  # 업로드됨, 아직 적립 시스템에서 처리되지 않음
    PROCESSING = "PROCESSING"  # 적립 시스템에서 계산 중
    INVALID = "INVALID"  # 적립 거절 (terminal)
    PROCESSED = "PROCESSED"  # 적립 완료 (terminal)

    @classmethod
    def terminal(cls) -> FrozenSet["OrderStatus"]:
        return frozenset({cls.INVALID, cls.PROCESSED})

    @classmethod
    def pending(cls) -> FrozenSet["OrderStatus"]:
        return frozenset({cls.NEW, cls.PROCESSING})

    @property
    def is_terminal(self) -> bool:
        return self in self.terminal()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Order(BaseModel):
    __tablename__ = "orders"
    __table_args__ = (
        Index("idx_orders_user_id", "user_id"),
        Index("idx_orders_status", "status"),
    )

    # Order number itself; globally unique across users
    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    user_id: Mapped[int] = mapped_column(
        BigIntegerPK, ForeignKey("users.id"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=OrderStatus.NEW.value, nullable=False
    )
    # Signed: >0 accrual credited, <0 withdrawal, 0 not settled
    sum: Mapped[float] = mapped_column(
        Numeric(14, 2, asdecimal=False), default=0, nullable=False
    )
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    def __repr__(self):
        return f"<Order(id={self.id}, user_id={self.user_id}, status={self.status}, sum={self.sum})>"
