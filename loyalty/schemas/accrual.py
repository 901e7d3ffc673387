from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from loyalty.models.order import OrderStatus


class AccrualStatus(str, Enum):
    """적립 시스템이 보고하는 주문 상태"""

    REGISTERED = "REGISTERED"
    PROCESSING = "PROCESSING"
    INVALID = "INVALID"
    PROCESSED = "PROCESSED"

    def to_order_status(self) -> OrderStatus:
        if self is AccrualStatus.REGISTERED:
            return OrderStatus.NEW
        return OrderStatus(self.value)


class AccrualResponse(BaseModel):
    """``GET /api/orders/{number}`` 응답 본문"""

    order: str = Field(..., description="주문 번호")
    status: AccrualStatus = Field(..., description="계산 상태")
    accrual: Optional[float] = Field(None, ge=0, description="적립 포인트")

    @property
    def order_number(self) -> int:
        return int(self.order)

    @property
    def is_final(self) -> bool:
        return self.status is AccrualStatus.PROCESSED
