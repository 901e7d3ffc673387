from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from loyalty.models.order import OrderStatus


class Order(BaseModel):
    """주문 원장 항목"""

    id: int = Field(..., description="주문 번호")
    user_id: int = Field(..., description="소유 사용자 ID")
    status: OrderStatus = Field(..., description="주문 상태")
    sum: float = Field(0, description="적립(+) 또는 출금(-) 금액")
    uploaded_at: datetime = Field(..., description="업로드 시간")

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    """주문 목록 항목 응답"""

    number: str = Field(..., description="주문 번호")
    status: OrderStatus = Field(..., description="주문 상태")
    accrual: Optional[float] = Field(None, description="적립 포인트 (sum > 0)")
    withdrawal: Optional[float] = Field(None, description="출금 포인트 (sum < 0)")
    uploaded_at: datetime = Field(..., description="업로드 시간")

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            number=str(order.id),
            status=order.status,
            accrual=order.sum if order.sum > 0 else None,
            withdrawal=-order.sum if order.sum < 0 else None,
            uploaded_at=order.uploaded_at,
        )


class BalanceResponse(BaseModel):
    """잔액 응답 (주문 원장에서 매번 계산)"""

    current: float = Field(..., description="현재 잔액")
    withdrawn: float = Field(..., description="누적 출금액")


class WithdrawRequest(BaseModel):
    """포인트 출금 요청"""

    order: str = Field(..., min_length=1, description="출금에 사용할 주문 번호")
    sum: float = Field(..., gt=0, description="출금 금액")


class WithdrawalResponse(BaseModel):
    """출금 내역 항목"""

    order: str = Field(..., description="주문 번호")
    sum: float = Field(..., description="출금 금액")
    processed_at: datetime = Field(..., description="처리 시간")

    @classmethod
    def from_order(cls, order: Order) -> "WithdrawalResponse":
        return cls(order=str(order.id), sum=-order.sum, processed_at=order.uploaded_at)
