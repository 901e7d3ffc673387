"""
잔액 / 출금 서비스

잔액은 주문 원장에서 매번 계산됩니다. 출금은 사용자 행을 잠근 뒤
잔액 확인과 음수 주문 기록을 같은 트랜잭션에서 수행하므로 동시 출금으로
잔액이 음수가 되지 않습니다.
"""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from loyalty.core.exceptions import (
    BadRequestError,
    ConflictError,
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from loyalty.database.session import get_db_context
from loyalty.models.order import OrderStatus
from loyalty.repositories.order_repository import OrderRepository
from loyalty.repositories.user_repository import UserRepository
from loyalty.schemas.order import (
    BalanceResponse,
    Order,
    WithdrawalResponse,
    WithdrawRequest,
)
from loyalty.services.order_service import parse_order_number

logger = logging.getLogger(__name__)


class BalanceService:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get_balance(self, user_id: int) -> BalanceResponse:
        with get_db_context(self.session_factory) as db:
            order_repo = OrderRepository(db)
            return BalanceResponse(
                current=order_repo.get_current_balance(user_id),
                withdrawn=order_repo.get_withdrawn_balance(user_id),
            )

    def withdraw(self, user_id: int, request: WithdrawRequest) -> Order:
        """포인트 출금

        Raises:
            ValidationError: 주문 번호 형식 / Luhn 실패, 또는 금액 <= 0
            InsufficientBalanceError: 현재 잔액 < 출금 금액
            ConflictError: 이미 존재하는 주문 번호
        """
        if request.sum <= 0:
            raise ValidationError("Withdrawal sum must be positive")
        try:
            order_id = parse_order_number(request.order)
        except BadRequestError as e:
            raise ValidationError(str(e))

        try:
            with get_db_context(self.session_factory) as db:
                user_repo = UserRepository(db)
                order_repo = OrderRepository(db)

                if user_repo.lock_by_id(user_id) is None:
                    raise NotFoundError(f"User {user_id} not found")

                current = order_repo.get_current_balance(user_id)
                if current < request.sum:
                    raise InsufficientBalanceError(
                        f"Balance {current} is less than requested {request.sum}"
                    )
                if order_repo.get_by_id(order_id) is not None:
                    raise ConflictError(f"Order {order_id} already exists")

                order = order_repo.create_order(
                    order_id,
                    user_id,
                    status=OrderStatus.PROCESSED,
                    amount=-request.sum,
                )
        except IntegrityError:
            raise ConflictError(f"Order {order_id} already exists")

        logger.info(f"User {user_id} withdrew {request.sum} for order {order_id}")
        return order

    def list_withdrawals(self, user_id: int) -> List[WithdrawalResponse]:
        with get_db_context(self.session_factory) as db:
            orders = OrderRepository(db).get_user_withdrawals(user_id)
        return [WithdrawalResponse.from_order(order) for order in orders]
