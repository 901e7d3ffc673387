import logging
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from loyalty.core.exceptions import BadRequestError, ConflictError, ValidationError
from loyalty.database.session import get_db_context
from loyalty.repositories.order_repository import OrderRepository
from loyalty.schemas.order import Order, OrderResponse
from loyalty.utils.luhn import is_ascii_digits, is_valid_luhn

logger = logging.getLogger(__name__)

# orders.id is a signed BIGINT
MAX_ORDER_NUMBER = 2**63 - 1


def parse_order_number(raw: str) -> int:
    """주문 번호 문자열 검증

    Raises:
        BadRequestError: 비어 있거나 숫자가 아님
        ValidationError: Luhn 체크섬 실패 또는 범위 초과
    """
    number = (raw or "").strip()
    if not number:
        raise BadRequestError("Order number is empty")
    if not is_ascii_digits(number):
        raise BadRequestError("Order number must contain only digits")
    if not is_valid_luhn(number):
        raise ValidationError(f"Order number {number} fails the Luhn check")

    order_id = int(number)
    if order_id > MAX_ORDER_NUMBER:
        raise ValidationError(f"Order number {number} is out of range")
    return order_id


class OrderService:
    """주문 업로드 및 조회 서비스"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def upload_order(self, user_id: int, raw_number: str) -> Tuple[Order, bool]:
        """주문 번호 업로드

        Returns:
            (주문, 신규 생성 여부) - 같은 사용자가 이미 올린 번호면 created=False

        Raises:
            ConflictError: 다른 사용자가 이미 올린 주문 번호
        """
        order_id = parse_order_number(raw_number)

        try:
            with get_db_context(self.session_factory) as db:
                order_repo = OrderRepository(db)
                existing = order_repo.get_by_id(order_id)
                if existing is not None:
                    if existing.user_id != user_id:
                        raise ConflictError(
                            f"Order {order_id} was uploaded by another user"
                        )
                    return existing, False
                order = order_repo.create_order(order_id, user_id)
        except IntegrityError:
            raise ConflictError(f"Order {order_id} already exists")

        logger.info(f"Order {order_id} uploaded by user {user_id}")
        return order, True

    def list_orders(self, user_id: int) -> List[OrderResponse]:
        with get_db_context(self.session_factory) as db:
            orders = OrderRepository(db).get_user_orders(user_id)
        return [OrderResponse.from_order(order) for order in orders]
