"""Storage capability used by the accrual processor.

Every call runs in its own session taken from the shared engine pool, so a
single instance can be used from all worker threads at once.
"""

from typing import List

from sqlalchemy.orm import sessionmaker

from loyalty.core.exceptions import NotFoundError
from loyalty.database.session import get_db_context
from loyalty.models.order import OrderStatus
from loyalty.repositories.order_repository import OrderRepository
from loyalty.schemas.order import Order


class OrderStorage:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def fetch_unprocessed_order_ids(self) -> List[int]:
        with get_db_context(self.session_factory) as db:
            return OrderRepository(db).get_unprocessed_ids()

    def update_order(self, order_id: int, status: OrderStatus, amount: float) -> Order:
        with get_db_context(self.session_factory) as db:
            order = OrderRepository(db).update_order(order_id, status, amount)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    def update_order_status(self, order_id: int, status: OrderStatus) -> Order:
        with get_db_context(self.session_factory) as db:
            order = OrderRepository(db).update_order_status(order_id, status)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        return order
