import threading
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from loyalty.config import Settings, get_settings
from loyalty.core.exceptions import NotFoundError
from loyalty.core.security import create_access_token
from loyalty.database.connection import build_session_factory
from loyalty.models.base import Base
from loyalty.models import user as user_models  # noqa: F401
from loyalty.models.order import OrderStatus
from loyalty.schemas.order import Order


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DATABASE_URI="sqlite://",
        JWT_SECRET="test-secret",
        ACCRUAL_ENABLED=False,
    )


@pytest.fixture
def engine():
    """스레드 간 공유되는 in-memory SQLite 엔진"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


class InMemoryStorage:
    """주문 dict 기반 저장소 (적립 처리기용)"""

    def __init__(self, orders=None):
        self.orders = {order.id: order for order in (orders or [])}
        self.calls = []
        self._lock = threading.Lock()

    def fetch_unprocessed_order_ids(self):
        return [
            order.id
            for order in self.orders.values()
            if order.status in OrderStatus.pending()
        ]

    def update_order(self, order_id, status, amount):
        with self._lock:
            self.calls.append(("update_order", order_id, status, amount))
            if order_id not in self.orders:
                raise NotFoundError(f"Order {order_id} not found")
            order = self.orders[order_id].model_copy(
                update={"status": status, "sum": amount}
            )
            self.orders[order_id] = order
            return order

    def update_order_status(self, order_id, status):
        with self._lock:
            self.calls.append(("update_order_status", order_id, status))
            if order_id not in self.orders:
                raise NotFoundError(f"Order {order_id} not found")
            order = self.orders[order_id].model_copy(update={"status": status})
            self.orders[order_id] = order
            return order


def _make_order(order_id, status=OrderStatus.NEW, amount=0.0, user_id=1):
    return Order(
        id=order_id,
        user_id=user_id,
        status=status,
        sum=amount,
        uploaded_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def make_order():
    return _make_order


@pytest.fixture
def memory_storage():
    return InMemoryStorage


@pytest.fixture
def app():
    from loyalty.main import create_app

    return create_app()


@pytest.fixture
def client(app):
    """테스트 클라이언트 픽스처 (lifespan 미실행: DB / 처리기 없이 라우터만)"""
    return TestClient(app)


@pytest.fixture
def auth_headers():
    token = create_access_token(1, "alice", get_settings())
    return {"Authorization": f"Bearer {token}"}
