from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
from dependency_injector import providers

from loyalty.core.exceptions import (
    ConflictError,
    InsufficientBalanceError,
    ValidationError,
)
from loyalty.models.order import OrderStatus
from loyalty.schemas.order import BalanceResponse, WithdrawalResponse


@pytest.fixture
def balance_service(app):
    service = Mock()
    app.container.services.balance_service.override(providers.Object(service))
    yield service
    app.container.services.balance_service.reset_override()


class TestBalanceRoutes:
    """잔액 / 출금 라우터 테스트"""

    def test_get_balance(self, client, auth_headers, balance_service):
        balance_service.get_balance.return_value = BalanceResponse(
            current=500.5, withdrawn=42
        )

        response = client.get("/api/user/balance", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"current": 500.5, "withdrawn": 42}
        balance_service.get_balance.assert_called_once_with(1)

    def test_withdraw(self, client, auth_headers, balance_service, make_order):
        balance_service.withdraw.return_value = make_order(
            2377225624, OrderStatus.PROCESSED, -751
        )

        response = client.post(
            "/api/user/balance/withdraw",
            json={"order": "2377225624", "sum": 751},
            headers=auth_headers,
        )

        assert response.status_code == 200
        user_id, request = balance_service.withdraw.call_args.args
        assert user_id == 1
        assert request.order == "2377225624"
        assert request.sum == 751

    @pytest.mark.parametrize(
        "error, status_code",
        [
            (InsufficientBalanceError("Balance 10 is less than requested 751"), 402),
            (ConflictError("Order 2377225624 already exists"), 409),
            (ValidationError("Order number fails the Luhn check"), 422),
        ],
    )
    def test_withdraw_errors(self, client, auth_headers, balance_service, error, status_code):
        balance_service.withdraw.side_effect = error

        response = client.post(
            "/api/user/balance/withdraw",
            json={"order": "2377225624", "sum": 751},
            headers=auth_headers,
        )

        assert response.status_code == status_code
        assert response.json()["success"] is False

    @pytest.mark.parametrize("amount", [0, -10])
    def test_withdraw_non_positive_sum(self, client, auth_headers, balance_service, amount):
        response = client.post(
            "/api/user/balance/withdraw",
            json={"order": "2377225624", "sum": amount},
            headers=auth_headers,
        )

        assert response.status_code == 422
        balance_service.withdraw.assert_not_called()

    def test_list_withdrawals(self, client, auth_headers, balance_service):
        processed_at = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        balance_service.list_withdrawals.return_value = [
            WithdrawalResponse(order="2377225624", sum=500, processed_at=processed_at)
        ]

        response = client.get("/api/user/withdrawals", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["order"] == "2377225624"
        assert data[0]["sum"] == 500
        assert data[0]["processed_at"].startswith("2024-01-01T12:00:00")

    def test_list_withdrawals_empty(self, client, auth_headers, balance_service):
        balance_service.list_withdrawals.return_value = []

        response = client.get("/api/user/withdrawals", headers=auth_headers)

        assert response.status_code == 204
