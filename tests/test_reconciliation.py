import pytest

from loyalty.core.exceptions import NotFoundError
from loyalty.models.order import OrderStatus
from loyalty.schemas.accrual import AccrualResponse
from loyalty.services.reconciliation_service import ReconciliationService, reconcile


@pytest.fixture
def storage(memory_storage, make_order):
    return memory_storage(
        [make_order(7703824164), make_order(18, OrderStatus.PROCESSING, 0)]
    )


class TestReconciliation:
    def test_processed_overwrites_status_and_sum(self, storage):
        accrual = AccrualResponse(order="7703824164", status="PROCESSED", accrual=500)

        order = reconcile(storage, accrual)

        assert order.status == OrderStatus.PROCESSED
        assert order.sum == 500
        assert storage.calls == [("update_order", 7703824164, OrderStatus.PROCESSED, 500)]

    def test_processing_updates_status_only(self, storage):
        accrual = AccrualResponse(order="7703824164", status="PROCESSING")

        order = reconcile(storage, accrual)

        assert order.status == OrderStatus.PROCESSING
        assert order.sum == 0
        assert storage.calls == [
            ("update_order_status", 7703824164, OrderStatus.PROCESSING)
        ]

    def test_registered_maps_to_new(self, storage):
        order = reconcile(storage, AccrualResponse(order="18", status="REGISTERED"))

        assert order.status == OrderStatus.NEW

    def test_invalid_is_terminal(self, storage):
        order = reconcile(storage, AccrualResponse(order="18", status="INVALID"))

        assert order.status == OrderStatus.INVALID
        assert 18 not in storage.fetch_unprocessed_order_ids()

    def test_processed_without_accrual_counts_as_zero(self, storage):
        order = reconcile(storage, AccrualResponse(order="18", status="PROCESSED"))

        assert order.status == OrderStatus.PROCESSED
        assert order.sum == 0

    def test_applying_same_response_twice_is_idempotent(self, storage):
        accrual = AccrualResponse(order="7703824164", status="PROCESSED", accrual=500)
        service = ReconciliationService(storage)

        first = service.apply(accrual)
        second = service.apply(accrual)

        assert first == second
        assert storage.orders[7703824164].sum == 500

    def test_missing_order_propagates_not_found(self, storage):
        with pytest.raises(NotFoundError):
            reconcile(storage, AccrualResponse(order="26", status="PROCESSED", accrual=1))
