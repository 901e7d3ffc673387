import httpx
import pytest

from loyalty.schemas.accrual import AccrualStatus
from loyalty.services.accrual_service import (
    AccrualClient,
    AccrualError,
    AccrualRateLimitError,
    AccrualResponseError,
    AccrualUnavailableError,
)


def make_client(handler, base_url="http://accrual.test"):
    return AccrualClient(base_url, timeout=1.0, transport=httpx.MockTransport(handler))


class TestAccrualClient:
    def test_processed_response(self):
        requested = []

        def handler(request):
            requested.append(request.url.path)
            return httpx.Response(
                200, json={"order": "7703824164", "status": "PROCESSED", "accrual": 500}
            )

        client = make_client(handler)
        result = client.fetch(7703824164)

        assert requested == ["/api/orders/7703824164"]
        assert result.status is AccrualStatus.PROCESSED
        assert result.accrual == 500
        assert result.order_number == 7703824164
        assert result.is_final

    @pytest.mark.parametrize("status", ["REGISTERED", "PROCESSING", "INVALID"])
    def test_non_final_statuses(self, status):
        client = make_client(
            lambda request: httpx.Response(200, json={"order": "18", "status": status})
        )

        result = client.fetch(18)

        assert result.status.value == status
        assert result.accrual is None
        assert not result.is_final

    def test_trailing_slash_in_base_url(self):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(200, json={"order": "18", "status": "REGISTERED"})

        client = make_client(handler, base_url="http://accrual.test/")
        client.fetch(18)

        assert client.base_url == "http://accrual.test"
        assert paths == ["/api/orders/18"]

    def test_rate_limited_with_retry_after(self):
        client = make_client(
            lambda request: httpx.Response(429, headers={"Retry-After": "60"})
        )

        with pytest.raises(AccrualRateLimitError) as exc_info:
            client.fetch(18)

        assert exc_info.value.retry_after == 60
        assert exc_info.value.order_number == 18
        assert isinstance(exc_info.value, AccrualError)

    def test_rate_limited_without_retry_after(self):
        client = make_client(lambda request: httpx.Response(429))

        with pytest.raises(AccrualRateLimitError) as exc_info:
            client.fetch(18)

        assert exc_info.value.retry_after is None

    @pytest.mark.parametrize("status_code", [204, 500, 502, 404])
    def test_non_200_is_transient(self, status_code):
        client = make_client(lambda request: httpx.Response(status_code))

        with pytest.raises(AccrualUnavailableError) as exc_info:
            client.fetch(18)

        assert exc_info.value.status_code == status_code

    def test_timeout_is_transient(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(AccrualUnavailableError):
            make_client(handler).fetch(18)

    def test_connection_error_is_transient(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(AccrualUnavailableError) as exc_info:
            make_client(handler).fetch(18)

        assert exc_info.value.status_code is None

    def test_malformed_json(self):
        client = make_client(lambda request: httpx.Response(200, content=b"not json"))

        with pytest.raises(AccrualResponseError):
            client.fetch(18)

    def test_unknown_status(self):
        client = make_client(
            lambda request: httpx.Response(200, json={"order": "18", "status": "DONE"})
        )

        with pytest.raises(AccrualResponseError):
            client.fetch(18)

    def test_negative_accrual_rejected(self):
        client = make_client(
            lambda request: httpx.Response(
                200, json={"order": "18", "status": "PROCESSED", "accrual": -5}
            )
        )

        with pytest.raises(AccrualResponseError):
            client.fetch(18)

    @pytest.mark.parametrize("order", ["²", "١٨"])
    def test_non_ascii_order_number(self, order):
        client = make_client(
            lambda request: httpx.Response(
                200, json={"order": order, "status": "PROCESSED", "accrual": 1}
            )
        )

        with pytest.raises(AccrualResponseError):
            client.fetch(18)

    def test_non_ascii_retry_after_is_ignored(self):
        client = make_client(
            lambda request: httpx.Response(429, headers={"Retry-After": "²".encode("utf-8")})
        )

        with pytest.raises(AccrualRateLimitError) as exc_info:
            client.fetch(18)

        assert exc_info.value.retry_after is None

    def test_order_mismatch(self):
        client = make_client(
            lambda request: httpx.Response(200, json={"order": "26", "status": "PROCESSED"})
        )

        with pytest.raises(AccrualResponseError):
            client.fetch(18)

    def test_from_settings(self, settings):
        client = AccrualClient.from_settings(settings)

        assert client.base_url == settings.ACCRUAL_SYSTEM_ADDRESS
        client.close()
