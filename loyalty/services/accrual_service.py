"""
적립 시스템(accrual system) HTTP 클라이언트

주문 하나당 ``GET {base_url}/api/orders/{number}`` 한 번을 호출하고,
응답을 다음 중 하나로 분류합니다:

- 200: ``AccrualResponse`` 반환 (REGISTERED / PROCESSING / INVALID / PROCESSED)
- 429: ``AccrualRateLimitError`` (다음 폴링 주기에 재시도)
- 204, 5xx, 기타 상태 코드, 전송 오류, 타임아웃: ``AccrualUnavailableError``
- 잘못된 JSON 또는 알 수 없는 상태: ``AccrualResponseError``

호출 내부에서는 재시도하지 않습니다. 처리되지 않은 주문은 다음 주기에
다시 선택되므로 재시도는 스케줄러가 담당합니다.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx
from pydantic import ValidationError

from loyalty.config import Settings
from loyalty.schemas.accrual import AccrualResponse
from loyalty.utils.luhn import is_ascii_digits

logger = logging.getLogger(__name__)


class AccrualError(Exception):
    """적립 시스템 연동 중 발생한 오류"""

    def __init__(self, order_number: int, message: str):
        self.order_number = order_number
        self.message = message
        super().__init__(message)


class AccrualRateLimitError(AccrualError):
    """429 Too Many Requests - 하드 실패가 아닌 백오프 신호"""

    def __init__(self, order_number: int, retry_after: Optional[int] = None):
        self.retry_after = retry_after
        message = "too many requests"
        if retry_after is not None:
            message = f"too many requests, retry after {retry_after}s"
        super().__init__(order_number, message)


class AccrualUnavailableError(AccrualError):
    """일시적 실패 - 주문은 미처리 상태로 남아 다음 주기에 재시도"""

    def __init__(self, order_number: int, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(order_number, message)


class AccrualResponseError(AccrualError):
    """응답 데이터 오류 - 해당 주문에 대해서만 실패로 처리"""


class AccrualClient:
    """적립 시스템 조회 클라이언트

    내부 ``httpx.Client``의 커넥션 풀은 스레드 안전하므로 하나의 인스턴스를
    모든 워커가 공유합니다.
    """

    _ORDER_PATH = "/api/orders/{number}"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(timeout, connect=min(timeout, 5.0))
        self._client = httpx.Client(
            base_url=self._base_url, timeout=self._timeout, transport=transport
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "AccrualClient":
        return cls(
            base_url=settings.ACCRUAL_SYSTEM_ADDRESS,
            timeout=settings.ACCRUAL_TIMEOUT_SECONDS,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def fetch(self, order_number: int) -> AccrualResponse:
        """주문의 적립 상태를 조회합니다."""
        path = self._ORDER_PATH.format(number=order_number)

        started_at = time.perf_counter()
        try:
            response = self._client.get(path)
        except httpx.TimeoutException as exc:
            raise AccrualUnavailableError(
                order_number, f"request timed out after {self._timeout.read}s"
            ) from exc
        except httpx.RequestError as exc:
            raise AccrualUnavailableError(
                order_number, f"request failed: {exc}"
            ) from exc
        elapsed_ms = int((time.perf_counter() - started_at) * 1000)

        logger.debug(
            f"GET {path} -> {response.status_code} in {elapsed_ms}ms"
        )

        if response.status_code == 429:
            raise AccrualRateLimitError(
                order_number, retry_after=_parse_retry_after(response)
            )
        if response.status_code == 204:
            raise AccrualUnavailableError(
                order_number, "order is not registered in accrual system", status_code=204
            )
        if response.status_code != 200:
            raise AccrualUnavailableError(
                order_number,
                f"unexpected status code {response.status_code}",
                status_code=response.status_code,
            )

        try:
            accrual = AccrualResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise AccrualResponseError(
                order_number, f"malformed accrual response: {exc}"
            ) from exc

        if not is_ascii_digits(accrual.order) or accrual.order_number != order_number:
            raise AccrualResponseError(
                order_number, f"response is for order {accrual.order!r}"
            )
        return accrual

    def close(self) -> None:
        self._client.close()


def _parse_retry_after(response: httpx.Response) -> Optional[int]:
    value = response.headers.get("Retry-After")
    if value is None or not is_ascii_digits(value.strip()):
        return None
    return int(value)
