"""
주문 API 라우터

- POST /api/user/orders: 주문 번호 업로드 (요청 본문은 text/plain 주문 번호)
- GET /api/user/orders: 내 주문 목록 (업로드 시간순)
"""

import logging
from typing import List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Request, Response, status
from starlette.concurrency import run_in_threadpool

from loyalty.containers import Container
from loyalty.core.auth_middleware import get_current_user
from loyalty.schemas.auth import TokenPayload
from loyalty.schemas.order import OrderResponse
from loyalty.services.order_service import OrderService

router = APIRouter(prefix="/api/user", tags=["orders"])
logger = logging.getLogger(__name__)


@router.post(
    "/orders",
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        200: {"description": "이미 업로드한 주문"},
        202: {"description": "새 주문 접수"},
        400: {"description": "빈 값 또는 숫자가 아닌 주문 번호"},
        409: {"description": "다른 사용자가 업로드한 주문"},
        422: {"description": "Luhn 체크섬 실패"},
    },
)
@inject
async def upload_order(
    request: Request,
    current_user: TokenPayload = Depends(get_current_user),
    order_service: OrderService = Depends(Provide[Container.services.order_service]),
) -> Response:
    raw_number = (await request.body()).decode("utf-8", errors="replace")
    _, created = await run_in_threadpool(
        order_service.upload_order, current_user.id, raw_number
    )
    if created:
        return Response(status_code=status.HTTP_202_ACCEPTED)
    return Response(status_code=status.HTTP_200_OK)


@router.get(
    "/orders",
    response_model=List[OrderResponse],
    response_model_exclude_none=True,
    responses={204: {"description": "주문 없음"}},
)
@inject
def list_orders(
    current_user: TokenPayload = Depends(get_current_user),
    order_service: OrderService = Depends(Provide[Container.services.order_service]),
):
    orders = order_service.list_orders(current_user.id)
    if not orders:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return orders
