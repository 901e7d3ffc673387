"""
잔액 API 라우터

- GET /api/user/balance: 현재 잔액 / 누적 출금액
- POST /api/user/balance/withdraw: 포인트 출금
- GET /api/user/withdrawals: 출금 내역
"""

import logging
from typing import List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response, status

from loyalty.containers import Container
from loyalty.core.auth_middleware import get_current_user
from loyalty.schemas.auth import TokenPayload
from loyalty.schemas.order import BalanceResponse, WithdrawalResponse, WithdrawRequest
from loyalty.services.balance_service import BalanceService

router = APIRouter(prefix="/api/user", tags=["balance"])
logger = logging.getLogger(__name__)


@router.get("/balance", response_model=BalanceResponse)
@inject
def get_balance(
    current_user: TokenPayload = Depends(get_current_user),
    balance_service: BalanceService = Depends(
        Provide[Container.services.balance_service]
    ),
) -> BalanceResponse:
    return balance_service.get_balance(current_user.id)


@router.post(
    "/balance/withdraw",
    responses={
        402: {"description": "잔액 부족"},
        409: {"description": "이미 존재하는 주문 번호"},
        422: {"description": "잘못된 주문 번호 또는 금액"},
    },
)
@inject
def withdraw(
    request: WithdrawRequest,
    current_user: TokenPayload = Depends(get_current_user),
    balance_service: BalanceService = Depends(
        Provide[Container.services.balance_service]
    ),
) -> Response:
    balance_service.withdraw(current_user.id, request)
    return Response(status_code=status.HTTP_200_OK)


@router.get(
    "/withdrawals",
    response_model=List[WithdrawalResponse],
    responses={204: {"description": "출금 내역 없음"}},
)
@inject
def list_withdrawals(
    current_user: TokenPayload = Depends(get_current_user),
    balance_service: BalanceService = Depends(
        Provide[Container.services.balance_service]
    ),
):
    withdrawals = balance_service.list_withdrawals(current_user.id)
    if not withdrawals:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return withdrawals
