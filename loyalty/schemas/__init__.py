# Schema layer - Pydantic request/response models

from .accrual import AccrualResponse, AccrualStatus
from .auth import Token, TokenPayload, UserCredentials
from .order import (
    BalanceResponse,
    Order,
    OrderResponse,
    WithdrawalResponse,
    WithdrawRequest,
)
from .user import User, UserInDB

__all__ = [
    "AccrualResponse",
    "AccrualStatus",
    "BalanceResponse",
    "Order",
    "OrderResponse",
    "Token",
    "TokenPayload",
    "User",
    "UserCredentials",
    "UserInDB",
    "WithdrawalResponse",
    "WithdrawRequest",
]
