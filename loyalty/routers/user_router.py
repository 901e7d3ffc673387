import logging

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response

from loyalty.containers import Container
from loyalty.schemas.auth import Token, UserCredentials
from loyalty.services.auth_service import AuthService

router = APIRouter(prefix="/api/user", tags=["user"])
logger = logging.getLogger(__name__)


def _with_auth_header(response: Response, token: Token) -> Token:
    response.headers["Authorization"] = f"Bearer {token.auth_token}"
    return token


@router.post("/register", response_model=Token)
@inject
def register(
    credentials: UserCredentials,
    response: Response,
    auth_service: AuthService = Depends(Provide[Container.services.auth_service]),
) -> Token:
    """회원가입 - 성공 시 바로 인증된 상태가 됨"""
    return _with_auth_header(response, auth_service.register(credentials))


@router.post("/login", response_model=Token)
@inject
def login(
    credentials: UserCredentials,
    response: Response,
    auth_service: AuthService = Depends(Provide[Container.services.auth_service]),
) -> Token:
    """로그인"""
    return _with_auth_header(response, auth_service.login(credentials))
