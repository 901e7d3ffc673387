import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from loyalty.config import Settings
from loyalty.core.exceptions import AuthenticationError, ConflictError
from loyalty.core.security import create_access_token, hash_password, verify_password
from loyalty.database.session import get_db_context
from loyalty.repositories.user_repository import UserRepository
from loyalty.schemas.auth import Token, UserCredentials

logger = logging.getLogger(__name__)


class AuthService:
    """회원가입 / 로그인 비즈니스 로직을 담당하는 서비스"""

    def __init__(self, session_factory: sessionmaker, settings: Settings):
        self.session_factory = session_factory
        self.settings = settings

    def register(self, credentials: UserCredentials) -> Token:
        """신규 사용자 생성 후 바로 로그인 토큰 발급

        Raises:
            ConflictError: 이미 사용 중인 로그인
        """
        password_hash = hash_password(credentials.password)
        try:
            with get_db_context(self.session_factory) as db:
                user_repo = UserRepository(db)
                if user_repo.exists_by_login(credentials.login):
                    raise ConflictError(f"Login {credentials.login!r} is already taken")
                user = user_repo.create_user(credentials.login, password_hash)
        except IntegrityError:
            # 동시 가입 요청이 unique index에 걸린 경우
            raise ConflictError(f"Login {credentials.login!r} is already taken")

        logger.info(f"User registered: {user.login} (id={user.id})")
        return self._issue_token(user.id, user.login)

    def login(self, credentials: UserCredentials) -> Token:
        with get_db_context(self.session_factory) as db:
            user = UserRepository(db).get_by_login(credentials.login)

        if user is None or not verify_password(credentials.password, user.password_hash):
            logger.warning(f"Failed login attempt for {credentials.login!r}")
            raise AuthenticationError("Invalid login or password")

        logger.info(f"User logged in: {user.login} (id={user.id})")
        return self._issue_token(user.id, user.login)

    def _issue_token(self, user_id: int, login: str) -> Token:
        return Token(auth_token=create_access_token(user_id, login, self.settings))
