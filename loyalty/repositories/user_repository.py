from typing import Optional

from sqlalchemy.orm import Session

from loyalty.models.user import User as UserModel
from loyalty.repositories.base import BaseRepository
from loyalty.schemas.user import UserInDB


class UserRepository(BaseRepository[UserModel, UserInDB]):
    """사용자 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(UserModel, UserInDB, db)

    def get_by_login(self, login: str) -> Optional[UserInDB]:
        """로그인으로 사용자 조회 (대소문자 구분)"""
        return self.get_by_field("login", login)

    def exists_by_login(self, login: str) -> bool:
        return self.exists({"login": login})

    def create_user(self, login: str, password_hash: str) -> Optional[UserInDB]:
        return self.create(login=login, password_hash=password_hash)

    def lock_by_id(self, user_id: int) -> Optional[UserInDB]:
        """사용자 행 잠금 (출금 시 잔액 검증과 기록을 직렬화)"""
        model_instance = (
            self.db.query(self.model_class)
            .filter(self.model_class.id == user_id)
            .with_for_update()
            .first()
        )
        return self._to_schema(model_instance)
