from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from loyalty.models.base import BaseModel, BigIntegerPK


class User(BaseModel):
    __tablename__ = "users"
    __table_args__ = (Index("idx_users_login", "login", unique=True),)

    id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)
    # Case-sensitive, compared as stored
    login: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, login={self.login})>"
