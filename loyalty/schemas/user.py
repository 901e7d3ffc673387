from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    id: int
    login: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserInDB(User):
    password_hash: str
