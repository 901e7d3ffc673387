# Repository layer - Data access with Pydantic responses

from .base import BaseRepository
from .order_repository import OrderRepository
from .order_storage import OrderStorage
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "OrderRepository",
    "OrderStorage",
    "UserRepository",
]
