import logging

from sqlalchemy.engine import Engine

from loyalty.models.base import Base
from loyalty.models.order import Order  # noqa: F401
from loyalty.models.user import User  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """테이블 생성 (이미 존재하면 건너뜀)"""
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        raise
    logger.info(f"Database initialized: {', '.join(sorted(Base.metadata.tables))}")
