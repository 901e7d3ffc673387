import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from loyalty import containers
from loyalty.core.exception_handlers import register_exception_handlers
from loyalty.core.logging_middleware import LoggingMiddleware
from loyalty.logging_config import setup_logging
from loyalty.database.init_db import init_db
from loyalty.routers import balance_router, health_router, order_router, user_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: containers.Container = app.container  # type: ignore
    settings = container.config.config()

    engine = container.repositories.engine()
    init_db(engine)

    processor = None
    if settings.ACCRUAL_ENABLED:
        processor = container.services.order_processor()
        processor.start()
    else:
        logger.info("Accrual processor disabled (ACCRUAL_ENABLED=False)")

    yield

    if processor is not None:
        # 진행 중인 배치가 끝날 때까지 대기한 뒤 클라이언트를 닫음
        processor.stop()
        container.services.accrual_client().close()
    engine.dispose()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    container = containers.Container()
    settings = container.config.config()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG, lifespan=lifespan)
    app.container = container  # type: ignore

    app.add_middleware(LoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(health_router.router)
    app.include_router(user_router.router)
    app.include_router(order_router.router)
    app.include_router(balance_router.router)
    return app


app = create_app()
