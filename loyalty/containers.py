from dependency_injector import containers, providers

from loyalty.config import get_settings
from loyalty.database.connection import build_engine, build_session_factory
from loyalty.repositories.order_storage import OrderStorage
from loyalty.services.accrual_service import AccrualClient
from loyalty.services.auth_service import AuthService
from loyalty.services.balance_service import BalanceService
from loyalty.services.order_processor import OrderProcessor
from loyalty.services.order_service import OrderService


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(get_settings)


class RepositoryModule(containers.DeclarativeContainer):
    """Database engine, sessions and storage."""

    config = providers.DependenciesContainer()

    engine = providers.Singleton(build_engine, settings=config.config)
    session_factory = providers.Singleton(build_session_factory, engine=engine)
    order_storage = providers.Singleton(OrderStorage, session_factory=session_factory)


class ServiceModule(containers.DeclarativeContainer):
    """Service layer dependencies."""

    config = providers.DependenciesContainer()
    repositories = providers.DependenciesContainer()

    auth_service = providers.Factory(
        AuthService,
        session_factory=repositories.session_factory,
        settings=config.config,
    )
    order_service = providers.Factory(
        OrderService, session_factory=repositories.session_factory
    )
    balance_service = providers.Factory(
        BalanceService, session_factory=repositories.session_factory
    )

    accrual_client = providers.Singleton(
        AccrualClient.from_settings, settings=config.config
    )
    order_processor = providers.Singleton(
        OrderProcessor,
        storage=repositories.order_storage,
        client=accrual_client,
        interval=config.config.provided.REQUEST_INTERVAL,
        workers=config.config.provided.ACCRUAL_WORKERS,
    )


class Container(containers.DeclarativeContainer):
    """Application container."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "loyalty.routers.user_router",
            "loyalty.routers.order_router",
            "loyalty.routers.balance_router",
            "loyalty.routers.health_router",
        ],
    )

    config = providers.Container(ConfigModule)
    repositories = providers.Container(RepositoryModule, config=config)
    services = providers.Container(
        ServiceModule, config=config, repositories=repositories
    )
