from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response

from loyalty.containers import Container
from loyalty.schemas.health import HealthCheckResponse
from loyalty.services.order_processor import OrderProcessor

router = APIRouter(tags=["health"])


@router.get("/ping")
def ping() -> Response:
    return Response(status_code=200)


@router.get("/health", response_model=HealthCheckResponse)
@inject
def health_check(
    processor: OrderProcessor = Depends(Provide[Container.services.order_processor]),
) -> HealthCheckResponse:
    """Health check endpoint."""

    return HealthCheckResponse(accrual_processor_running=processor.is_running)
