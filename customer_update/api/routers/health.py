from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from customer_update.api.dependencies import get_app_settings
from customer_update.api.schemas import ApiResponse
from customer_update.config import Settings
from customer_update.schemas.customers import HealthStatus
from customer_update.services.health_service import get_health

router = APIRouter(tags=["system"])


@router.get("/health", response_model=ApiResponse[HealthStatus])
def health_check(settings: Settings = Depends(get_app_settings)) -> JSONResponse:
    """
    Simple health check endpoint for monitoring / readiness probes.
    """
    return ApiResponse[HealthStatus](
        success=True,
        message="API is healthy",
        data=get_health(settings),
    ).to_response()
