"""
Health Endpoints - Service status plus the interpretation settings in effect.

Chat backends read ``/health`` at startup to learn which reasoning delimiters
to request from their agents and how much text one request may carry.
"""

from fastapi import APIRouter, Depends

from webspec.core.config import get_settings, Settings
from webspec.models.responses import HealthResponse


router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Report service status, reasoning delimiters and input limit"
)
async def health_check(
    settings: Settings = Depends(get_settings)
) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
        think_open_tag=settings.think_open_tag,
        think_close_tag=settings.think_close_tag,
        max_input_chars=settings.max_input_chars,
    )


@router.get("/live", summary="Liveness Check")
async def liveness_check() -> dict:
    return {"status": "alive"}
