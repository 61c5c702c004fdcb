"""
Health check endpoints

- /health (liveness): process is up, nothing else is checked
- /health/ready (readiness): database reachable; also lists which optional
  integrations (cache, weather, AI functions, SMS) are configured

Reference: https://kubernetes.io/docs/tasks/configure-pod-container/configure-liveness-readiness-startup-probes/
"""
import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy import text

from closet.core.config import settings
from closet.core.database import engine

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


class HealthResponse(BaseModel):
    status: str
    message: str


class ReadinessResponse(HealthResponse):
    """Readiness plus the state of each optional integration"""
    integrations: dict[str, str] = Field(
        default_factory=dict,
        description="e.g. {'cache': 'redis', 'weather': 'fallback'}",
    )


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check (liveness)",
    status_code=status.HTTP_200_OK,
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", message=f"{settings.PROJECT_NAME} is running")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description=(
        "Checks database connectivity. Optional integrations are reported "
        "but never make the service unready."
    ),
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Service is ready"},
        503: {"description": "Database unavailable"}
    }
)
async def readiness_check() -> ReadinessResponse:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Readiness check failed: {type(e).__name__}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is not ready - database unavailable"
        ) from e

    return ReadinessResponse(
        status="ready",
        message="Database reachable",
        integrations=settings.integrations(),
    )
