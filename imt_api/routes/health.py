"""
Health Check Route

Simple health check endpoint for liveness probes.
"""

from fastapi import APIRouter

from imt_api.models.responses import HealthResponse


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns service status for liveness probes.
    """
    return HealthResponse(ok=True, service="imt-api", version="v1")


@router.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """
    Root endpoint - same as health check.
    """
    return HealthResponse(ok=True, service="imt-api", version="v1")
