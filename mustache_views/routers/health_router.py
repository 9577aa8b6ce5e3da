"""Health endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from mustache_views import __version__
from mustache_views.models import DetailedHealthResponse, HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint."""
    return HealthResponse(status="ok", version=__version__)


@router.get("/health/ready", response_model=DetailedHealthResponse)
async def readiness_check(request: Request):
    """Readiness probe - is the view resolver initialized?

    **Returns:**
    - 200: Views can be resolved
    - 503: Resolver missing or not initialized
    """
    resolver = getattr(request.app.state, "view_resolver", None)
    ready = resolver is not None and resolver.initialized
    checks = {"view_resolver": "ok" if ready else "not_initialized"}

    return JSONResponse(
        status_code=200 if ready else 503,
        content=DetailedHealthResponse(
            status="healthy" if ready else "unhealthy",
            version=__version__,
            timestamp=datetime.now(UTC),
            checks=checks,
        ).model_dump(mode="json"),
    )
