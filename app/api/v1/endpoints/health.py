"""Health check endpoints; used for liveness and readiness probes."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)
from app.shared.enums import StoreBackend

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Store not configured", "model": ReadinessErrorResponse}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 when the store backend is usable; 503 when Firestore failed to init."""
    settings = get_settings()
    if settings.store_backend is StoreBackend.MEMORY or getattr(
        request.app.state, "repositories", None
    ) is not None:
        return ReadinessResponse(backend=settings.store_backend.value)
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(
            message="Firestore is not configured",
        ).model_dump(),
    )
