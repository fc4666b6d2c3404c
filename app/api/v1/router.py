"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    analytics,
    changelog,
    collections,
    health,
    me,
    roles,
    settings,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    collections.router, prefix="/collections", tags=["collections"]
)
api_router.include_router(changelog.router, prefix="/changelog", tags=["changelog"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(me.router, prefix="/me", tags=["me"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
