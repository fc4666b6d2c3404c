"""App settings API: the title shown in the admin header."""

from fastapi import APIRouter

from app.api.v1.dependencies import AppSettings, CurrentIdentity
from app.schemas.settings import AppTitleRequest, AppTitleResponse

router = APIRouter()


@router.get("/title", response_model=AppTitleResponse)
async def get_app_title(
    identity: CurrentIdentity, app_settings: AppSettings
) -> AppTitleResponse:
    return AppTitleResponse(title=await app_settings.get_app_title())


@router.put("/title", response_model=AppTitleResponse)
async def set_app_title(
    body: AppTitleRequest, identity: CurrentIdentity, app_settings: AppSettings
) -> AppTitleResponse:
    """Change the title (requires canManageRoles)."""
    title = await app_settings.set_app_title(identity.user_id, body.title)
    return AppTitleResponse(title=title)
