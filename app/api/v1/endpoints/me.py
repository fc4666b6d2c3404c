"""Current user endpoint: the resolved role and capabilities."""

from fastapi import APIRouter

from app.api.v1.dependencies import CurrentIdentity, Evaluator
from app.schemas.role import UserPermissionsResponse

router = APIRouter()


@router.get("/permissions", response_model=UserPermissionsResponse)
async def my_permissions(
    identity: CurrentIdentity, evaluator: Evaluator
) -> UserPermissionsResponse:
    resolved = await evaluator.get_user_permissions(identity.user_id)
    return UserPermissionsResponse.from_permissions(
        identity.user_id, identity.email, resolved
    )
