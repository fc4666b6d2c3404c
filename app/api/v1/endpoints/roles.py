"""Roles API: list, add, toggle, save, duplicate, delete, and the default role."""

from fastapi import APIRouter, Response

from app.api.v1.dependencies import CurrentIdentity, Roles
from app.domain.entities.role import Role
from app.schemas.role import (
    DefaultRoleRequest,
    RoleCreateRequest,
    RoleResponse,
    RoleSaveRequest,
    RoleToggleRequest,
)

router = APIRouter()


@router.get("", response_model=list[RoleResponse])
async def list_roles(roles: Roles, identity: CurrentIdentity) -> list[RoleResponse]:
    """List roles sorted by name."""
    return [RoleResponse.from_role(r) for r in await roles.list_roles()]


@router.post("", response_model=RoleResponse, status_code=201)
async def add_role(
    body: RoleCreateRequest, roles: Roles, identity: CurrentIdentity
) -> RoleResponse:
    """Add a role with no capabilities (name is trimmed and lower-cased)."""
    role = await roles.add_role(identity.user_id, body.name, body.category)
    return RoleResponse.from_role(role)


@router.put("/default", status_code=204)
async def set_default_role(
    body: DefaultRoleRequest, roles: Roles, identity: CurrentIdentity
) -> Response:
    await roles.set_default_role(identity.user_id, body.role)
    return Response(status_code=204)


@router.put("/{name}", response_model=RoleResponse)
async def save_role(
    name: str, body: RoleSaveRequest, roles: Roles, identity: CurrentIdentity
) -> RoleResponse:
    """Create or replace a role's permissions and category."""
    role = Role(
        name=name, permissions=body.permissions.to_permissions(), category=body.category
    )
    return RoleResponse.from_role(await roles.save_role(identity.user_id, role))


@router.post("/{name}/toggle", response_model=RoleResponse)
async def toggle_permission(
    name: str, body: RoleToggleRequest, roles: Roles, identity: CurrentIdentity
) -> RoleResponse:
    role = await roles.toggle_permission(identity.user_id, name, body.capability)
    return RoleResponse.from_role(role)


@router.post("/{name}/duplicate", response_model=RoleResponse, status_code=201)
async def duplicate_role(
    name: str, roles: Roles, identity: CurrentIdentity
) -> RoleResponse:
    """Copy a role to ``{name}_copy``."""
    return RoleResponse.from_role(await roles.duplicate_role(identity.user_id, name))


@router.delete("/{name}", status_code=204)
async def delete_role(name: str, roles: Roles, identity: CurrentIdentity) -> Response:
    await roles.delete_role(identity.user_id, name)
    return Response(status_code=204)
