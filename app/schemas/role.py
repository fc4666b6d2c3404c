"""Role API schemas."""

from pydantic import BaseModel, Field

from app.domain.entities.role import DEFAULT_CATEGORY, Role, RolePermissions, UserPermissions
from app.domain.enums import Capability


class PermissionsBody(BaseModel):
    """The four capability flags, in their stored camelCase names."""

    canView: bool = False
    canEdit: bool = False
    canDelete: bool = False
    canManageRoles: bool = False

    def to_permissions(self) -> RolePermissions:
        return RolePermissions.from_dict(self.model_dump())


class RoleCreateRequest(BaseModel):
    """Request body for adding a role (starts with no capabilities)."""

    name: str = Field(..., min_length=1, max_length=64)
    category: str = Field(default=DEFAULT_CATEGORY, max_length=64)


class RoleSaveRequest(BaseModel):
    """Request body for replacing a role's permissions and category."""

    permissions: PermissionsBody
    category: str = Field(default=DEFAULT_CATEGORY, max_length=64)


class RoleToggleRequest(BaseModel):
    capability: Capability


class DefaultRoleRequest(BaseModel):
    role: str = Field(..., min_length=1, max_length=64)


class RoleResponse(BaseModel):
    """Role list/detail response."""

    name: str
    category: str
    permissions: PermissionsBody

    @classmethod
    def from_role(cls, role: Role) -> "RoleResponse":
        return cls(
            name=role.name,
            category=role.category,
            permissions=PermissionsBody(**role.permissions.to_dict()),
        )


class UserPermissionsResponse(BaseModel):
    """Response for GET /me/permissions."""

    user_id: str
    email: str
    role: str
    permissions: PermissionsBody

    @classmethod
    def from_permissions(
        cls, user_id: str, email: str, resolved: UserPermissions
    ) -> "UserPermissionsResponse":
        return cls(
            user_id=user_id,
            email=email,
            role=resolved.role,
            permissions=PermissionsBody(**resolved.permissions.to_dict()),
        )
