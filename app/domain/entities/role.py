"""Role domain model: four boolean capabilities plus a UI category tag."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from app.domain.enums import Capability

ADMIN_ROLE = "admin"
DEFAULT_CATEGORY = "custom"


@dataclass(frozen=True)
class RolePermissions:
    """Capability set granted by a role."""

    can_view: bool = False
    can_edit: bool = False
    can_delete: bool = False
    can_manage_roles: bool = False

    @classmethod
    def all_granted(cls) -> RolePermissions:
        return cls(can_view=True, can_edit=True, can_delete=True, can_manage_roles=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RolePermissions:
        return cls(
            can_view=bool(data.get(Capability.VIEW.value)),
            can_edit=bool(data.get(Capability.EDIT.value)),
            can_delete=bool(data.get(Capability.DELETE.value)),
            can_manage_roles=bool(data.get(Capability.MANAGE_ROLES.value)),
        )

    def to_dict(self) -> dict[str, bool]:
        return {
            Capability.VIEW.value: self.can_view,
            Capability.EDIT.value: self.can_edit,
            Capability.DELETE.value: self.can_delete,
            Capability.MANAGE_ROLES.value: self.can_manage_roles,
        }

    def has(self, capability: Capability) -> bool:
        return self.to_dict()[capability.value]

    def toggled(self, capability: Capability) -> RolePermissions:
        """Return a copy with one capability flipped."""
        data = self.to_dict()
        data[capability.value] = not data[capability.value]
        return RolePermissions.from_dict(data)


@dataclass(frozen=True)
class Role:
    """Named bundle of capabilities stored at ``roles/{name}``."""

    name: str
    permissions: RolePermissions
    category: str = DEFAULT_CATEGORY

    @classmethod
    def from_document(cls, name: str, data: dict[str, Any]) -> Role:
        """Build from a stored role document.

        Older role documents kept the capability flags at the top level;
        those are read as if nested under ``permissions``.
        """
        nested = data.get("permissions")
        if isinstance(nested, dict):
            permissions = RolePermissions.from_dict(nested)
            category = data.get("category") or DEFAULT_CATEGORY
        else:
            permissions = RolePermissions.from_dict(data)
            category = DEFAULT_CATEGORY
        return cls(name=name, permissions=permissions, category=category)

    def to_document(self) -> dict[str, Any]:
        return {"permissions": self.permissions.to_dict(), "category": self.category}

    def with_permissions(self, permissions: RolePermissions) -> Role:
        return replace(self, permissions=permissions)


@dataclass(frozen=True)
class UserPermissions:
    """Permissions a user resolved to, tagged with the role name."""

    role: str
    permissions: RolePermissions

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def has(self, capability: Capability) -> bool:
        return self.permissions.has(capability)

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, **self.permissions.to_dict()}
