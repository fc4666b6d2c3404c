"""Role application service: list, add, toggle, save, duplicate, delete roles.

Every mutating call requires the canManageRoles capability.
"""

from __future__ import annotations

from app.application.interfaces.repositories import (
    IAccessConfigRepository,
    IRoleRepository,
)
from app.application.services.permission_evaluator import PermissionEvaluator
from app.domain.entities.role import DEFAULT_CATEGORY, Role, RolePermissions
from app.domain.enums import Capability
from app.domain.exceptions import (
    ResourceNotFoundException,
    RoleAlreadyExistsException,
    ValidationException,
)
from app.shared.telemetry.logging import get_logger
from app.shared.utils.generators import is_valid_document_id

logger = get_logger(__name__)


def _require_storable_name(role_name: str) -> None:
    if not is_valid_document_id(role_name):
        raise ValidationException(f"Invalid role name: {role_name}", field="name")


class RoleService:
    """Role management gated by canManageRoles."""

    def __init__(
        self,
        role_repo: IRoleRepository,
        access_config_repo: IAccessConfigRepository,
        evaluator: PermissionEvaluator,
    ) -> None:
        self._role_repo = role_repo
        self._access_config_repo = access_config_repo
        self._evaluator = evaluator

    async def list_roles(self) -> list[Role]:
        """Return all roles sorted by name."""
        raw = await self._role_repo.list_roles()
        return [Role.from_document(name, data) for name, data in sorted(raw.items())]

    async def get_role(self, name: str) -> Role:
        data = await self._role_repo.get_role(name)
        if data is None:
            raise ResourceNotFoundException("role", name)
        return Role.from_document(name, data)

    async def add_role(
        self, user_id: str, name: str, category: str = DEFAULT_CATEGORY
    ) -> Role:
        """Create a role with no capabilities. Name is trimmed and lower-cased.

        Raises:
            ValidationException: Name is empty after trimming or cannot
                name a role document.
            RoleAlreadyExistsException: A role with that name exists.
        """
        await self._evaluator.require(user_id, Capability.MANAGE_ROLES, "add_role")
        role_name = name.strip().lower()
        if not role_name:
            raise ValidationException("Role name cannot be empty", field="name")
        _require_storable_name(role_name)
        if await self._role_repo.get_role(role_name) is not None:
            raise RoleAlreadyExistsException(role_name)
        role = Role(name=role_name, permissions=RolePermissions(), category=category)
        await self._role_repo.save_role(role_name, role.to_document())
        logger.info("Role %s added by %s", role_name, user_id)
        return role

    async def toggle_permission(
        self, user_id: str, name: str, capability: Capability
    ) -> Role:
        """Flip one capability of an existing role."""
        await self._evaluator.require(
            user_id, Capability.MANAGE_ROLES, "toggle_permission"
        )
        role = await self.get_role(name)
        updated = role.with_permissions(role.permissions.toggled(capability))
        await self._role_repo.save_role(name, updated.to_document())
        logger.info(
            "Role %s: %s set to %s by %s",
            name,
            capability.value,
            updated.permissions.has(capability),
            user_id,
        )
        return updated

    async def save_role(self, user_id: str, role: Role) -> Role:
        """Create or replace a role document as given."""
        await self._evaluator.require(user_id, Capability.MANAGE_ROLES, "save_role")
        _require_storable_name(role.name)
        await self._role_repo.save_role(role.name, role.to_document())
        return role

    async def duplicate_role(self, user_id: str, name: str) -> Role:
        """Copy a role to ``{name}_copy`` (overwriting an existing copy)."""
        await self._evaluator.require(
            user_id, Capability.MANAGE_ROLES, "duplicate_role"
        )
        source = await self.get_role(name)
        copy = Role(
            name=f"{name}_copy",
            permissions=source.permissions,
            category=source.category,
        )
        await self._role_repo.save_role(copy.name, copy.to_document())
        return copy

    async def delete_role(self, user_id: str, name: str) -> None:
        await self._evaluator.require(user_id, Capability.MANAGE_ROLES, "delete_role")
        await self._role_repo.delete_role(name)
        logger.info("Role %s deleted by %s", name, user_id)

    async def set_default_role(self, user_id: str, name: str) -> None:
        """Set the role applied to users without an assignment."""
        await self._evaluator.require(
            user_id, Capability.MANAGE_ROLES, "set_default_role"
        )
        await self.get_role(name)
        await self._access_config_repo.set_default_role(name)
