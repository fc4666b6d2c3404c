"""Permission evaluator: user -> role -> capability set, plus yes/no checks.

Client-side gating is advisory; the store's own access rules are the real
boundary. Checks are re-run before every server-bound mutation.
"""

from __future__ import annotations

from app.application.interfaces.repositories import (
    IAccessConfigRepository,
    IRoleRepository,
)
from app.domain.entities.role import (
    ADMIN_ROLE,
    Role,
    RolePermissions,
    UserPermissions,
)
from app.domain.enums import Capability
from app.domain.exceptions import AuthorizationException, StoreException
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

UNKNOWN_ROLE = "unknown"


class PermissionEvaluator:
    """Resolves a user's role and its permissions from explicit repositories."""

    def __init__(
        self,
        role_repo: IRoleRepository,
        access_config_repo: IAccessConfigRepository,
        default_role: str = "viewer",
    ) -> None:
        self.role_repo = role_repo
        self.access_config_repo = access_config_repo
        self.default_role = default_role

    async def resolve_role(self, user_id: str) -> str:
        """Return the user's assigned role, else the configured default role."""
        assigned = await self.access_config_repo.get_user_role(user_id)
        if assigned:
            return assigned
        configured = await self.access_config_repo.get_default_role()
        return configured or self.default_role

    @staticmethod
    def permissions_for(role_name: str, role_data: dict | None) -> RolePermissions:
        """Permissions for a role document.

        ``admin`` always gets every capability, even when its document is
        missing or corrupt. Any other missing role gets none.
        """
        if role_name == ADMIN_ROLE:
            return RolePermissions.all_granted()
        if role_data is None:
            return RolePermissions()
        return Role.from_document(role_name, role_data).permissions

    async def get_user_permissions(self, user_id: str) -> UserPermissions:
        """Resolve the user's permissions. Store failures resolve to deny-all."""
        role_name = UNKNOWN_ROLE
        try:
            role_name = await self.resolve_role(user_id)
            role_data = await self.role_repo.get_role(role_name)
        except StoreException:
            logger.exception("Failed to load role permissions for user %s", user_id)
            return UserPermissions(
                role=role_name,
                permissions=self.permissions_for(role_name, None),
            )
        return UserPermissions(
            role=role_name,
            permissions=self.permissions_for(role_name, role_data),
        )

    async def check(self, user_id: str, capability: Capability) -> bool:
        """Return True if the user's role grants ``capability``."""
        permissions = await self.get_user_permissions(user_id)
        return permissions.has(capability)

    async def require(
        self, user_id: str, capability: Capability, action: str
    ) -> UserPermissions:
        """Return the user's permissions or raise AuthorizationException."""
        permissions = await self.get_user_permissions(user_id)
        if not permissions.has(capability):
            logger.warning(
                "Permission denied: user %s (role %s) lacks %s for %s",
                user_id,
                permissions.role,
                capability.value,
                action,
            )
            raise AuthorizationException(
                capability=capability.value, action=action, role=permissions.role
            )
        return permissions

    async def require_admin(self, user_id: str, action: str) -> UserPermissions:
        """Raise AuthorizationException unless the user's role is ``admin``."""
        permissions = await self.get_user_permissions(user_id)
        if not permissions.is_admin:
            raise AuthorizationException(
                action=action,
                role=permissions.role,
                message="Only administrators can perform this action",
            )
        return permissions
