"""Application-wide display settings stored in ``app_config/global``."""

from __future__ import annotations

from app.application.interfaces.repositories import IAccessConfigRepository
from app.application.services.permission_evaluator import PermissionEvaluator
from app.domain.enums import Capability
from app.domain.exceptions import DocAdminException, ValidationException
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

DEFAULT_APP_TITLE = "Firestore Admin Panel"
MAX_APP_TITLE_LENGTH = 100


class AppSettingsService:
    """Reads the app title for everyone; changing it requires canManageRoles."""

    def __init__(
        self,
        access_config_repo: IAccessConfigRepository,
        evaluator: PermissionEvaluator,
    ) -> None:
        self._access_config_repo = access_config_repo
        self._evaluator = evaluator

    async def get_app_title(self) -> str:
        """Stored title, or DEFAULT_APP_TITLE when unset or unreadable."""
        try:
            title = await self._access_config_repo.get_app_title()
        except DocAdminException as e:
            logger.warning("Could not load app title, using default: %s", e.message)
            return DEFAULT_APP_TITLE
        return title or DEFAULT_APP_TITLE

    async def set_app_title(self, user_id: str, title: str) -> str:
        """Trim and store the title.

        Raises:
            AuthorizationException: The user lacks canManageRoles.
            ValidationException: Title is empty or too long after trimming.
        """
        await self._evaluator.require(user_id, Capability.MANAGE_ROLES, "set_app_title")
        cleaned = title.strip()
        if not cleaned:
            raise ValidationException("App title cannot be empty", field="title")
        if len(cleaned) > MAX_APP_TITLE_LENGTH:
            raise ValidationException(
                f"App title must be at most {MAX_APP_TITLE_LENGTH} characters",
                field="title",
            )
        await self._access_config_repo.set_app_title(cleaned)
        logger.info("App title set to %r by %s", cleaned, user_id)
        return cleaned
