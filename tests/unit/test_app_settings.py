"""AppSettingsService tests: title fallback, trimming and the manage-roles gate."""

from unittest.mock import AsyncMock

import pytest

from app.application.services.app_settings import DEFAULT_APP_TITLE, AppSettingsService
from app.application.services.permission_evaluator import PermissionEvaluator
from app.domain.exceptions import (
    AuthorizationException,
    StoreException,
    ValidationException,
)
from app.infrastructure.memory.store import MemoryDatabase
from app.infrastructure.store_factory import StoreRepositories
from tests.conftest import ADMIN, EDITOR


@pytest.fixture
def app_settings(repos: StoreRepositories, evaluator: PermissionEvaluator) -> AppSettingsService:
    return AppSettingsService(repos.access_config, evaluator)


async def test_title_defaults_when_unset(app_settings: AppSettingsService) -> None:
    assert await app_settings.get_app_title() == DEFAULT_APP_TITLE


async def test_set_title_trims_and_persists(
    app_settings: AppSettingsService, memory_db: MemoryDatabase
) -> None:
    assert await app_settings.set_app_title(ADMIN.user_id, "  Acme Admin ") == "Acme Admin"
    assert memory_db.app_title == "Acme Admin"
    assert await app_settings.get_app_title() == "Acme Admin"


async def test_set_title_requires_manage_roles(
    app_settings: AppSettingsService, memory_db: MemoryDatabase
) -> None:
    with pytest.raises(AuthorizationException):
        await app_settings.set_app_title(EDITOR.user_id, "Mine now")
    assert memory_db.app_title is None


@pytest.mark.parametrize("title", ["   ", "x" * 101])
async def test_set_title_rejects_blank_or_long(app_settings: AppSettingsService, title: str) -> None:
    with pytest.raises(ValidationException):
        await app_settings.set_app_title(ADMIN.user_id, title)


async def test_unreadable_title_falls_back_to_default(evaluator: PermissionEvaluator) -> None:
    access_config = AsyncMock()
    access_config.get_app_title = AsyncMock(side_effect=StoreException("unavailable", 503))
    service = AppSettingsService(access_config, evaluator)
    assert await service.get_app_title() == DEFAULT_APP_TITLE
