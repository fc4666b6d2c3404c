"""Collection stats use case tests."""

import pytest

from app.application.services.permission_evaluator import PermissionEvaluator
from app.application.use_cases.analytics import GetCollectionStatsUseCase
from app.domain.exceptions import AuthorizationException
from app.infrastructure.memory.store import MemoryDatabase
from app.infrastructure.store_factory import StoreRepositories
from tests.conftest import VIEWER


@pytest.fixture
def use_case(repos: StoreRepositories, evaluator: PermissionEvaluator) -> GetCollectionStatsUseCase:
    return GetCollectionStatsUseCase(repos.schemas, repos.documents, evaluator)


async def test_counts_every_collection_with_a_schema(
    use_case: GetCollectionStatsUseCase, memory_db: MemoryDatabase
) -> None:
    memory_db.schemas["orders"] = [{"name": "total", "type": "number"}]
    summary = await use_case.get_collection_stats(VIEWER.user_id)
    assert [(c.name, c.count) for c in summary.collections] == [
        ("users", 3),
        ("products", 3),
        ("orders", 0),
    ]
    assert summary.total_documents == 6


async def test_requires_view(use_case: GetCollectionStatsUseCase, memory_db: MemoryDatabase) -> None:
    memory_db.roles["viewer"]["permissions"]["canView"] = False
    with pytest.raises(AuthorizationException):
        await use_case.get_collection_stats(VIEWER.user_id)
