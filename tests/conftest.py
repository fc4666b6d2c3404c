"""Pytest configuration and fixtures for docadmin.

Uses app.main:app for HTTP tests against the in-memory store backend.
Each test gets a fresh MemoryDatabase seeded with roles, users and one
``products`` collection. All imports use app.*.
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

os.environ["STORE_BACKEND"] = "memory"

from app.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.application.dtos.identity import Identity  # noqa: E402
from app.application.services.audit_log import AuditLogService  # noqa: E402
from app.application.services.permission_evaluator import (  # noqa: E402
    PermissionEvaluator,
)
from app.domain.entities.schema import CollectionSchema  # noqa: E402
from app.infrastructure.memory.store import MemoryDatabase  # noqa: E402
from app.infrastructure.store_factory import (  # noqa: E402
    StoreFactory,
    StoreRepositories,
)
from app.main import app  # noqa: E402

ADMIN = Identity(user_id="u-admin", email="admin@example.com")
EDITOR = Identity(user_id="u-editor", email="editor@example.com")
VIEWER = Identity(user_id="u-viewer", email="viewer@example.com")

PRODUCT_FIELDS = [
    {
        "name": "name",
        "type": "text",
        "order": 0,
        "validation": {"required": True, "max": 40},
    },
    {"name": "price", "type": "number", "order": 1, "validation": {"min": 0}},
    {
        "name": "status",
        "type": "select",
        "order": 2,
        "options": ["active", "archived"],
    },
    {"name": "featured", "type": "boolean", "order": 3},
    {"name": "contact", "type": "email", "order": 4},
]


def seed_database() -> MemoryDatabase:
    """Roles admin/editor/viewer, three users, and a small products collection."""
    db = MemoryDatabase()
    db.roles = {
        "admin": {
            "permissions": {
                "canView": True,
                "canEdit": True,
                "canDelete": True,
                "canManageRoles": True,
            },
            "category": "system",
        },
        "editor": {
            "permissions": {
                "canView": True,
                "canEdit": True,
                "canDelete": False,
                "canManageRoles": False,
            },
            "category": "system",
        },
        "viewer": {
            "permissions": {
                "canView": True,
                "canEdit": False,
                "canDelete": False,
                "canManageRoles": False,
            },
            "category": "system",
        },
    }
    db.collection("users").update(
        {
            ADMIN.user_id: {"name": "Ada", "email": ADMIN.email, "role": "admin"},
            EDITOR.user_id: {"name": "Eddie", "email": EDITOR.email, "role": "editor"},
            VIEWER.user_id: {"name": "Vic", "email": VIEWER.email, "role": "viewer"},
        }
    )
    db.schemas["products"] = [dict(f) for f in PRODUCT_FIELDS]
    db.collection("products").update(
        {
            "p1": {
                "name": "Anvil",
                "price": 10,
                "status": "active",
                "featured": True,
                "contact": "sales@acme.test",
            },
            "p2": {
                "name": "Rocket, large",
                "price": 250.5,
                "status": "archived",
                "featured": False,
                "contact": "",
            },
            "p3": {
                "name": "Bird seed",
                "price": 3,
                "status": "active",
                "featured": False,
                "contact": "",
                "legacy_sku": "BS-01",
            },
        }
    )
    return db


@pytest.fixture
def memory_db() -> MemoryDatabase:
    return seed_database()


@pytest.fixture
def repos(memory_db: MemoryDatabase) -> StoreRepositories:
    return StoreFactory.create_repositories(get_settings(), memory_db=memory_db)


@pytest.fixture
def evaluator(repos: StoreRepositories) -> PermissionEvaluator:
    return PermissionEvaluator(repos.roles, repos.access_config, default_role="viewer")


@pytest.fixture
def audit_log(repos: StoreRepositories) -> AuditLogService:
    return AuditLogService(repos.audit_log)


@pytest.fixture
def products_schema(memory_db: MemoryDatabase) -> CollectionSchema:
    return CollectionSchema.from_field_dicts("products", memory_db.schemas["products"])


@pytest.fixture
async def client(memory_db: MemoryDatabase) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI), bound to a fresh store."""
    app.state.memory_db = memory_db
    app.state.repositories = StoreFactory.create_repositories(
        get_settings(), memory_db=memory_db
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.repositories = None
    app.state.memory_db = None


def _headers(identity: Identity) -> dict[str, str]:
    return {"X-User-Id": identity.user_id, "X-User-Email": identity.email}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return _headers(ADMIN)


@pytest.fixture
def editor_headers() -> dict[str, str]:
    return _headers(EDITOR)


@pytest.fixture
def viewer_headers() -> dict[str, str]:
    return _headers(VIEWER)
