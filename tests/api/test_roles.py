"""Roles and current-user permission API tests."""

from httpx import AsyncClient

from app.infrastructure.memory.store import MemoryDatabase

API = "/api/v1/roles"


async def test_list_roles(client: AsyncClient, viewer_headers) -> None:
    response = await client.get(API, headers=viewer_headers)
    assert response.status_code == 200
    assert [r["name"] for r in response.json()] == ["admin", "editor", "viewer"]
    assert response.json()[1]["permissions"]["canEdit"] is True


async def test_add_role(client: AsyncClient, admin_headers, memory_db: MemoryDatabase) -> None:
    response = await client.post(API, json={"name": " Auditor "}, headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["name"] == "auditor"
    assert "auditor" in memory_db.roles

    again = await client.post(API, json={"name": "auditor"}, headers=admin_headers)
    assert again.status_code == 409


async def test_add_role_requires_manage_roles(client: AsyncClient, editor_headers) -> None:
    response = await client.post(API, json={"name": "auditor"}, headers=editor_headers)
    assert response.status_code == 403


async def test_toggle_and_save_role(client: AsyncClient, admin_headers) -> None:
    toggled = await client.post(
        f"{API}/viewer/toggle", json={"capability": "canEdit"}, headers=admin_headers
    )
    assert toggled.status_code == 200
    assert toggled.json()["permissions"]["canEdit"] is True

    saved = await client.put(
        f"{API}/viewer",
        json={"permissions": {"canView": True}, "category": "readonly"},
        headers=admin_headers,
    )
    assert saved.status_code == 200
    assert saved.json()["permissions"]["canEdit"] is False
    assert saved.json()["category"] == "readonly"


async def test_toggle_unknown_capability_422(client: AsyncClient, admin_headers) -> None:
    response = await client.post(
        f"{API}/viewer/toggle", json={"capability": "canFly"}, headers=admin_headers
    )
    assert response.status_code == 422


async def test_duplicate_and_delete_role(
    client: AsyncClient, admin_headers, memory_db: MemoryDatabase
) -> None:
    copy = await client.post(f"{API}/editor/duplicate", headers=admin_headers)
    assert copy.status_code == 201
    assert copy.json()["name"] == "editor_copy"

    deleted = await client.delete(f"{API}/editor_copy", headers=admin_headers)
    assert deleted.status_code == 204
    assert "editor_copy" not in memory_db.roles


async def test_set_default_role_changes_resolution(
    client: AsyncClient, admin_headers, memory_db: MemoryDatabase
) -> None:
    response = await client.put(f"{API}/default", json={"role": "editor"}, headers=admin_headers)
    assert response.status_code == 204
    assert memory_db.default_role == "editor"

    me = await client.get(
        "/api/v1/me/permissions", headers={"X-User-Id": "newcomer"}
    )
    assert me.json()["role"] == "editor"
    assert me.json()["email"] == "unknown@example.com"


async def test_my_permissions(client: AsyncClient, editor_headers) -> None:
    response = await client.get("/api/v1/me/permissions", headers=editor_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "u-editor"
    assert data["role"] == "editor"
    assert data["permissions"] == {
        "canView": True,
        "canEdit": True,
        "canDelete": False,
        "canManageRoles": False,
    }


async def test_add_role_with_slash_is_422(client: AsyncClient, admin_headers) -> None:
    response = await client.post(API, json={"name": "a/b"}, headers=admin_headers)
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"
