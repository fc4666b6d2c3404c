"""Changelog API tests (admin-only audit view)."""

from httpx import AsyncClient

API = "/api/v1/changelog"


async def _make_changes(client: AsyncClient, admin_headers, editor_headers) -> None:
    await client.patch(
        "/api/v1/collections/products/documents/p1",
        json={"values": {"price": "11"}},
        headers=editor_headers,
    )
    await client.delete("/api/v1/collections/products/documents/p2", headers=admin_headers)


async def test_changelog_is_admin_only(client: AsyncClient, editor_headers) -> None:
    response = await client.get(API, headers=editor_headers)
    assert response.status_code == 403


async def test_changelog_lists_newest_first(
    client: AsyncClient, admin_headers, editor_headers
) -> None:
    await _make_changes(client, admin_headers, editor_headers)
    response = await client.get(API, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [e["action"] for e in data["items"]] == ["delete", "update"]


async def test_changelog_filters(client: AsyncClient, admin_headers, editor_headers) -> None:
    await _make_changes(client, admin_headers, editor_headers)

    by_action = await client.get(API, params={"action": "update"}, headers=admin_headers)
    assert [e["document_id"] for e in by_action.json()["items"]] == ["p1"]

    by_user = await client.get(
        API, params={"user_email": admin_headers["X-User-Email"]}, headers=admin_headers
    )
    assert [e["action"] for e in by_user.json()["items"]] == ["delete"]

    by_search = await client.get(API, params={"search": "rocket"}, headers=admin_headers)
    assert [e["document_id"] for e in by_search.json()["items"]] == ["p2"]

    ascending = await client.get(API, params={"ascending": "true"}, headers=admin_headers)
    assert [e["action"] for e in ascending.json()["items"]] == ["update", "delete"]
