"""App title and collection stats API tests."""

from httpx import AsyncClient

from app.infrastructure.memory.store import MemoryDatabase


async def test_get_default_title(client: AsyncClient, viewer_headers) -> None:
    response = await client.get("/api/v1/settings/title", headers=viewer_headers)
    assert response.status_code == 200
    assert response.json() == {"title": "Firestore Admin Panel"}


async def test_admin_sets_title(
    client: AsyncClient, admin_headers, viewer_headers, memory_db: MemoryDatabase
) -> None:
    response = await client.put(
        "/api/v1/settings/title", json={"title": " Acme "}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json() == {"title": "Acme"}
    again = await client.get("/api/v1/settings/title", headers=viewer_headers)
    assert again.json()["title"] == "Acme"


async def test_editor_cannot_set_title(client: AsyncClient, editor_headers) -> None:
    response = await client.put(
        "/api/v1/settings/title", json={"title": "Nope"}, headers=editor_headers
    )
    assert response.status_code == 403


async def test_collection_stats(client: AsyncClient, viewer_headers) -> None:
    response = await client.get("/api/v1/analytics/collections", headers=viewer_headers)
    assert response.status_code == 200
    assert response.json() == {
        "collections": [{"name": "users", "count": 3}, {"name": "products", "count": 3}],
        "total_documents": 6,
    }
