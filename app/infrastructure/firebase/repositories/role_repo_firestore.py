"""Firestore-backed role and access-config repositories."""

from __future__ import annotations

from typing import Any

from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from app.infrastructure.firebase.collections import (
    COLLECTION_ROLES,
    COLLECTION_USERS,
    DOCUMENT_APP_CONFIG,
    FIELD_APP_TITLE,
    FIELD_DEFAULT_ROLE,
    FIELD_USER_ROLE,
)


class FirestoreRoleRepository:
    """Role documents at ``roles/{name}`` (implements IRoleRepository)."""

    def __init__(self, client: FirestoreRESTClient, path: str = COLLECTION_ROLES) -> None:
        self._coll = client.collection(path)

    async def get_role(self, name: str) -> dict[str, Any] | None:
        doc = await self._coll.document(name).get()
        return doc.to_dict() if doc else None

    async def list_roles(self) -> dict[str, dict[str, Any]]:
        return {doc.id: doc.to_dict() async for doc in self._coll.stream()}

    async def save_role(self, name: str, data: dict[str, Any]) -> None:
        await self._coll.document(name).set(data)

    async def delete_role(self, name: str) -> None:
        await self._coll.document(name).delete()


class FirestoreAccessConfigRepository:
    """User role assignments and ``app_config/global`` settings (IAccessConfigRepository)."""

    def __init__(
        self,
        client: FirestoreRESTClient,
        users_path: str = COLLECTION_USERS,
        app_config_document: str = DOCUMENT_APP_CONFIG,
    ) -> None:
        self._users = client.collection(users_path)
        config_collection, _, config_id = app_config_document.rpartition("/")
        self._config = client.collection(config_collection).document(config_id)

    async def get_user_role(self, user_id: str) -> str | None:
        doc = await self._users.document(user_id).get()
        if doc is None:
            return None
        role = doc.to_dict().get(FIELD_USER_ROLE)
        return role if isinstance(role, str) and role else None

    async def _config_value(self, field_name: str) -> str | None:
        doc = await self._config.get()
        if doc is None:
            return None
        value = doc.to_dict().get(field_name)
        return value if isinstance(value, str) and value else None

    async def get_default_role(self) -> str | None:
        return await self._config_value(FIELD_DEFAULT_ROLE)

    async def set_default_role(self, role: str) -> None:
        await self._config.merge({FIELD_DEFAULT_ROLE: role})

    async def get_app_title(self) -> str | None:
        return await self._config_value(FIELD_APP_TITLE)

    async def set_app_title(self, title: str) -> None:
        await self._config.merge({FIELD_APP_TITLE: title})
