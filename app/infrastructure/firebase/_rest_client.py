"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
Any failed call surfaces as StoreException, including token refresh errors.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any

import httpx
from google.auth import exceptions as google_auth_exceptions

from app.domain.exceptions import StoreException
from app.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_document,
    document_id,
    encode_document,
    parse_timestamp,
    quote_field_path,
)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"
_LIST_PAGE_SIZE = 300


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(body, list) and body:
        body = body[0]
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return resp.reason_phrase


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
    params: dict | None = None,
    missing_ok: bool = True,
) -> Any:
    """Perform async HTTP request to Firestore REST API.

    404 returns None when ``missing_ok``; otherwise it raises like any other error.
    """
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    try:
        resp = await client.request(
            method, url, headers=headers, json=body, params=params
        )
    except httpx.HTTPError as e:
        raise StoreException(f"Firestore request failed: {e}") from e
    if resp.status_code == 404 and missing_ok:
        return None
    if resp.status_code not in (200, 204):
        raise StoreException(_error_message(resp), status_code=resp.status_code)
    if method == "DELETE":
        return {}
    raw = resp.content
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError as e:
        raise StoreException(
            f"Firestore returned a malformed response: {e}", status_code=resp.status_code
        ) from e


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return self._path.split("/")[-1]

    @property
    def path(self) -> str:
        return self._path

    async def set(self, data: dict[str, Any]) -> None:
        """Create or overwrite the document (PATCH with full replace)."""
        await self._client.request(
            f"{self._client.base_url}/{self._path}",
            method="PATCH",
            body=encode_document(data),
        )

    async def merge(self, data: dict[str, Any]) -> None:
        """Write only the given fields (PATCH with update mask); creates if missing."""
        await self._client.request(
            f"{self._client.base_url}/{self._path}",
            method="PATCH",
            body=encode_document(data),
            params={"updateMask.fieldPaths": [quote_field_path(k) for k in data]},
        )

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        out = await self._client.request(f"{self._client.base_url}/{self._path}")
        if not out:
            return None
        return DocumentSnapshot(self.id, decode_document(out))

    async def delete(self) -> None:
        """Delete the document. Idempotent if document is already missing (404)."""
        await self._client.request(
            f"{self._client.base_url}/{self._path}", method="DELETE"
        )


class DocumentSnapshot:
    """Snapshot of a document (id + data)."""

    def __init__(self, id_: str, data: dict):
        self.id = id_
        self._data = data

    def to_dict(self) -> dict:
        return self._data


_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
}

_DIRECTION_MAP: dict[str, str] = {
    "asc": "ASCENDING",
    "desc": "DESCENDING",
}


class _Query:
    """Fluent query builder for a collection; runs via runQuery.

    Multiple ``where`` calls are AND-ed (compositeFilter).
    """

    def __init__(self, client: FirestoreRESTClient, parent: str, collection_id: str):
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._filters: list[dict[str, Any]] = []
        self._order_by: list[dict[str, Any]] = []
        self._limit: int | None = None

    def where(self, field: str, op: str, value: Any) -> _Query:
        self._filters.append(
            {
                "fieldFilter": {
                    "field": {"fieldPath": quote_field_path(field)},
                    "op": _OP_MAP.get(op, op),
                    "value": _encode_value(value),
                }
            }
        )
        return self

    def order_by(self, field: str, direction: str = "ASCENDING") -> _Query:
        self._order_by.append(
            {
                "field": {"fieldPath": quote_field_path(field)},
                "direction": _DIRECTION_MAP.get(direction.lower(), direction),
            }
        )
        return self

    def limit(self, n: int) -> _Query:
        self._limit = n
        return self

    def to_structured_query(self) -> dict[str, Any]:
        structured: dict[str, Any] = {"from": [{"collectionId": self._collection_id}]}
        if len(self._filters) == 1:
            structured["where"] = self._filters[0]
        elif self._filters:
            structured["where"] = {
                "compositeFilter": {"op": "AND", "filters": list(self._filters)}
            }
        if self._order_by:
            structured["orderBy"] = list(self._order_by)
        if self._limit:
            structured["limit"] = self._limit
        return structured

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query and yield document snapshots."""
        resp = await self._client.request(
            f"{self._client.base_url}/{self._parent}:runQuery",
            method="POST",
            body={"structuredQuery": self.to_structured_query()},
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            if "document" not in item:
                continue
            doc = item["document"]
            yield DocumentSnapshot(document_id(doc), decode_document(doc))


class CollectionReference:
    """Reference to a collection (possibly nested); matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path.rstrip("/")

    @property
    def path(self) -> str:
        return self._path

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    def _query(self) -> _Query:
        parent, _, collection_id = self._path.rpartition("/")
        return _Query(self._client, parent, collection_id)

    def where(self, field: str, op: str, value: Any) -> _Query:
        """Start a query with a filter. Chain .where/.order_by/.limit, then .stream()."""
        return self._query().where(field, op, value)

    def order_by(self, field: str, direction: str = "ASCENDING") -> _Query:
        return self._query().order_by(field, direction)

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """List every document in the collection, following page tokens."""
        url = f"{self._client.base_url}/{self._path}"
        page_token: str | None = None
        while True:
            params: dict[str, Any] = {"pageSize": _LIST_PAGE_SIZE}
            if page_token:
                params["pageToken"] = page_token
            out = await self._client.request(url, params=params)
            if not out:
                return
            for doc in out.get("documents", []):
                yield DocumentSnapshot(document_id(doc), decode_document(doc))
            page_token = out.get("nextPageToken")
            if not page_token:
                return


class WriteBatch:
    """Atomic multi-document write committed through ``documents:commit``.

    Either every write applies or none does.
    """

    def __init__(self, client: FirestoreRESTClient):
        self._client = client
        self._writes: list[dict[str, Any]] = []

    def __len__(self) -> int:
        return len(self._writes)

    def set(
        self,
        ref: DocumentReference,
        data: dict[str, Any],
        *,
        server_timestamps: tuple[str, ...] = (),
    ) -> WriteBatch:
        """Create or fully replace a document.

        ``server_timestamps`` names fields set to the commit time by the store.
        """
        write: dict[str, Any] = {
            "update": {"name": self._client.document_name(ref.path), **encode_document(data)}
        }
        if server_timestamps:
            write["updateTransforms"] = [
                {"fieldPath": quote_field_path(f), "setToServerValue": "REQUEST_TIME"}
                for f in server_timestamps
            ]
        self._writes.append(write)
        return self

    def update(self, ref: DocumentReference, data: dict[str, Any]) -> WriteBatch:
        """Write only the given fields of an existing document."""
        self._writes.append(
            {
                "update": {
                    "name": self._client.document_name(ref.path),
                    **encode_document(data),
                },
                "updateMask": {"fieldPaths": [quote_field_path(k) for k in data]},
                "currentDocument": {"exists": True},
            }
        )
        return self

    def delete(self, ref: DocumentReference) -> WriteBatch:
        self._writes.append({"delete": self._client.document_name(ref.path)})
        return self

    async def commit(self) -> list[dict[str, Any]]:
        """Commit all writes; return the ``writeResults`` list (one per write)."""
        if not self._writes:
            return []
        out = await self._client.request(
            f"{self._client.base_url}/{self._client.database}/documents:commit",
            method="POST",
            body={"writes": self._writes},
            missing_ok=False,
        )
        return list((out or {}).get("writeResults", []))


def transform_timestamp(write_result: dict[str, Any], index: int = 0):
    """Timestamp produced by the ``index``-th server transform of a write, if any."""
    results = write_result.get("transformResults") or []
    if index < len(results) and "timestampValue" in results[index]:
        return parse_timestamp(results[index]["timestampValue"])
    if write_result.get("updateTime"):
        return parse_timestamp(write_result["updateTime"])
    return None


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = _BASE,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.database = f"projects/{project_id}/databases/(default)"
        self.prefix = f"{self.database}/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str | None:
        """Return a valid access token; refreshes in thread pool to avoid blocking.

        Without credentials (emulator, tests) no token is sent.
        """
        if self._credentials is None:
            return None
        try:
            return await asyncio.to_thread(_get_access_token, self._credentials)
        except google_auth_exceptions.GoogleAuthError as e:
            raise StoreException(f"Firestore credentials could not be refreshed: {e}") from e

    async def request(
        self,
        url: str,
        method: str = "GET",
        body: dict | None = None,
        params: dict | None = None,
        missing_ok: bool = True,
    ) -> Any:
        return await _request_async(
            self._http,
            url,
            method=method,
            body=body,
            access_token=await self.get_token(),
            params=params,
            missing_ok=missing_ok,
        )

    def document_name(self, path: str) -> str:
        """Full resource name of a document path relative to the database."""
        return path if path.startswith("projects/") else f"{self.prefix}/{path}"

    def collection(self, collection_path: str) -> CollectionReference:
        return CollectionReference(self, f"{self.prefix}/{collection_path.strip('/')}")

    def batch(self) -> WriteBatch:
        return WriteBatch(self)
