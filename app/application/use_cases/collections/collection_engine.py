"""Collection engine: the schema, cached snapshot and mutations of one collection.

The engine is bound to one collection at a time. Every fetch is tagged
with a request generation; a response whose generation is no longer
current (a newer fetch started or the collection changed) is discarded.
Switching collections drops the cache instead of merging it.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from app.application.dtos.identity import Identity
from app.application.dtos.mutation import MutationResult
from app.application.dtos.query import Page, QueryParams
from app.application.interfaces.repositories import IDocumentStore, ISchemaRepository
from app.application.services.audit_log import AuditLogService
from app.application.services.csv_bridge import export_csv, export_filename
from app.application.services.permission_evaluator import PermissionEvaluator
from app.application.services.query_engine import run_query
from app.application.use_cases.collections.mutation_coordinator import (
    MutationCoordinator,
)
from app.domain.entities.audit import AuditEntry
from app.domain.entities.document import CollectionSnapshot
from app.domain.entities.schema import (
    USERS_COLLECTION,
    USERS_SCHEMA,
    CollectionSchema,
)
from app.domain.enums import Capability
from app.domain.exceptions import (
    DocAdminException,
    SchemaLoadException,
    StoreException,
)
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class CollectionEngine:
    """Owns the cached snapshot of the bound collection."""

    def __init__(
        self,
        collection: str,
        store: IDocumentStore,
        schema_repo: ISchemaRepository,
        audit_log: AuditLogService,
        evaluator: PermissionEvaluator,
        identity: Identity,
        page_size: int = 20,
    ) -> None:
        self.store = store
        self.schema_repo = schema_repo
        self.audit_log = audit_log
        self.evaluator = evaluator
        self.identity = identity
        self.page_size = page_size
        self.coordinator = MutationCoordinator(store, audit_log, evaluator, identity)

        self._collection = collection
        self._generation = 0
        self._schema = CollectionSchema.empty(collection)
        self._schema_error: SchemaLoadException | None = None
        self._snapshot: CollectionSnapshot | None = None

    @property
    def collection(self) -> str:
        return self._collection

    @property
    def schema(self) -> CollectionSchema:
        return self._schema

    @property
    def schema_error(self) -> SchemaLoadException | None:
        return self._schema_error

    @property
    def read_only(self) -> bool:
        """True while the schema failed to load; mutations are rejected."""
        return self._schema_error is not None

    @property
    def snapshot(self) -> CollectionSnapshot | None:
        return self._snapshot

    @property
    def generation(self) -> int:
        return self._generation

    def switch_collection(self, collection: str) -> None:
        """Bind to another collection. In-flight fetches become stale."""
        if collection == self._collection:
            return
        logger.debug("Switching collection %s -> %s", self._collection, collection)
        self._collection = collection
        self._generation += 1
        self._schema = CollectionSchema.empty(collection)
        self._schema_error = None
        self._snapshot = None

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _is_current(self, generation: int, collection: str) -> bool:
        return generation == self._generation and collection == self._collection

    async def load_schema(self) -> CollectionSchema:
        """Fetch and parse the schema. On failure the engine becomes read-only.

        The users collection always uses the built-in users schema.
        """
        collection = self._collection
        if collection == USERS_COLLECTION:
            self._schema, self._schema_error = USERS_SCHEMA, None
            return self._schema

        generation = self._generation
        error: SchemaLoadException | None = None
        schema = CollectionSchema.empty(collection)
        try:
            raw = await self.schema_repo.get_fields(collection)
            if raw is None:
                raise SchemaLoadException(collection, "schema document not found")
            schema = CollectionSchema.from_field_dicts(collection, raw)
        except SchemaLoadException as e:
            error = e
        except StoreException as e:
            error = SchemaLoadException(collection, e.message)

        if not self._is_current(generation, collection):
            logger.debug("Discarding stale schema response for %s", collection)
            return self._schema
        if error is not None:
            logger.warning("Collection %s is read-only: %s", collection, error.message)
        self._schema, self._schema_error = schema, error
        return schema

    async def refresh(self) -> CollectionSnapshot | None:
        """Refetch the full document set.

        Returns the new snapshot, or None when the response was stale and
        discarded. Store errors propagate and leave the cache untouched.
        """
        collection = self._collection
        generation = self._next_generation()
        documents = await self.store.list_documents(collection)
        if not self._is_current(generation, collection):
            logger.debug(
                "Discarding stale fetch of %s (generation %d, current %d)",
                collection,
                generation,
                self._generation,
            )
            return None
        self._snapshot = CollectionSnapshot(
            collection=collection,
            documents=tuple(documents),
            generation=generation,
            fetched_at=utc_now(),
        )
        logger.debug("Fetched %d documents from %s", len(documents), collection)
        return self._snapshot

    async def load(self) -> CollectionSnapshot | None:
        """Load the schema then the documents of the bound collection."""
        await self.load_schema()
        return await self.refresh()

    async def _ensure_loaded(self) -> CollectionSnapshot:
        if self._snapshot is None or self._snapshot.collection != self._collection:
            await self.load()
        if self._snapshot is None:
            return CollectionSnapshot(self._collection, (), self._generation, utc_now())
        return self._snapshot

    def query(self, params: QueryParams | None = None) -> Page:
        """Derive a page from the cache (empty when nothing is cached)."""
        params = params or QueryParams(page_size=self.page_size)
        documents = self._snapshot.documents if self._snapshot else ()
        return run_query(documents, self._schema, params)

    async def view(self, params: QueryParams | None = None) -> Page:
        """Query the cache after requiring canView, loading it if needed."""
        await self.evaluator.require(self.identity.user_id, Capability.VIEW, "view")
        await self._ensure_loaded()
        return self.query(params)

    async def export(self) -> tuple[str, str]:
        """Return ``(filename, csv_text)`` of the whole cached collection."""
        await self.evaluator.require(self.identity.user_id, Capability.VIEW, "export")
        snapshot = await self._ensure_loaded()
        return export_filename(self._collection), export_csv(
            snapshot.documents, self._schema
        )

    async def document_history(self, document_id: str) -> list[AuditEntry]:
        await self.evaluator.require(self.identity.user_id, Capability.VIEW, "history")
        return await self.audit_log.document_history(self._collection, document_id)

    async def _after_mutation(self, result: MutationResult) -> MutationResult:
        if not result.committed:
            return result
        try:
            await self.refresh()
        except DocAdminException as e:
            logger.warning("Refresh after %s failed: %s", result.action, e.message)
            result.warnings.append(e)
        return result

    def _read_only_result(self, action: str) -> MutationResult | None:
        if self._schema_error is None:
            return None
        return MutationCoordinator.rejected(action, self._collection, self._schema_error)

    async def create(self, raw_values: dict[str, Any]) -> MutationResult:
        await self._ensure_loaded()
        if rejected := self._read_only_result("create"):
            return rejected
        return await self._after_mutation(
            await self.coordinator.create(self._schema, raw_values)
        )

    async def update(self, document_id: str, raw_values: dict[str, Any]) -> MutationResult:
        snapshot = await self._ensure_loaded()
        if rejected := self._read_only_result("update"):
            return rejected
        return await self._after_mutation(
            await self.coordinator.update(self._schema, document_id, raw_values, snapshot)
        )

    async def delete(self, document_id: str) -> MutationResult:
        snapshot = await self._ensure_loaded()
        if rejected := self._read_only_result("delete"):
            return rejected
        return await self._after_mutation(
            await self.coordinator.delete(self._collection, document_id, snapshot)
        )

    async def bulk_edit(
        self, document_ids: Sequence[str], field_name: str, raw_value: Any
    ) -> MutationResult:
        snapshot = await self._ensure_loaded()
        if rejected := self._read_only_result("bulk_edit"):
            return rejected
        return await self._after_mutation(
            await self.coordinator.bulk_edit(
                self._schema, snapshot, document_ids, field_name, raw_value
            )
        )

    async def bulk_delete(self, document_ids: Sequence[str]) -> MutationResult:
        snapshot = await self._ensure_loaded()
        if rejected := self._read_only_result("bulk_delete"):
            return rejected
        return await self._after_mutation(
            await self.coordinator.bulk_delete(snapshot, document_ids)
        )

    async def import_csv(self, text: str) -> MutationResult:
        snapshot = await self._ensure_loaded()
        if rejected := self._read_only_result("import"):
            return rejected
        return await self._after_mutation(
            await self.coordinator.import_csv(self._schema, snapshot, text)
        )
