"""Mutation coordinator: create, update, delete, bulk edit, bulk delete, CSV import.

Each call walks one state machine:
idle -> validating -> permission-checking -> writing -> auditing -> committed,
leaving for ``rejected`` at the first failing stage. A later stage never
starts if an earlier one failed. Writes are one atomic batch attempted once.
Audit failures after a committed write are warnings, not rejections.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from app.application.dtos.batch import BatchOperation
from app.application.dtos.identity import Identity
from app.application.dtos.mutation import MutationResult, RowSkipped
from app.application.dtos.validation import FieldError
from app.application.interfaces.repositories import IDocumentStore
from app.application.services.audit_log import AuditLogService
from app.application.services.coercion import coerce_document, coerce_value
from app.application.services.csv_bridge import ID_COLUMN, parse_csv
from app.application.services.permission_evaluator import PermissionEvaluator
from app.application.services.validation import (
    validate_document,
    validate_value,
)
from app.domain.entities.document import CollectionDocument, CollectionSnapshot
from app.domain.entities.schema import CollectionSchema
from app.domain.enums import AuditAction, Capability
from app.domain.exceptions import (
    AuditWriteException,
    DocAdminException,
    ResourceNotFoundException,
    ValidationException,
    WriteException,
)
from app.shared.enums import MutationState
from app.shared.telemetry.logging import get_logger
from app.shared.utils.generators import is_valid_document_id

logger = get_logger(__name__)

MSG_UNKNOWN_FIELD = "Field is not declared for this collection"
MSG_VALIDATION_FAILED = "Validation failed"


@dataclass(frozen=True)
class _PlannedAudit:
    action: AuditAction
    document_id: str
    before: dict[str, Any]
    after: dict[str, Any]


class _Rejected(Exception):
    """Internal control flow: stop the pipeline with ``error``."""

    def __init__(
        self, error: DocAdminException, field_errors: Sequence[FieldError] = ()
    ) -> None:
        super().__init__(error.message)
        self.error = error
        self.field_errors = list(field_errors)


def _validation_failure(errors: Sequence[FieldError]) -> _Rejected:
    return _Rejected(
        ValidationException(
            MSG_VALIDATION_FAILED, errors=[e.to_dict() for e in errors]
        ),
        errors,
    )


def _undeclared(schema: CollectionSchema, raw_values: dict[str, Any]) -> list[FieldError]:
    declared = set(schema.field_names)
    return [
        FieldError(name, MSG_UNKNOWN_FIELD)
        for name in raw_values
        if name != ID_COLUMN and name not in declared
    ]


class MutationCoordinator:
    """Runs mutations for one signed-in user against one document store."""

    def __init__(
        self,
        store: IDocumentStore,
        audit_log: AuditLogService,
        evaluator: PermissionEvaluator,
        identity: Identity,
    ) -> None:
        self.store = store
        self.audit_log = audit_log
        self.evaluator = evaluator
        self.identity = identity

    @staticmethod
    def rejected(action: str, collection: str, error: DocAdminException) -> MutationResult:
        """A result rejected before validation started (e.g. read-only collection)."""
        result = MutationResult(action=action, collection=collection)
        result.error = error
        result.enter(MutationState.REJECTED)
        return result

    async def create(
        self, schema: CollectionSchema, raw_values: dict[str, Any]
    ) -> MutationResult:
        """Create one document from raw input; missing fields take type defaults."""
        collection = schema.collection
        result = MutationResult(action="create", collection=collection)
        try:
            result.enter(MutationState.VALIDATING)
            errors = _undeclared(schema, raw_values)
            data = coerce_document(schema.fields, raw_values, fill_missing=True)
            errors.extend(validate_document(data, schema.fields).errors)
            if errors:
                raise _validation_failure(errors)

            await self._check_permission(result, Capability.EDIT)

            document_id = self.store.new_document_id(collection)
            await self._write(result, [BatchOperation.set(document_id, data)])
            result.document_ids.append(document_id)
        except _Rejected as r:
            return self._reject(result, r)

        await self._audit(
            result,
            [
                _PlannedAudit(
                    AuditAction.CREATE, document_id, {}, {**data, "id": document_id}
                )
            ],
        )
        return result

    async def update(
        self,
        schema: CollectionSchema,
        document_id: str,
        raw_values: dict[str, Any],
        snapshot: CollectionSnapshot | None = None,
    ) -> MutationResult:
        """Write only the submitted fields of an existing document."""
        collection = schema.collection
        result = MutationResult(action="update", collection=collection)
        try:
            result.enter(MutationState.VALIDATING)
            current = await self._current(collection, document_id, snapshot)
            errors = _undeclared(schema, raw_values)
            data = coerce_document(schema.fields, raw_values, fill_missing=False)
            for name, value in data.items():
                error = validate_value(schema.field(name), value)
                if error:
                    errors.append(error)
            if errors:
                raise _validation_failure(errors)
            if not data:
                raise _Rejected(
                    ValidationException("No declared fields to update")
                )

            await self._check_permission(result, Capability.EDIT)
            await self._write(result, [BatchOperation.update(document_id, data)])
            result.document_ids.append(document_id)
        except _Rejected as r:
            return self._reject(result, r)

        before = {name: current.get(name) for name in data}
        await self._audit(
            result, [_PlannedAudit(AuditAction.UPDATE, document_id, before, data)]
        )
        return result

    async def delete(
        self,
        collection: str,
        document_id: str,
        snapshot: CollectionSnapshot | None = None,
    ) -> MutationResult:
        """Delete one document. The audit keeps the full prior document."""
        result = MutationResult(action="delete", collection=collection)
        try:
            result.enter(MutationState.VALIDATING)
            current = await self._current(collection, document_id, snapshot)
            await self._check_permission(result, Capability.DELETE)
            await self._write(result, [BatchOperation.delete(document_id)])
            result.document_ids.append(document_id)
        except _Rejected as r:
            return self._reject(result, r)

        await self._audit(
            result,
            [
                _PlannedAudit(
                    AuditAction.DELETE,
                    document_id,
                    current.as_dict(),
                    {"id": document_id},
                )
            ],
        )
        return result

    async def bulk_edit(
        self,
        schema: CollectionSchema,
        snapshot: CollectionSnapshot,
        document_ids: Sequence[str],
        field_name: str,
        raw_value: Any,
    ) -> MutationResult:
        """Set one field to one coerced value on every selected document.

        The shared value is validated once. Every id must be in the snapshot.
        One audit entry is written per document.
        """
        collection = schema.collection
        result = MutationResult(action="bulk_edit", collection=collection)
        try:
            result.enter(MutationState.VALIDATING)
            field = schema.field(field_name)
            if field is None:
                raise _validation_failure([FieldError(field_name, MSG_UNKNOWN_FIELD)])
            targets = self._selected(snapshot, document_ids)
            value = coerce_value(field, raw_value)
            error = validate_value(field, value)
            if error:
                raise _validation_failure([error])

            await self._check_permission(result, Capability.EDIT)
            await self._write(
                result,
                [BatchOperation.update(d.id, {field_name: value}) for d in targets],
            )
            result.document_ids.extend(d.id for d in targets)
        except _Rejected as r:
            return self._reject(result, r)

        await self._audit(
            result,
            [
                _PlannedAudit(
                    AuditAction.UPDATE,
                    d.id,
                    {field_name: d.get(field_name)},
                    {field_name: value},
                )
                for d in targets
            ],
        )
        return result

    async def bulk_delete(
        self, snapshot: CollectionSnapshot, document_ids: Sequence[str]
    ) -> MutationResult:
        """Delete every selected document in one batch."""
        result = MutationResult(action="bulk_delete", collection=snapshot.collection)
        try:
            result.enter(MutationState.VALIDATING)
            targets = self._selected(snapshot, document_ids)
            await self._check_permission(result, Capability.DELETE)
            await self._write(result, [BatchOperation.delete(d.id) for d in targets])
            result.document_ids.extend(d.id for d in targets)
        except _Rejected as r:
            return self._reject(result, r)

        await self._audit(
            result,
            [
                _PlannedAudit(AuditAction.DELETE, d.id, d.as_dict(), {"id": d.id})
                for d in targets
            ],
        )
        return result

    async def import_csv(
        self,
        schema: CollectionSchema,
        snapshot: CollectionSnapshot,
        text: str,
    ) -> MutationResult:
        """Import CSV rows in one batch; bad rows are skipped, not fatal.

        Empty id creates with a generated id, a cached id updates the declared
        fields, any other id creates a document with that id.
        """
        collection = schema.collection
        result = MutationResult(action="import", collection=collection)
        operations: list[BatchOperation] = []
        planned: list[_PlannedAudit] = []
        try:
            result.enter(MutationState.VALIDATING)
            try:
                parsed = parse_csv(text, schema)
            except DocAdminException as e:
                raise _Rejected(e) from e
            result.skipped_rows.extend(parsed.skipped)

            seen: set[str] = set()
            for row in parsed.rows:
                values = {k: v for k, v in row.values.items() if k != ID_COLUMN}
                data = coerce_document(schema.fields, values, fill_missing=True)
                validation = validate_document(data, schema.fields)
                if not validation.is_valid:
                    result.skipped_rows.append(
                        RowSkipped(row.line, MSG_VALIDATION_FAILED, validation.errors)
                    )
                    continue

                document_id = row.document_id
                if document_id and not is_valid_document_id(document_id):
                    result.skipped_rows.append(
                        RowSkipped(row.line, f"Invalid document id: {document_id}")
                    )
                    continue
                if document_id in seen:
                    result.skipped_rows.append(
                        RowSkipped(row.line, f"Duplicate document id: {document_id}")
                    )
                    continue

                existing = snapshot.get(document_id) if document_id else None
                if existing is not None:
                    operations.append(BatchOperation.update(document_id, data))
                    before = {name: existing.get(name) for name in data}
                    planned.append(
                        _PlannedAudit(AuditAction.UPDATE, document_id, before, data)
                    )
                else:
                    document_id = document_id or self.store.new_document_id(collection)
                    operations.append(BatchOperation.set(document_id, data))
                    planned.append(
                        _PlannedAudit(
                            AuditAction.CREATE,
                            document_id,
                            {},
                            {**data, "id": document_id},
                        )
                    )
                seen.add(document_id)

            await self._check_permission(result, Capability.EDIT)
            if operations:
                await self._write(result, operations)
            result.document_ids.extend(op.document_id for op in operations)
        except _Rejected as r:
            return self._reject(result, r)

        logger.info(
            "CSV import into %s: %d written, %d skipped",
            collection,
            result.succeeded_count,
            result.failed_count,
        )
        await self._audit(result, planned)
        return result

    async def _current(
        self,
        collection: str,
        document_id: str,
        snapshot: CollectionSnapshot | None,
    ) -> CollectionDocument:
        current = snapshot.get(document_id) if snapshot is not None else None
        if current is None:
            try:
                current = await self.store.get_document(collection, document_id)
            except DocAdminException as e:
                raise _Rejected(e) from e
        if current is None:
            raise _Rejected(ResourceNotFoundException("document", document_id))
        return current

    @staticmethod
    def _selected(
        snapshot: CollectionSnapshot, document_ids: Sequence[str]
    ) -> list[CollectionDocument]:
        if not document_ids:
            raise _Rejected(ValidationException("No documents selected"))
        targets: list[CollectionDocument] = []
        for document_id in dict.fromkeys(document_ids):
            document = snapshot.get(document_id)
            if document is None:
                raise _Rejected(ResourceNotFoundException("document", document_id))
            targets.append(document)
        return targets

    async def _check_permission(
        self, result: MutationResult, capability: Capability
    ) -> None:
        result.enter(MutationState.PERMISSION_CHECKING)
        try:
            await self.evaluator.require(
                self.identity.user_id, capability, result.action
            )
        except DocAdminException as e:
            raise _Rejected(e) from e

    async def _write(
        self, result: MutationResult, operations: list[BatchOperation]
    ) -> None:
        result.enter(MutationState.WRITING)
        try:
            await self.store.commit(result.collection, operations)
        except DocAdminException as e:
            logger.error(
                "Batch write of %d operations to %s failed: %s",
                len(operations),
                result.collection,
                e.message,
            )
            raise _Rejected(WriteException(result.collection, e.message)) from e

    async def _audit(self, result: MutationResult, planned: list[_PlannedAudit]) -> None:
        result.enter(MutationState.AUDITING)
        for item in planned:
            try:
                entry = await self.audit_log.append(
                    self.identity,
                    item.action,
                    result.collection,
                    item.document_id,
                    item.before,
                    item.after,
                )
            except AuditWriteException as e:
                result.warnings.append(e)
                continue
            result.audit_entries.append(entry)
        result.enter(MutationState.COMMITTED)
        logger.info(
            "%s committed on %s by %s (%d documents)",
            result.action,
            result.collection,
            self.identity.user_id,
            result.succeeded_count,
        )

    @staticmethod
    def _reject(result: MutationResult, rejection: _Rejected) -> MutationResult:
        result.error = rejection.error
        result.field_errors.extend(rejection.field_errors)
        result.enter(MutationState.REJECTED)
        logger.warning(
            "%s on %s rejected: %s",
            result.action,
            result.collection,
            rejection.error.error_code,
        )
        return result
