"""Collections API: schema, query, create/update/delete, bulk edit/delete, CSV, history.

Every route is bound to one collection through the ``{collection}`` path
parameter; the engine loads its schema and snapshot per request.
"""

from typing import Annotated

from fastapi import APIRouter, File, Query, Response, UploadFile

from app.api.v1.dependencies import CurrentIdentity, Engine, Evaluator, Repositories
from app.application.dtos.query import QueryParams, SortState
from app.core.config import get_settings
from app.domain.enums import Capability
from app.domain.exceptions import ValidationException
from app.schemas.audit_log import AuditEntryListResponse, AuditEntryResponse
from app.schemas.collection import (
    BulkDeleteRequest,
    BulkEditRequest,
    CollectionListResponse,
    DocumentWriteRequest,
    MutationResponse,
    PageResponse,
    QueryRequest,
    SchemaResponse,
)
from app.shared.enums import SortDirection

router = APIRouter()


@router.get("", response_model=CollectionListResponse)
async def list_collections(
    repos: Repositories,
    identity: CurrentIdentity,
    evaluator: Evaluator,
) -> CollectionListResponse:
    """List collections that have a schema (users is always included)."""
    await evaluator.require(identity.user_id, Capability.VIEW, "list_collections")
    return CollectionListResponse(collections=await repos.schemas.list_collections())


@router.get("/{collection}/schema", response_model=SchemaResponse)
async def get_schema(engine: Engine) -> SchemaResponse:
    """Field definitions in display order; read_only when the schema failed to load."""
    await engine.load_schema()
    error = engine.schema_error.message if engine.schema_error else None
    return SchemaResponse.from_schema(engine.schema, error)


@router.get("/{collection}/documents", response_model=PageResponse)
async def list_documents(
    engine: Engine,
    search: str = "",
    sort_field: str | None = None,
    sort_direction: SortDirection | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int | None, Query(ge=1, le=500)] = None,
) -> PageResponse:
    """Search, sort and paginate the collection (use POST /query for filters)."""
    params = QueryParams(
        search=search,
        sort=SortState(sort_field, sort_direction) if sort_field and sort_direction else SortState(),
        page=page,
        page_size=page_size or get_settings().page_size,
    )
    return PageResponse.from_page(await engine.view(params))


@router.post("/{collection}/query", response_model=PageResponse)
async def query_documents(engine: Engine, body: QueryRequest) -> PageResponse:
    """Search, filter (with number operators), sort and paginate the collection."""
    sort = (
        SortState(body.sort_field, body.sort_direction)
        if body.sort_field and body.sort_direction
        else SortState()
    )
    params = QueryParams(
        search=body.search,
        filters=dict(body.filters),
        operators=dict(body.operators),
        sort=sort,
        page=body.page,
        page_size=body.page_size or get_settings().page_size,
    )
    return PageResponse.from_page(await engine.view(params))


@router.post("/{collection}/documents", response_model=MutationResponse, status_code=201)
async def create_document(engine: Engine, body: DocumentWriteRequest) -> MutationResponse:
    """Create a document; missing fields take their type's default."""
    result = await engine.create(body.values)
    result.raise_for_error()
    return MutationResponse.from_result(result)


@router.patch("/{collection}/documents/{document_id}", response_model=MutationResponse)
async def update_document(
    engine: Engine, document_id: str, body: DocumentWriteRequest
) -> MutationResponse:
    """Write only the submitted fields of an existing document."""
    result = await engine.update(document_id, body.values)
    result.raise_for_error()
    return MutationResponse.from_result(result)


@router.delete("/{collection}/documents/{document_id}", response_model=MutationResponse)
async def delete_document(engine: Engine, document_id: str) -> MutationResponse:
    result = await engine.delete(document_id)
    result.raise_for_error()
    return MutationResponse.from_result(result)


@router.post("/{collection}/bulk-edit", response_model=MutationResponse)
async def bulk_edit(engine: Engine, body: BulkEditRequest) -> MutationResponse:
    """Set one field to one value on every selected document (one atomic batch)."""
    result = await engine.bulk_edit(body.document_ids, body.field, body.value)
    result.raise_for_error()
    return MutationResponse.from_result(result)


@router.post("/{collection}/bulk-delete", response_model=MutationResponse)
async def bulk_delete(engine: Engine, body: BulkDeleteRequest) -> MutationResponse:
    result = await engine.bulk_delete(body.document_ids)
    result.raise_for_error()
    return MutationResponse.from_result(result)


@router.get("/{collection}/export")
async def export_csv(engine: Engine) -> Response:
    """Download the whole collection as CSV."""
    filename, text = await engine.export()
    return Response(
        content=text,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/{collection}/import", response_model=MutationResponse)
async def import_csv(
    engine: Engine, file: Annotated[UploadFile, File(...)]
) -> MutationResponse:
    """Import a CSV file; rows failing coercion or validation are skipped."""
    max_bytes = get_settings().max_import_bytes
    raw = await file.read(max_bytes + 1)
    if len(raw) > max_bytes:
        raise ValidationException(
            f"CSV file exceeds {max_bytes} bytes", field="file"
        )
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValidationException("CSV file must be UTF-8 encoded", field="file") from e
    result = await engine.import_csv(text)
    result.raise_for_error()
    return MutationResponse.from_result(result)


@router.get(
    "/{collection}/documents/{document_id}/history",
    response_model=AuditEntryListResponse,
)
async def document_history(engine: Engine, document_id: str) -> AuditEntryListResponse:
    """Audit entries for one document, newest first."""
    entries = await engine.document_history(document_id)
    return AuditEntryListResponse(
        items=[AuditEntryResponse.from_entry(e) for e in entries], total=len(entries)
    )
