"""Collection API schemas: schema view, queries, document writes, mutation results."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from app.application.dtos.mutation import MutationResult
from app.application.dtos.query import Page
from app.domain.entities.schema import CollectionSchema
from app.domain.field_types import render_hint
from app.shared.enums import NumberOperator, SortDirection


class FieldResponse(BaseModel):
    """One declared field with the widget to render it with."""

    name: str
    type: str
    render: str
    options: list[str] = Field(default_factory=list)
    validation: dict[str, Any] | None = None
    description: str | None = None
    order: int = 0


class SchemaResponse(BaseModel):
    """Response for GET /collections/{collection}/schema."""

    collection: str
    fields: list[FieldResponse]
    read_only: bool = False
    error: str | None = None

    @classmethod
    def from_schema(
        cls, schema: CollectionSchema, error: str | None = None
    ) -> SchemaResponse:
        return cls(
            collection=schema.collection,
            fields=[
                FieldResponse(
                    name=f.name,
                    type=f.type.value,
                    render=render_hint(f.type),
                    options=list(f.options),
                    validation=f.validation.to_dict() if f.validation else None,
                    description=f.description,
                    order=f.order,
                )
                for f in schema.fields
            ],
            read_only=error is not None,
            error=error,
        )


class CollectionListResponse(BaseModel):
    collections: list[str]


class QueryRequest(BaseModel):
    """Body for POST /collections/{collection}/query."""

    search: str = ""
    filters: dict[str, str | int | float | bool | None] = Field(default_factory=dict)
    operators: dict[str, NumberOperator] = Field(default_factory=dict)
    sort_field: str | None = None
    sort_direction: SortDirection | None = None
    page: int = Field(default=1, ge=1)
    page_size: int | None = Field(default=None, ge=1, le=500)


class PageResponse(BaseModel):
    """One page of documents; ``total`` counts the filtered result."""

    items: list[dict[str, Any]]
    page: int
    page_size: int
    total: int
    total_cached: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page) -> PageResponse:
        return cls(**page.to_dict())


class DocumentWriteRequest(BaseModel):
    """Raw editor values keyed by field name (strings, numbers or booleans)."""

    values: dict[str, Any] = Field(default_factory=dict)


class BulkEditRequest(BaseModel):
    document_ids: list[str] = Field(..., min_length=1)
    field: str = Field(..., min_length=1)
    value: Any = None


class BulkDeleteRequest(BaseModel):
    document_ids: list[str] = Field(..., min_length=1)


class SkippedRowResponse(BaseModel):
    line: int
    reason: str
    errors: list[dict[str, str]] = Field(default_factory=list)


class MutationResponse(BaseModel):
    """Committed mutation summary. Warnings carry audit failures."""

    action: str
    collection: str
    state: str
    document_ids: list[str]
    audit_entry_ids: list[str]
    succeeded: int
    failed: int
    skipped_rows: list[SkippedRowResponse] = Field(default_factory=list)
    warnings: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: MutationResult) -> MutationResponse:
        return cls(**result.to_dict())
