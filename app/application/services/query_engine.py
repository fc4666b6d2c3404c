"""In-memory search, filter, sort and pagination over a cached snapshot.

Every function here is pure: it takes a sequence of documents and returns
a new sequence (or page). Nothing mutates the snapshot or fetches.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any, assert_never

from app.application.dtos.query import FilterValue, Page, QueryParams, SortState
from app.application.services.coercion import display_value
from app.domain.entities.document import CollectionDocument
from app.domain.entities.schema import CollectionSchema, FieldDef
from app.domain.field_types import FieldType, is_numeric
from app.shared.enums import NumberOperator, SortDirection

Documents = Sequence[CollectionDocument]


def _as_number(value: Any) -> float | None:
    """Numeric view of a stored value, or None when it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def _is_active_filter(value: FilterValue) -> bool:
    return value is not None and value != ""


def matches_search(document: CollectionDocument, search: str) -> bool:
    """Case-insensitive substring match against any non-id value."""
    if not search:
        return True
    needle = search.lower()
    for key, value in document.data.items():
        if key == "id" or value is None:
            continue
        if needle in display_value(value).lower():
            return True
    return False


def search_documents(documents: Documents, search: str) -> list[CollectionDocument]:
    return [d for d in documents if matches_search(d, search)]


def _compare_number(
    doc_value: float, filter_value: float, operator: NumberOperator
) -> bool:
    match operator:
        case NumberOperator.EQ:
            return doc_value == filter_value
        case NumberOperator.GT:
            return doc_value > filter_value
        case NumberOperator.LT:
            return doc_value < filter_value
        case NumberOperator.GTE:
            return doc_value >= filter_value
        case NumberOperator.LTE:
            return doc_value <= filter_value
        case _:
            assert_never(operator)


def matches_filter(
    document: CollectionDocument,
    field: FieldDef,
    filter_value: FilterValue,
    operator: NumberOperator = NumberOperator.EQ,
) -> bool:
    """Apply one active filter. Inactive filters (None or "") always match."""
    if not _is_active_filter(filter_value):
        return True
    doc_value = document.get(field.name)
    match field.type:
        case FieldType.NUMBER:
            wanted = _as_number(filter_value)
            if wanted is None:
                return True
            actual = _as_number(doc_value)
            if actual is None:
                return False
            return _compare_number(actual, wanted, operator)
        case FieldType.BOOLEAN:
            return display_value(doc_value) == display_value(filter_value)
        case FieldType.SELECT:
            return doc_value == filter_value
        case FieldType.TEXT | FieldType.DATE | FieldType.EMAIL | FieldType.URL:
            return display_value(filter_value).lower() in display_value(doc_value).lower()
        case _:
            assert_never(field.type)


def filter_documents(
    documents: Documents,
    schema: CollectionSchema,
    search: str = "",
    filters: dict[str, FilterValue] | None = None,
    operators: dict[str, NumberOperator] | None = None,
) -> list[CollectionDocument]:
    """Keep documents matching the search AND every active filter.

    Filters on fields the schema does not declare are ignored.
    """
    active: list[tuple[FieldDef, FilterValue, NumberOperator]] = []
    for name, value in (filters or {}).items():
        field = schema.field(name)
        if field is None or not _is_active_filter(value):
            continue
        operator = (operators or {}).get(name, NumberOperator.EQ)
        active.append((field, value, operator))

    out: list[CollectionDocument] = []
    for document in documents:
        if not matches_search(document, search):
            continue
        if all(matches_filter(document, f, v, op) for f, v, op in active):
            out.append(document)
    return out


def sort_documents(
    documents: Documents, schema: CollectionSchema, sort: SortState
) -> list[CollectionDocument]:
    """Stable single-field sort. Missing values go last in both directions.

    Number fields compare numerically (non-numeric values count as missing);
    every other type compares the display string, case-sensitively.
    """
    if not sort.is_active:
        return list(documents)
    field = schema.field(sort.field or "")
    if field is None:
        return list(documents)

    numeric = is_numeric(field.type)
    present: list[tuple[Any, CollectionDocument]] = []
    missing: list[CollectionDocument] = []
    for document in documents:
        value = document.get(field.name)
        key = _as_number(value) if numeric else (
            None if value is None else display_value(value)
        )
        if key is None:
            missing.append(document)
        else:
            present.append((key, document))

    descending = sort.direction is SortDirection.DESC
    present.sort(key=lambda pair: pair[0], reverse=descending)
    return [d for _, d in present] + missing


def paginate(
    documents: Documents, page: int, page_size: int, total_cached: int | None = None
) -> Page:
    """Slice ``documents[(page-1)*size : page*size]``; page is clamped to >= 1."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    page = max(page, 1)
    start = (page - 1) * page_size
    return Page(
        items=tuple(documents[start : start + page_size]),
        page=page,
        page_size=page_size,
        total=len(documents),
        total_cached=len(documents) if total_cached is None else total_cached,
    )


def run_query(
    documents: Documents, schema: CollectionSchema, params: QueryParams
) -> Page:
    """Search + filter, then sort, then paginate over the filtered result."""
    filtered = filter_documents(
        documents, schema, params.search, params.filters, params.operators
    )
    ordered = sort_documents(filtered, schema, params.sort)
    return paginate(ordered, params.page, params.page_size, total_cached=len(documents))
