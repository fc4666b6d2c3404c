"""DTOs for the query engine (search, filters, sort state, page)."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from app.domain.entities.document import CollectionDocument
from app.shared.enums import NumberOperator, SortDirection

FilterValue = str | int | float | bool | None


@dataclass(frozen=True)
class SortState:
    """Single active sort. ``field`` and ``direction`` are both None when unsorted."""

    field: str | None = None
    direction: SortDirection | None = None

    @property
    def is_active(self) -> bool:
        return self.field is not None and self.direction is not None

    def cycle(self, field_name: str) -> SortState:
        """Advance the header toggle for ``field_name``: asc -> desc -> none.

        Selecting a different field starts again at ascending.
        """
        if self.field != field_name:
            return SortState(field_name, SortDirection.ASC)
        if self.direction is SortDirection.ASC:
            return SortState(field_name, SortDirection.DESC)
        return SortState()


@dataclass(frozen=True)
class QueryParams:
    """Everything that derives the displayed page from the cached snapshot."""

    search: str = ""
    filters: dict[str, FilterValue] = field(default_factory=dict)
    operators: dict[str, NumberOperator] = field(default_factory=dict)
    sort: SortState = field(default_factory=SortState)
    page: int = 1
    page_size: int = 20


@dataclass(frozen=True)
class Page:
    """One displayed page. Page count is computed over the filtered result."""

    items: tuple[CollectionDocument, ...]
    page: int
    page_size: int
    total: int
    total_cached: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [d.as_dict() for d in self.items],
            "page": self.page,
            "page_size": self.page_size,
            "total": self.total,
            "total_cached": self.total_cached,
            "total_pages": self.total_pages,
        }
