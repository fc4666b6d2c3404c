"""Query engine tests: search, filters, sort, pagination over a snapshot."""

import pytest

from app.application.dtos.query import QueryParams, SortState
from app.application.services.query_engine import (
    filter_documents,
    matches_search,
    paginate,
    run_query,
    sort_documents,
)
from app.domain.entities.document import CollectionDocument
from app.domain.entities.schema import CollectionSchema
from app.shared.enums import NumberOperator, SortDirection

SCHEMA = CollectionSchema.from_field_dicts(
    "products",
    [
        {"name": "name", "type": "text", "order": 0},
        {"name": "price", "type": "number", "order": 1},
        {"name": "status", "type": "select", "options": ["active", "archived"], "order": 2},
        {"name": "featured", "type": "boolean", "order": 3},
    ],
)

DOCS = [
    CollectionDocument("a", {"name": "Anvil", "price": 10, "status": "active", "featured": True}),
    CollectionDocument("b", {"name": "Rocket", "price": 250.5, "status": "archived", "featured": False}),
    CollectionDocument("c", {"name": "bird seed", "price": 3, "status": "active", "featured": False}),
    CollectionDocument("d", {"name": "Mystery", "status": "active"}),
    CollectionDocument("e", {"name": "Broken price", "price": "n/a", "status": "archived"}),
]


def _ids(documents) -> list[str]:
    return [d.id for d in documents]


def test_search_is_case_insensitive_and_skips_id() -> None:
    assert matches_search(DOCS[0], "anv")
    assert matches_search(DOCS[1], "250.5")
    assert matches_search(DOCS[0], "TRUE")
    assert not matches_search(CollectionDocument("xyz", {"name": "q"}), "xyz")


def test_empty_search_matches_everything() -> None:
    assert _ids(filter_documents(DOCS, SCHEMA, search="")) == ["a", "b", "c", "d", "e"]


def test_text_filter_is_substring() -> None:
    assert _ids(filter_documents(DOCS, SCHEMA, filters={"name": "IR"})) == ["c"]


def test_select_filter_is_exact() -> None:
    assert _ids(filter_documents(DOCS, SCHEMA, filters={"status": "archived"})) == ["b", "e"]


def test_boolean_filter() -> None:
    assert _ids(filter_documents(DOCS, SCHEMA, filters={"featured": "true"})) == ["a"]
    assert _ids(filter_documents(DOCS, SCHEMA, filters={"featured": False})) == ["b", "c"]


@pytest.mark.parametrize(
    "operator,expected",
    [
        (NumberOperator.EQ, ["a"]),
        (NumberOperator.GT, ["b"]),
        (NumberOperator.LT, ["c"]),
        (NumberOperator.GTE, ["a", "b"]),
        (NumberOperator.LTE, ["a", "c"]),
    ],
)
def test_number_filter_operators(operator, expected) -> None:
    out = filter_documents(
        DOCS, SCHEMA, filters={"price": "10"}, operators={"price": operator}
    )
    assert _ids(out) == expected


def test_unparseable_number_filter_is_inactive() -> None:
    assert len(filter_documents(DOCS, SCHEMA, filters={"price": "abc"})) == len(DOCS)


def test_inactive_and_undeclared_filters_are_ignored() -> None:
    out = filter_documents(DOCS, SCHEMA, filters={"name": "", "status": None, "nope": "x"})
    assert len(out) == len(DOCS)


def test_search_and_filters_are_anded() -> None:
    out = filter_documents(DOCS, SCHEMA, search="r", filters={"status": "archived"})
    assert _ids(out) == ["b", "e"]
    out = filter_documents(DOCS, SCHEMA, search="rocket", filters={"status": "active"})
    assert out == []


def test_sort_number_ascending_missing_last() -> None:
    out = sort_documents(DOCS, SCHEMA, SortState("price", SortDirection.ASC))
    assert _ids(out) == ["c", "a", "b", "d", "e"]


def test_sort_number_descending_missing_still_last() -> None:
    out = sort_documents(DOCS, SCHEMA, SortState("price", SortDirection.DESC))
    assert _ids(out) == ["b", "a", "c", "d", "e"]


def test_sort_text_is_case_sensitive_display_order() -> None:
    out = sort_documents(DOCS, SCHEMA, SortState("name", SortDirection.ASC))
    assert _ids(out) == ["a", "e", "d", "b", "c"]


def test_sort_is_stable_for_ties() -> None:
    out = sort_documents(DOCS, SCHEMA, SortState("status", SortDirection.ASC))
    assert _ids(out) == ["a", "c", "d", "b", "e"]


def test_inactive_sort_keeps_order() -> None:
    assert _ids(sort_documents(DOCS, SCHEMA, SortState())) == _ids(DOCS)
    assert _ids(sort_documents(DOCS, SCHEMA, SortState("nope", SortDirection.ASC))) == _ids(DOCS)


def test_sort_state_cycles_asc_desc_none() -> None:
    state = SortState().cycle("price")
    assert state == SortState("price", SortDirection.ASC)
    state = state.cycle("price")
    assert state == SortState("price", SortDirection.DESC)
    assert not state.cycle("price").is_active
    assert state.cycle("name") == SortState("name", SortDirection.ASC)


def test_paginate_slices_and_counts() -> None:
    page = paginate(DOCS, page=2, page_size=2)
    assert _ids(page.items) == ["c", "d"]
    assert page.total == 5
    assert page.total_pages == 3


def test_paginate_clamps_page_and_handles_overflow() -> None:
    assert paginate(DOCS, page=0, page_size=2).page == 1
    assert paginate(DOCS, page=9, page_size=2).items == ()


def test_paginate_rejects_zero_page_size() -> None:
    with pytest.raises(ValueError):
        paginate(DOCS, page=1, page_size=0)


def test_run_query_counts_filtered_result() -> None:
    params = QueryParams(
        filters={"status": "active"},
        sort=SortState("price", SortDirection.DESC),
        page=1,
        page_size=2,
    )
    page = run_query(DOCS, SCHEMA, params)
    assert _ids(page.items) == ["a", "c"]
    assert page.total == 3
    assert page.total_cached == 5
    assert page.total_pages == 2
    assert page.to_dict()["items"][0] == {**DOCS[0].data, "id": "a"}


def test_run_query_does_not_mutate_input() -> None:
    documents = list(DOCS)
    run_query(documents, SCHEMA, QueryParams(sort=SortState("price", SortDirection.DESC)))
    assert _ids(documents) == _ids(DOCS)


@pytest.mark.parametrize(
    "sort",
    [SortState(), SortState("price", SortDirection.ASC), SortState("name", SortDirection.DESC)],
)
@pytest.mark.parametrize("page,page_size", [(1, 20), (3, 1), (0, 2)])
def test_search_without_matches_gives_empty_page(sort, page, page_size) -> None:
    params = QueryParams(search="no such product", sort=sort, page=page, page_size=page_size)
    result = run_query(DOCS, SCHEMA, params)
    assert result.items == ()
    assert result.total == 0
    assert result.total_cached == len(DOCS)


def test_three_sort_toggles_restore_original_order() -> None:
    state = SortState()
    orders = []
    for _ in range(3):
        state = state.cycle("price")
        orders.append(_ids(run_query(DOCS, SCHEMA, QueryParams(sort=state)).items))
    assert orders[0] != _ids(DOCS)
    assert orders[1] != orders[0]
    assert orders[2] == _ids(DOCS)
