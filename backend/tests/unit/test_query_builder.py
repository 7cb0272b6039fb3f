import re
from typing import Any

import pytest

from club_registry.domain.clubs.models import ActivityDayHouse, ClubSortableField, ClubTable
from club_registry.domain.clubs.schemas import QueryableClub
from club_registry.domain.common.query_builder import (
    QueryBuilder,
    build_update,
    escape_like,
    from_envelope,
    resolve_page,
)
from club_registry.domain.common.schemas import (
    FilterConfig,
    PaginationConfig,
    RequestEnvelope,
    SortingConfig,
)
from club_registry.domain.join_requests.models import ClubRequestTable

CLUBS = ClubTable.spec


def _placeholders(query: str) -> list[int]:
    return [int(number) for number in re.findall(r"\$(\d+)", query)]


def test_bare_query_orders_by_primary_key_and_uses_default_page():
    query, params = QueryBuilder(CLUBS).build()

    assert query.startswith(CLUBS.select)
    assert "WHERE" not in query
    assert query.endswith("ORDER BY clubs.id ASC LIMIT $1 OFFSET $2")
    assert params == [50, 0]


def test_filters_compose_with_increasing_placeholders():
    builder = QueryBuilder(CLUBS)
    builder.filter_by(QueryableClub(name_th="หมากรุก", house=ActivityDayHouse.FELIS, map_location=3))
    builder.search("chess")
    query, params = builder.paginate(2, 10).build()

    numbers = _placeholders(query)
    assert numbers == list(range(1, len(params) + 1))
    # three equality filters, four ILIKE columns, then LIMIT/OFFSET
    assert params[:3] == ["หมากรุก", "felis", 3]
    assert params[3:7] == ["%chess%"] * 4
    assert params[7:] == [10, 10]
    assert query.count(" AND ") == 3
    assert "(organizations.name_th ILIKE $4 OR organizations.name_en ILIKE $5" in query


def test_unset_filter_fields_add_no_predicate():
    builder = QueryBuilder(CLUBS).filter_by(QueryableClub())
    assert builder.predicate_count == 0


def test_search_escapes_like_wildcards():
    builder = QueryBuilder(CLUBS).search("50%_off")
    _, params = builder.build()
    assert params[0] == "%50\\%\\_off%"
    assert escape_like("a\\b") == "a\\\\b"


def test_blank_search_is_ignored():
    assert QueryBuilder(CLUBS).search("   ").predicate_count == 0


def test_search_without_text_columns_is_ignored():
    assert QueryBuilder(ClubRequestTable.spec).search("anything").predicate_count == 0


def test_sort_deduplicates_and_appends_primary_key():
    query, _ = (
        QueryBuilder(CLUBS)
        .order_by([ClubSortableField.NAME_TH, ClubSortableField.NAME_TH, ClubSortableField.HOUSE], ascending=False)
        .build()
    )
    assert "ORDER BY organizations.name_th DESC, clubs.house DESC, clubs.id DESC" in query


def test_sorting_by_primary_key_is_not_repeated():
    query, _ = QueryBuilder(CLUBS).order_by([ClubSortableField.ID]).build()
    assert "ORDER BY clubs.id ASC LIMIT" in query


def test_count_query_shares_predicates_without_paging():
    builder = QueryBuilder(CLUBS).where_equals("clubs.map_location", 4).paginate(3, 5)
    query, params = builder.build_count()
    assert query == f"SELECT COUNT(*) FROM {CLUBS.source} WHERE clubs.map_location = $1"
    assert params == [4]


@pytest.mark.parametrize(
    "pagination, expected",
    [
        (None, (1, 50)),
        (PaginationConfig(p=3), (3, 50)),
        (PaginationConfig(p=2, size=10), (2, 10)),
        (PaginationConfig(p=1, size=5000), (1, 200)),
    ],
)
def test_resolve_page(pagination, expected):
    assert resolve_page(pagination, default_size=50, max_size=200) == expected


def test_from_envelope_applies_scope_before_search():
    envelope = RequestEnvelope[Any, QueryableClub, ClubSortableField](
        filter=FilterConfig[QueryableClub](data=QueryableClub(house="sciurus"), q="art"),
        sorting=SortingConfig[ClubSortableField](by=[ClubSortableField.NAME_EN]),
        pagination=PaginationConfig(p=2, size=20),
    )
    builder = from_envelope(CLUBS, envelope, extra_predicates=[("clubs.map_location", 9)])
    query, params = builder.build()

    assert params[:2] == ["sciurus", 9]
    assert params[2:6] == ["%art%"] * 4
    assert params[-2:] == [20, 20]
    assert _placeholders(query) == list(range(1, len(params) + 1))
    assert "ORDER BY organizations.name_en ASC, clubs.id ASC" in query


def test_build_update_only_touches_supplied_columns():
    assert build_update("clubs", {}, key_column="id", key=1) is None

    query, params = build_update(
        "clubs",
        {"house": ActivityDayHouse.CYPRINUS, "map_location": 8},
        key_column="id",
        key="club-id",
    )
    assert query == "UPDATE clubs SET house = $1, map_location = $2 WHERE id = $3"
    assert params == ["cyprinus", 8, "club-id"]
