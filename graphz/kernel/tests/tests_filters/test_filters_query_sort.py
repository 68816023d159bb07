"""
GRAPHZ Filter Engine -- Free-Text Search and Sort Tests

Search covers name, alias, subject, description and tags, case-insensitive,
ANY-field match. Sort is stable; missing timestamps sort as the oldest.
"""

import pytest

from graphz.kernel.filters import apply_filters, filter_by_query, sort_records
from graphz.kernel.types import FilterState


def names(results):
    return [r.name for r in results]


# ============================================================================
# 1. Free-text search
# ============================================================================


@pytest.fixture
def searchable(make_record):
    return [
        make_record("Euler Path", "math", description="Walk every edge once", tags=["Graph"], days_old=1),
        make_record("Pendulum", "physics", alias="Harmonic Oscillator", description="Swings", days_old=2),
        make_record("Cell Cycle", "bio", description="Interphase and mitosis", days_old=3),
    ]


class TestQuery:
    @pytest.mark.parametrize(
        "query,expected",
        [
            ("EULER", ["Euler Path"]),
            ("oscillator", ["Pendulum"]),
            ("physics", ["Pendulum"]),
            ("mitosis", ["Cell Cycle"]),
            ("graph", ["Euler Path"]),
            ("  cycle  ", ["Cell Cycle"]),
        ],
    )
    def test_matches_any_field(self, searchable, now, query, expected):
        assert names(apply_filters(searchable, FilterState(query=query), now=now)) == expected

    def test_no_match(self, searchable, now):
        assert apply_filters(searchable, FilterState(query="zebra"), now=now) == ()

    @pytest.mark.parametrize("query", ["", "   ", "\t"])
    def test_blank_query_is_skipped(self, searchable, query):
        assert filter_by_query(searchable, query) == searchable

    def test_substring_inside_word(self, searchable, now):
        assert names(apply_filters(searchable, FilterState(query="ndul"), now=now)) == ["Pendulum"]


# ============================================================================
# 2. Sorting
# ============================================================================


class TestSort:
    def test_newest_and_oldest(self, make_record):
        records = [
            make_record("Mid", days_old=5),
            make_record("New", days_old=1),
            make_record("Old", days_old=9),
        ]
        assert names(sort_records(records, "newest")) == ["New", "Mid", "Old"]
        assert names(sort_records(records, "oldest")) == ["Old", "Mid", "New"]

    def test_missing_timestamp_sorts_as_oldest(self, make_record):
        records = [make_record("Undated"), make_record("Dated", days_old=1000)]
        assert names(sort_records(records, "newest")) == ["Dated", "Undated"]
        assert names(sort_records(records, "oldest")) == ["Undated", "Dated"]

    def test_equal_keys_keep_input_order(self, make_record):
        records = [
            make_record("First", views=4),
            make_record("Second", views=4),
            make_record("Third", views=4),
        ]
        assert names(sort_records(records, "mostViews")) == ["First", "Second", "Third"]
        assert names(sort_records(records, "leastViews")) == ["First", "Second", "Third"]
        assert names(sort_records(records, "newest")) == ["First", "Second", "Third"]

    def test_name_ascending(self, make_record):
        records = [make_record("Gamma"), make_record("Alpha"), make_record("Beta")]
        assert names(sort_records(records, "name")) == ["Alpha", "Beta", "Gamma"]

    def test_name_ignores_case(self, make_record):
        records = [make_record("Zeta"), make_record("alpha"), make_record("Beta")]
        assert names(sort_records(records, "name")) == ["alpha", "Beta", "Zeta"]

    def test_least_views(self, trees):
        assert names(sort_records(trees, "leastViews")) == ["Tree A", "Tree B"]

    def test_sort_does_not_mutate_input(self, make_record):
        records = [make_record("B", views=1), make_record("A", views=2)]
        sort_records(records, "mostViews")
        assert names(records) == ["B", "A"]
