"""Tests for typed, stable ordering."""

from datetime import date, datetime, timezone

from listkit.domain.models.query import SortDirection
from listkit.domain.services.ordering import compare_values, field_comparator, stable_sort
from listkit.application.services.record_strategy import default_accessor


def test_numbers_compare_numerically():
    assert compare_values(2, 10) < 0
    assert compare_values(10.5, 2) > 0
    assert compare_values(3, 3.0) == 0


def test_iso_strings_compare_chronologically():
    assert compare_values("2020-11-15", "2021-03-01") < 0
    assert compare_values("2021-03-01T10:00:00Z", "2021-03-01T09:00:00Z") > 0


def test_naive_and_aware_dates_are_comparable():
    aware = datetime(2021, 1, 1, 12, tzinfo=timezone.utc)
    assert compare_values(date(2021, 1, 1), aware) < 0
    assert compare_values("2021-01-01T12:00:00", aware) == 0


def test_text_compares_as_string():
    assert compare_values("apple", "banana") < 0
    assert compare_values("Banana", "apple") < 0


def test_none_sorts_last_ascending():
    assert compare_values(None, 1) > 0
    assert compare_values("z", None) < 0
    assert compare_values(None, None) == 0


def test_mixed_kinds_have_fixed_order():
    assert compare_values(5, "2020-01-01") < 0
    assert compare_values("2020-01-01", "text") < 0


def test_stable_sort_keeps_ties_in_both_directions():
    rows = [
        {"id": 1, "role": "user"},
        {"id": 2, "role": "admin"},
        {"id": 3, "role": "user"},
        {"id": 4, "role": "admin"},
    ]
    comparator = field_comparator(default_accessor, "role")

    ascending = stable_sort(rows, comparator, SortDirection.ASC)
    descending = stable_sort(rows, comparator, SortDirection.DESC)

    assert [r["id"] for r in ascending] == [2, 4, 1, 3]
    assert [r["id"] for r in descending] == [1, 3, 2, 4]


def test_descending_puts_missing_values_first():
    rows = [{"v": 1}, {"v": None}, {"v": 3}]
    result = stable_sort(rows, field_comparator(default_accessor, "v"), SortDirection.DESC)
    assert [r["v"] for r in result] == [None, 3, 1]
