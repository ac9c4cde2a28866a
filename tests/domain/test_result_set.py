"""Tests for result value objects and fetch payload normalisation."""

from types import SimpleNamespace

import pytest

from listkit.domain.models.result import FetchPage, ResultSet, coerce_fetch_result


def test_total_pages():
    assert ResultSet(total_count=None).total_pages(10) is None
    assert ResultSet(total_count=0).total_pages(10) == 0
    assert ResultSet(total_count=10).total_pages(10) == 1
    assert ResultSet(total_count=11).total_pages(10) == 2


def test_coerce_mapping_accepts_both_count_spellings():
    assert coerce_fetch_result({"records": [1, 2], "total_count": 7}) == FetchPage((1, 2), 7)
    assert coerce_fetch_result({"records": [1], "totalCount": 3}) == FetchPage((1,), 3)


def test_coerce_object_and_sequence():
    payload = SimpleNamespace(records=[{"id": 1}], total_count=1)
    assert coerce_fetch_result(payload).total_count == 1
    assert coerce_fetch_result([1, 2, 3]) == FetchPage((1, 2, 3), None)


@pytest.mark.parametrize("payload", ["text", 42, {"rows": []}])
def test_coerce_rejects_unknown_shapes(payload):
    with pytest.raises(TypeError):
        coerce_fetch_result(payload)
