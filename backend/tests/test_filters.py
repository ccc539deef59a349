import pytest

from core.exceptions import InvalidOperationError, InvalidSortError
from services.filters import (
    SockOperation,
    SortField,
    cotton_percentage_between,
    has_cotton_percentage,
    order_by_field,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("moreThan", SockOperation.MORE_THAN),
        ("lessThan", SockOperation.LESS_THAN),
        ("equal", SockOperation.EQUAL),
    ],
)
def test_operation_parse(raw, expected):
    assert SockOperation.parse(raw) is expected


@pytest.mark.parametrize("raw", ["", "more", "MORETHAN", "=", "greaterThan"])
def test_operation_parse_rejects_unknown(raw):
    with pytest.raises(InvalidOperationError):
        SockOperation.parse(raw)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("color", SortField.COLOR),
        ("COLOR", SortField.COLOR),
        ("Cotton", SortField.COTTON),
        (None, None),
    ],
)
def test_sort_field_parse(raw, expected):
    assert SortField.parse(raw) is expected


def test_sort_field_parse_rejects_unknown():
    with pytest.raises(InvalidSortError) as exc:
        SortField.parse("invalid")
    assert "invalid" in exc.value.detail


@pytest.mark.parametrize(
    "operation, sql_operator",
    [
        (SockOperation.MORE_THAN, ">"),
        (SockOperation.LESS_THAN, "<"),
        (SockOperation.EQUAL, "="),
    ],
)
def test_cotton_percentage_predicate(operation, sql_operator):
    sql = str(has_cotton_percentage(operation, 70))
    assert f"socks.cotton_percentage {sql_operator} " in sql


def test_range_predicate_is_inclusive():
    assert "BETWEEN" in str(cotton_percentage_between(10, 20))


def test_order_by_field_columns():
    assert str(order_by_field(SortField.COLOR)) == "socks.color ASC"
    assert str(order_by_field(SortField.COTTON)) == "socks.cotton_percentage ASC"
