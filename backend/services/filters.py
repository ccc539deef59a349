"""
Filter and ordering builders for sock queries.

Operation and sort keys arrive as raw query strings; they are resolved into the
closed enums below once, in the router, so the query layer never compares strings.
"""
from enum import Enum
from typing import Optional

from sqlalchemy import ColumnElement, UnaryExpression

from core.constants import (
    COLOR_SORT_NAME,
    COTTON_SORT_NAME,
    EQUAL_OPERATION_NAME,
    LESS_THAN_OPERATION_NAME,
    MORE_THAN_OPERATION_NAME,
)
from core.exceptions import InvalidOperationError, InvalidSortError
from db.sock import Sock


class SockOperation(str, Enum):
    MORE_THAN = MORE_THAN_OPERATION_NAME
    LESS_THAN = LESS_THAN_OPERATION_NAME
    EQUAL = EQUAL_OPERATION_NAME

    @classmethod
    def parse(cls, value: str) -> "SockOperation":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(op.value for op in cls)
            raise InvalidOperationError(f"Unsupported operation: {value!r} (expected one of {allowed})") from None


class SortField(str, Enum):
    COLOR = COLOR_SORT_NAME
    COTTON = COTTON_SORT_NAME

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SortField"]:
        """Resolve a sort key case-insensitively; ``None`` means no ordering."""
        if value is None:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise InvalidSortError(f"Cannot sort by: {value}") from None


def has_color(color: str) -> ColumnElement[bool]:
    return Sock.color == color


def has_cotton_percentage(operation: SockOperation, cotton_percentage: int) -> ColumnElement[bool]:
    if operation is SockOperation.MORE_THAN:
        return Sock.cotton_percentage > cotton_percentage
    if operation is SockOperation.LESS_THAN:
        return Sock.cotton_percentage < cotton_percentage
    return Sock.cotton_percentage == cotton_percentage


def cotton_percentage_between(from_: int, to: int) -> ColumnElement[bool]:
    # inclusive on both ends
    return Sock.cotton_percentage.between(from_, to)


def order_by_field(field: SortField) -> UnaryExpression:
    if field is SortField.COLOR:
        return Sock.color.asc()
    return Sock.cotton_percentage.asc()
