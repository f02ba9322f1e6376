"""Native Predicates — evaluates where() constraints against a loaded document.

Invariants:
    - A missing path never matches any operator (including != and not-in)
    - != and not-in also never match a null value
    - Booleans never equal numbers (True != 1), matching document-store typing
    - Ordering operators only compare values of the same kind (number, string, date)
    - array-contains* only match list fields

Design Decisions:
    - Firestore-compatible semantics, so filters behave the same whichever
      store backs the models
    - Pure functions over plain dicts: the SQL layer only pushes down collection
      and identifier constraints, everything else is evaluated here
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from docmapper.core.domain_types import NativeOperator
from docmapper.core.store_protocols import DOCUMENT_ID

_MISSING = object()


@dataclass(frozen=True)
class Predicate:
    """One where() constraint."""
    path: str
    op: NativeOperator
    value: Any


def resolve_path(data: dict, path: str) -> Any:
    """Follow a dotted path into nested mappings; _MISSING when absent."""
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def values_equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def _order_kind(value: Any) -> str | None:
    match value:
        case bool():
            return "boolean"
        case int() | float():
            return "number"
        case str():
            return "string"
        case datetime():
            return "date"
    return None


def _compare(left: Any, op: NativeOperator, right: Any) -> bool:
    kind = _order_kind(left)
    if kind is None or kind != _order_kind(right):
        return False
    try:
        match op:
            case NativeOperator.GREATER:
                return left > right
            case NativeOperator.GREATER_EQUAL:
                return left >= right
            case NativeOperator.LESS:
                return left < right
            case NativeOperator.LESS_EQUAL:
                return left <= right
    except TypeError:
        # naive vs aware datetimes
        return False
    return False


def matches(document_id: str, data: dict, predicate: Predicate) -> bool:
    """True when the document satisfies the predicate."""
    if predicate.path == DOCUMENT_ID:
        value: Any = document_id
    else:
        value = resolve_path(data, predicate.path)
    if value is _MISSING:
        return False

    arg = predicate.value
    match predicate.op:
        case NativeOperator.EQUAL:
            return values_equal(value, arg)
        case NativeOperator.NOT_EQUAL:
            return value is not None and not values_equal(value, arg)
        case NativeOperator.IN:
            return any(values_equal(value, candidate) for candidate in arg)
        case NativeOperator.NOT_IN:
            return value is not None and not any(
                values_equal(value, candidate) for candidate in arg
            )
        case NativeOperator.ARRAY_CONTAINS:
            return isinstance(value, list) and any(
                values_equal(item, arg) for item in value
            )
        case NativeOperator.ARRAY_CONTAINS_ANY:
            return isinstance(value, list) and any(
                values_equal(item, candidate) for item in value for candidate in arg
            )
        case _:
            return _compare(value, predicate.op, arg)


def matches_all(document_id: str, data: dict, predicates: tuple[Predicate, ...]) -> bool:
    return all(matches(document_id, data, p) for p in predicates)
