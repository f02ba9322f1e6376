"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - DocumentId wraps the store-assigned identifier — never reassigned once set
    - FieldKind is the closed set of primitive field types
    - FilterOperator maps 1:1 onto NativeOperator (see NATIVE_OPERATORS)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: operator names compare equal to the raw DSL strings ("$gt")
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

DocumentId = NewType("DocumentId", str)

# Reserved filter path addressing the identifier instead of a field
ID_FILTER_PATH = "_id"


# ─── Enums ───────────────────────────────────────────────────────

class FieldKind(str, Enum):
    """Primitive field kinds a schema can declare."""
    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    DATE = "Date"


class FilterOperator(str, Enum):
    """Operators recognized inside a filter operator map."""
    EQ = "$eq"
    GT = "$gt"
    GTE = "$gte"
    LT = "$lt"
    LTE = "$lte"
    NE = "$ne"
    IN = "$in"
    NIN = "$nin"
    ARRAY_CONTAINS = "$array_contains"
    ARRAY_CONTAINS_ANY = "$array_contains_any"


class NativeOperator(str, Enum):
    """Comparison operators understood by the store's query builder."""
    EQUAL = "=="
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="
    NOT_EQUAL = "!="
    IN = "in"
    NOT_IN = "not-in"
    ARRAY_CONTAINS = "array-contains"
    ARRAY_CONTAINS_ANY = "array-contains-any"


NATIVE_OPERATORS: dict[FilterOperator, NativeOperator] = {
    FilterOperator.EQ: NativeOperator.EQUAL,
    FilterOperator.GT: NativeOperator.GREATER,
    FilterOperator.GTE: NativeOperator.GREATER_EQUAL,
    FilterOperator.LT: NativeOperator.LESS,
    FilterOperator.LTE: NativeOperator.LESS_EQUAL,
    FilterOperator.NE: NativeOperator.NOT_EQUAL,
    FilterOperator.IN: NativeOperator.IN,
    FilterOperator.NIN: NativeOperator.NOT_IN,
    FilterOperator.ARRAY_CONTAINS: NativeOperator.ARRAY_CONTAINS,
    FilterOperator.ARRAY_CONTAINS_ANY: NativeOperator.ARRAY_CONTAINS_ANY,
}

OPERATOR_NAMES: frozenset[str] = frozenset(op.value for op in FilterOperator)
