"""Filter Expression — tagged filter tree and the mapping-DSL parser that builds it.

Invariants:
    - Three node kinds: Equals(path, value), Operator(path, op, value), Nested(path, children)
    - All nodes at every level combine conjunctively (no $or)
    - A mapping is an operator map iff at least one key is a recognized operator
    - Lists and other non-mapping values are literals (equality)
    - Paths inside Nested are relative; the translator joins them with "."

Design Decisions:
    - Parse once into a tree, translate with a pure function: callers may also
      build Equals/Operator/Nested directly instead of writing the dict DSL
    - Unknown "$" keys in an operator map raise InvalidFilterError rather than
      being dropped silently
    - Known limitation: a sub-document whose field names collide with operator
      names ("$gt") is read as an operator map; the DSL cannot express it
"""

from dataclasses import dataclass
from typing import Any, Mapping, Union

from docmapper.core.domain_types import FilterOperator, OPERATOR_NAMES
from docmapper.core.errors import InvalidFilterError


@dataclass(frozen=True)
class Equals:
    """Literal-equality leaf."""
    path: str
    value: Any


@dataclass(frozen=True)
class Operator:
    """Single operator constraint on a path."""
    path: str
    op: FilterOperator
    value: Any


@dataclass(frozen=True)
class Nested:
    """Sub-path object: children are addressed relative to path."""
    path: str
    children: tuple["FilterNode", ...]


FilterNode = Union[Equals, Operator, Nested]
FilterInput = Union[Mapping[str, Any], "FilterNode", list, tuple, None]


def is_operator_map(value: Any) -> bool:
    return isinstance(value, Mapping) and any(k in OPERATOR_NAMES for k in value)


def _parse_operator_map(path: str, ops: Mapping[str, Any]) -> list[FilterNode]:
    nodes: list[FilterNode] = []
    for key, arg in ops.items():
        if key not in OPERATOR_NAMES:
            if key.startswith("$"):
                message = f"Unsupported filter operator '{key}' on path '{path}'"
            else:
                message = f"Field '{key}' mixed with operators on path '{path}'"
            raise InvalidFilterError(message, path)
        nodes.append(Operator(path, FilterOperator(key), arg))
    return nodes


def parse_filter(query: Mapping[str, Any] | None) -> tuple[FilterNode, ...]:
    """Convert the mapping DSL into a tuple of top-level filter nodes."""
    if query is None:
        return ()
    if not isinstance(query, Mapping):
        raise InvalidFilterError(
            f"Filter must be a mapping, got {type(query).__name__}", "",
        )

    nodes: list[FilterNode] = []
    for key, value in query.items():
        if is_operator_map(value):
            nodes.extend(_parse_operator_map(key, value))
        elif isinstance(value, Mapping):
            nodes.append(Nested(key, parse_filter(value)))
        else:
            nodes.append(Equals(key, value))
    return tuple(nodes)


def as_filter_nodes(query: FilterInput) -> tuple[FilterNode, ...]:
    """Accept the dict DSL, a single node, or a sequence of nodes."""
    match query:
        case None:
            return ()
        case Equals() | Operator() | Nested():
            return (query,)
        case list() | tuple():
            for node in query:
                if not isinstance(node, (Equals, Operator, Nested)):
                    raise InvalidFilterError(f"Not a filter node: {node!r}", "")
            return tuple(query)
        case _:
            return parse_filter(query)
