"""Filter Translation — resolves a filter tree into native where() calls.

Invariants:
    - PURE with respect to the store: only builds queries, never executes them
    - Every node becomes exactly one where() call, except Nested (zero, recurses)
    - Nested paths compose as "parent.child"
    - The composed path "_id" targets DOCUMENT_ID, not a field named "_id"

Design Decisions:
    - Works on any QueryLike: the SQL store, a test fake, or another adapter
"""

from typing import Any

from docmapper.core.domain_types import (
    ID_FILTER_PATH, NATIVE_OPERATORS, NativeOperator,
)
from docmapper.core.filter_expression import (
    Equals, FilterInput, FilterNode, Nested, Operator, as_filter_nodes,
)
from docmapper.core.store_protocols import DOCUMENT_ID, QueryLike


def join_path(parent: str, key: str) -> str:
    return f"{parent}.{key}" if parent else key


def native_path(path: str) -> str:
    return DOCUMENT_ID if path == ID_FILTER_PATH else path


def _apply(query: QueryLike, node: FilterNode, parent: str) -> QueryLike:
    match node:
        case Equals(path=path, value=value):
            return query.where(
                native_path(join_path(parent, path)), NativeOperator.EQUAL, value,
            )
        case Operator(path=path, op=op, value=value):
            return query.where(
                native_path(join_path(parent, path)), NATIVE_OPERATORS[op], value,
            )
        case Nested(path=path, children=children):
            nested_parent = join_path(parent, path)
            for child in children:
                query = _apply(query, child, nested_parent)
            return query
    raise TypeError(f"Not a filter node: {node!r}")


def translate_filter(query: QueryLike, filter_input: FilterInput) -> QueryLike:
    """Narrow query by every constraint in filter_input (dict DSL or nodes)."""
    for node in as_filter_nodes(filter_input):
        query = _apply(query, node, "")
    return query


def describe_filter(filter_input: FilterInput) -> list[tuple[str, str, Any]]:
    """Flatten a filter into (path, native_op, value) triples, for logs and tests."""
    triples: list[tuple[str, str, Any]] = []

    class _Recorder:
        def where(self, path, op, value):
            triples.append((path, op.value, value))
            return self

    translate_filter(_Recorder(), filter_input)
    return triples
