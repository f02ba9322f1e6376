"""Update Expressions — resolves an update object into a flat change-set.

Invariants:
    - Updates are shallow: each top-level key is replaced, never deep-merged
    - Plain form {"age": 31} and operator form {"$set": {...}, "$unset": [...]}
      resolve to the same change-set shape
    - $unset keys map to DELETE_FIELD; the store removes them
    - Mixing plain keys with $-operators, or unknown operators, raises InvalidUpdateError

Design Decisions:
    - $set / $unset only: the two forms the update type has always declared
"""

from typing import Any, Mapping

from docmapper.core.errors import InvalidUpdateError
from docmapper.core.store_protocols import DELETE_FIELD

SET = "$set"
UNSET = "$unset"


def _unset_keys(value: Any) -> list[str]:
    if isinstance(value, Mapping):
        return list(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    if isinstance(value, str):
        return [value]
    raise InvalidUpdateError(f"$unset expects field names, got {type(value).__name__}")


def resolve_update(update: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten an update object into {field: value | DELETE_FIELD}."""
    if not isinstance(update, Mapping):
        raise InvalidUpdateError(f"Update must be a mapping, got {type(update).__name__}")

    operator_keys = [k for k in update if isinstance(k, str) and k.startswith("$")]
    if not operator_keys:
        return dict(update)
    if len(operator_keys) != len(update):
        raise InvalidUpdateError("Cannot mix update operators with plain field values")

    changes: dict[str, Any] = {}
    for key, value in update.items():
        if key == SET:
            if not isinstance(value, Mapping):
                raise InvalidUpdateError("$set expects a mapping of field values")
            changes.update(value)
        elif key == UNSET:
            for name in _unset_keys(value):
                changes[name] = DELETE_FIELD
        else:
            raise InvalidUpdateError(f"Unsupported update operator '{key}'")
    return changes
