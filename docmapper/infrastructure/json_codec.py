"""JSON Codec — serializer pair for the documents.data column.

Invariants:
    - datetime values round-trip exactly (tagged as {"$date": <isoformat>})
    - Any stored mapping round-trips unchanged, including user mappings shaped
      like a tag: a mapping whose only key is "$date" or "$literal" is wrapped
      as {"$literal": {...}} on write and unwrapped on read
    - Every other value is plain JSON; non-JSON values raise TypeError on write

Design Decisions:
    - Passed to create_async_engine(json_serializer=..., json_deserializer=...):
      the store and ORM never see the tagged form
    - Tags resolved in a top-down pass after json.loads, not with object_hook:
      object_hook runs inner-first and would decode a "$date" inside "$literal"
"""

import json
from datetime import datetime
from typing import Any

DATE_TAG = "$date"
LITERAL_TAG = "$literal"
_TAGS = frozenset((DATE_TAG, LITERAL_TAG))


def _is_tag_shaped(obj: dict) -> bool:
    return len(obj) == 1 and next(iter(obj)) in _TAGS


def _encode(value: Any) -> Any:
    match value:
        case datetime():
            return {DATE_TAG: value.isoformat()}
        case dict():
            encoded = {key: _encode(item) for key, item in value.items()}
            if _is_tag_shaped(value):
                return {LITERAL_TAG: encoded}
            return encoded
        case list() | tuple():
            return [_encode(item) for item in value]
    return value


def _decode(value: Any) -> Any:
    match value:
        case {"$literal": dict() as inner} if len(value) == 1:
            return {key: _decode(item) for key, item in inner.items()}
        case {"$date": str() as text} if len(value) == 1:
            return datetime.fromisoformat(text)
        case dict():
            return {key: _decode(item) for key, item in value.items()}
        case list():
            return [_decode(item) for item in value]
    return value


def _reject(value: Any) -> Any:
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps(value: Any) -> str:
    return json.dumps(_encode(value), default=_reject, ensure_ascii=False)


def loads(text: str | bytes) -> Any:
    return _decode(json.loads(text))
