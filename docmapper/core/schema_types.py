"""Schema Types — tagged field descriptors, the Schema container, and validation.

Invariants:
    - A Field's type is exactly one of: FieldKind, Schema, ArrayOf
    - Descriptors are checked at construction; an invalid one never reaches validation
    - Schemas are built bottom-up, so the descriptor tree has no cycles
    - Field order in a Schema is declaration order (validation and error order follow it)
    - Validation is PURE: no IO, no async, no side effects on the input document
    - ALL errors are collected (no fail-fast); a missing required field yields
      exactly one error and no type check
    - Defaults apply only to absent keys; an explicit None is never replaced
    - Nested results replace the raw sub-value, so nested defaults propagate
    - Undeclared keys pass through unchanged (the backing store is schemaless)

Design Decisions:
    - Explicit tags over host-type identity (str, int...): validation matches on
      FieldKind instead of comparing a value's class to a declared class
    - Bare FieldKind / Schema / ArrayOf accepted in place of Field: the short form
      for optional fields without a default
    - Callable defaults evaluated per validation, like SQLAlchemy column defaults
    - Descriptors and the validator share one module: the validator recurses on
      Schema / ArrayOf and Schema.validate() calls the validator
    - Return ValidationResult (not raise): callers decide whether failure is fatal;
      Model.create() raises SchemaValidationError from the collected messages
    - Error paths: "<field>.<sub>" for nested schemas, "<field>[i]" for array elements
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from collections.abc import Mapping
from typing import Any, Union

from docmapper.core.domain_types import FieldKind
from docmapper.core.errors import SchemaDefinitionError

class _NoDefault:
    """Sentinel type for 'no default configured' (None is a legal default)."""

    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT: Any = _NoDefault()


def check_field_type(field_type: Any, where: str) -> None:
    """Raise SchemaDefinitionError unless field_type is a valid descriptor tag."""
    match field_type:
        case FieldKind() | Schema() | ArrayOf():
            return
        case _:
            raise SchemaDefinitionError(
                f"Unsupported type for '{where}': {field_type!r}. "
                f"Expected a FieldKind, a Schema or ArrayOf(...)."
            )


@dataclass(frozen=True)
class ArrayOf:
    """Ordered sequence whose elements share one descriptor type."""
    element: "FieldType"

    def __post_init__(self):
        check_field_type(self.element, "array element")


FieldType = Union[FieldKind, "Schema", ArrayOf]


@dataclass(frozen=True)
class Field:
    """Full field declaration: type, required-ness, optional default."""
    type: FieldType
    required: bool = False
    default: Any = NO_DEFAULT

    def __post_init__(self):
        check_field_type(self.type, "field")

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    def resolve_default(self) -> Any:
        """Fresh default value for one document."""
        if callable(self.default):
            return self.default()
        return copy.deepcopy(self.default)


class Schema:
    """Ordered field name → Field mapping that validates raw documents."""

    def __init__(self, definition: Mapping[str, Field | FieldType]):
        self.fields: dict[str, Field] = {}
        for name, declared in definition.items():
            if not isinstance(name, str) or not name:
                raise SchemaDefinitionError(f"Field names must be non-empty strings, got {name!r}")
            if isinstance(declared, Field):
                self.fields[name] = declared
            else:
                check_field_type(declared, name)
                self.fields[name] = Field(declared)

    def __repr__(self) -> str:
        return f"Schema({list(self.fields)})"

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    @property
    def required_fields(self) -> list[str]:
        return [name for name, f in self.fields.items() if f.required]

    def validate(self, data: Any) -> "ValidationResult":
        return validate_document(self, data)


# ─── Validation ──────────────────────────────────────────────────


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one document."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    validated_data: dict[str, Any] = field(default_factory=dict)


def kind_name(value: Any) -> str:
    """Human-readable kind of a runtime value, in FieldKind vocabulary."""
    match value:
        case None:
            return "Null"
        case bool():
            return FieldKind.BOOLEAN.value
        case int() | float():
            return FieldKind.NUMBER.value
        case str():
            return FieldKind.STRING.value
        case datetime():
            return FieldKind.DATE.value
        case list() | tuple():
            return "Array"
        case Mapping():
            return "Object"
        case _:
            return type(value).__name__


def expected_name(field_type: FieldType) -> str:
    match field_type:
        case FieldKind():
            return field_type.value
        case Schema():
            return "Object"
        case ArrayOf():
            return "Array"


def matches_kind(value: Any, kind: FieldKind) -> bool:
    """True when value's runtime kind is exactly the declared primitive kind."""
    match kind:
        case FieldKind.STRING:
            return isinstance(value, str)
        case FieldKind.NUMBER:
            # bool is an int subclass but never a Number
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        case FieldKind.BOOLEAN:
            return isinstance(value, bool)
        case FieldKind.DATE:
            return isinstance(value, datetime)
    return False


def _type_error(path: str, field_type: FieldType, value: Any) -> str:
    return (
        f"Invalid type for {path}. "
        f"Expected {expected_name(field_type)}, got {kind_name(value)}."
    )


def _validate_value(
    path: str, field_type: FieldType, value: Any, errors: list[str],
) -> Any:
    """Validate one present value against its descriptor; return normalized value."""
    match field_type:
        case Schema():
            if not isinstance(value, Mapping):
                errors.append(_type_error(path, field_type, value))
                return value
            nested = validate_fields(field_type, value, prefix=f"{path}.")
            errors.extend(nested.errors)
            return nested.validated_data
        case ArrayOf(element=element):
            if not isinstance(value, (list, tuple)):
                errors.append(_type_error(path, field_type, value))
                return value
            return [
                _validate_value(f"{path}[{i}]", element, item, errors)
                for i, item in enumerate(value)
            ]
        case FieldKind():
            if not matches_kind(value, field_type):
                errors.append(_type_error(path, field_type, value))
            return value


def validate_fields(
    schema: Schema, data: Mapping[str, Any], prefix: str = "",
) -> ValidationResult:
    """Validate a mapping against schema fields. prefix locates it in the document."""
    errors: list[str] = []
    validated = dict(data)

    for name, declared in schema.fields.items():
        if name not in validated and declared.has_default:
            validated[name] = declared.resolve_default()

        value = validated.get(name)
        if value is None:
            if declared.required:
                errors.append(f"{prefix}{name} is required.")
            continue

        validated[name] = _validate_value(
            f"{prefix}{name}", declared.type, value, errors,
        )

    return ValidationResult(
        valid=not errors, errors=errors, validated_data=validated,
    )


def validate_document(schema: Schema, data: Any) -> ValidationResult:
    """Validate a raw top-level document. Non-mappings are rejected outright."""
    if not isinstance(data, Mapping):
        return ValidationResult(
            valid=False,
            errors=[f"Invalid document. Expected Object, got {kind_name(data)}."],
            validated_data={},
        )
    return validate_fields(schema, data)
