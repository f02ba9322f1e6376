"""Document Validation tests — required, types, defaults, nesting, arrays.

Tests cover:
    - Required fields: absent and explicit None both report "<field> is required."
    - Primitive type mismatches report expected vs actual kind
    - Defaults fill absent keys only; callable defaults evaluated per document
    - Nested schemas prefix error paths and propagate nested defaults
    - Arrays validate every element and report "<field>[i]" paths
    - All errors collected in declaration order (no fail-fast)

Design Decisions:
    - Pure function tests, no store: validation never does IO
"""

from datetime import datetime, timezone

from docmapper.core.domain_types import FieldKind
from docmapper.core.schema_types import (
    ArrayOf, Field, Schema, kind_name, matches_kind, validate_document,
)

USER = Schema({
    "name": Field(FieldKind.STRING, required=True),
    "age": Field(FieldKind.NUMBER, default=0),
    "active": FieldKind.BOOLEAN,
})


# ─── Required fields ─────────────────────────────────────────────


def test_missing_required_field_reports_error():
    result = validate_document(USER, {"age": 3})
    assert not result.valid
    assert result.errors == ["name is required."]


def test_explicit_none_counts_as_missing():
    result = validate_document(USER, {"name": None})
    assert result.errors == ["name is required."]


def test_required_field_with_default_is_satisfied():
    schema = Schema({"role": Field(FieldKind.STRING, required=True, default="member")})
    result = validate_document(schema, {})
    assert result.valid
    assert result.validated_data == {"role": "member"}


def test_optional_absent_field_is_left_out():
    result = validate_document(USER, {"name": "Ada"})
    assert result.valid
    assert "active" not in result.validated_data


# ─── Primitive types ─────────────────────────────────────────────


def test_type_mismatch_message():
    result = validate_document(USER, {"name": 42})
    assert result.errors == ["Invalid type for name. Expected String, got Number."]


def test_boolean_is_not_a_number():
    result = validate_document(USER, {"name": "Ada", "age": True})
    assert result.errors == ["Invalid type for age. Expected Number, got Boolean."]


def test_date_field_accepts_datetime():
    schema = Schema({"at": FieldKind.DATE})
    now = datetime.now(timezone.utc)
    assert validate_document(schema, {"at": now}).valid
    result = validate_document(schema, {"at": "2024-01-01"})
    assert result.errors == ["Invalid type for at. Expected Date, got String."]


def test_all_errors_collected_in_declaration_order():
    result = validate_document(USER, {"age": "old", "active": "yes"})
    assert result.errors == [
        "name is required.",
        "Invalid type for age. Expected Number, got String.",
        "Invalid type for active. Expected Boolean, got String.",
    ]


# ─── Defaults ────────────────────────────────────────────────────


def test_default_applied_to_absent_key():
    result = validate_document(USER, {"name": "Ada"})
    assert result.validated_data["age"] == 0


def test_explicit_none_is_not_replaced_by_default():
    result = validate_document(USER, {"name": "Ada", "age": None})
    assert result.valid
    assert result.validated_data["age"] is None


def test_callable_default_evaluated_per_document():
    calls = []

    def make_tags():
        calls.append(1)
        return []

    schema = Schema({"tags": Field(ArrayOf(FieldKind.STRING), default=make_tags)})
    first = validate_document(schema, {}).validated_data["tags"]
    second = validate_document(schema, {}).validated_data["tags"]
    assert len(calls) == 2
    assert first is not second


def test_mutable_default_is_copied():
    schema = Schema({"tags": Field(ArrayOf(FieldKind.STRING), default=["a"])})
    first = validate_document(schema, {}).validated_data["tags"]
    first.append("b")
    assert validate_document(schema, {}).validated_data["tags"] == ["a"]


def test_input_document_not_mutated():
    raw = {"name": "Ada"}
    validate_document(USER, raw)
    assert raw == {"name": "Ada"}


def test_undeclared_keys_pass_through():
    result = validate_document(USER, {"name": "Ada", "nickname": "A"})
    assert result.validated_data["nickname"] == "A"


# ─── Nested schemas ──────────────────────────────────────────────

ADDRESS = Schema({
    "city": Field(FieldKind.STRING, required=True),
    "country": Field(FieldKind.STRING, default="BR"),
})
PERSON = Schema({"name": FieldKind.STRING, "address": ADDRESS})


def test_nested_error_paths_are_prefixed():
    result = validate_document(PERSON, {"address": {"city": 7}})
    assert result.errors == ["Invalid type for address.city. Expected String, got Number."]


def test_nested_required_field():
    result = validate_document(PERSON, {"address": {}})
    assert result.errors == ["address.city is required."]


def test_nested_defaults_propagate():
    result = validate_document(PERSON, {"address": {"city": "Recife"}})
    assert result.validated_data["address"] == {"city": "Recife", "country": "BR"}


def test_nested_non_object_is_type_error():
    result = validate_document(PERSON, {"address": "Recife"})
    assert result.errors == ["Invalid type for address. Expected Object, got String."]


# ─── Arrays ──────────────────────────────────────────────────────


def test_array_elements_validated_with_index_paths():
    schema = Schema({"scores": ArrayOf(FieldKind.NUMBER)})
    result = validate_document(schema, {"scores": [1, "two", 3]})
    assert result.errors == ["Invalid type for scores[1]. Expected Number, got String."]


def test_array_of_schemas_error_paths():
    schema = Schema({"addresses": ArrayOf(ADDRESS)})
    result = validate_document(schema, {"addresses": [{"city": "Recife"}, {}, None]})
    assert result.errors == [
        "addresses[1].city is required.",
        "Invalid type for addresses[2]. Expected Object, got Null.",
    ]


def test_array_of_schemas_applies_nested_defaults():
    schema = Schema({"addresses": ArrayOf(ADDRESS)})
    result = validate_document(schema, {"addresses": [{"city": "Recife"}]})
    assert result.valid
    assert result.validated_data["addresses"] == [{"city": "Recife", "country": "BR"}]


def test_nested_arrays():
    schema = Schema({"grid": ArrayOf(ArrayOf(FieldKind.NUMBER))})
    assert validate_document(schema, {"grid": [[1, 2], [3]]}).valid
    result = validate_document(schema, {"grid": [[1], ["x"]]})
    assert result.errors == ["Invalid type for grid[1][0]. Expected Number, got String."]


def test_array_field_rejects_non_list():
    schema = Schema({"scores": ArrayOf(FieldKind.NUMBER)})
    result = validate_document(schema, {"scores": 5})
    assert result.errors == ["Invalid type for scores. Expected Array, got Number."]


# ─── Top level ───────────────────────────────────────────────────


def test_non_mapping_document_rejected():
    result = validate_document(USER, ["Ada"])
    assert not result.valid
    assert result.errors == ["Invalid document. Expected Object, got Array."]


def test_kind_name_vocabulary():
    assert kind_name(None) == "Null"
    assert kind_name(True) == "Boolean"
    assert kind_name(1.5) == "Number"
    assert kind_name({}) == "Object"


def test_matches_kind_excludes_bool_from_number():
    assert matches_kind(3, FieldKind.NUMBER)
    assert not matches_kind(False, FieldKind.NUMBER)
