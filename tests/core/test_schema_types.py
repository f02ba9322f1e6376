"""Schema Types tests — descriptor construction and the Schema container.

Tests cover:
    - Bare FieldKind / Schema / ArrayOf wrapped into optional Field without default
    - Unsupported descriptor types rejected at construction (SchemaDefinitionError)
    - Declaration order preserved; required_fields lists required names
    - None is a legal default, distinct from "no default"
"""

import pytest

from docmapper.core.domain_types import FieldKind
from docmapper.core.errors import SchemaDefinitionError
from docmapper.core.schema_types import ArrayOf, Field, NO_DEFAULT, Schema


def test_bare_kind_becomes_optional_field():
    schema = Schema({"name": FieldKind.STRING})
    declared = schema.fields["name"]
    assert declared.type is FieldKind.STRING
    assert declared.required is False
    assert not declared.has_default


def test_nested_schema_and_array_accepted():
    inner = Schema({"city": FieldKind.STRING})
    schema = Schema({"address": inner, "tags": ArrayOf(FieldKind.STRING)})
    assert schema.fields["address"].type is inner
    assert schema.fields["tags"].type == ArrayOf(FieldKind.STRING)


def test_host_type_rejected():
    with pytest.raises(SchemaDefinitionError):
        Schema({"name": str})


def test_field_with_invalid_type_rejected():
    with pytest.raises(SchemaDefinitionError):
        Field("String")


def test_array_of_invalid_element_rejected():
    with pytest.raises(SchemaDefinitionError):
        ArrayOf(int)


def test_empty_field_name_rejected():
    with pytest.raises(SchemaDefinitionError):
        Schema({"": FieldKind.STRING})


def test_declaration_order_and_required_fields():
    schema = Schema({
        "b": Field(FieldKind.STRING, required=True),
        "a": FieldKind.NUMBER,
        "c": Field(FieldKind.BOOLEAN, required=True),
    })
    assert list(schema.fields) == ["b", "a", "c"]
    assert schema.required_fields == ["b", "c"]
    assert "a" in schema
    assert "z" not in schema


def test_none_is_a_real_default():
    declared = Field(FieldKind.STRING, default=None)
    assert declared.has_default
    assert declared.resolve_default() is None
    assert Field(FieldKind.STRING).default is NO_DEFAULT


def test_schema_validate_delegates():
    schema = Schema({"name": Field(FieldKind.STRING, required=True)})
    assert schema.validate({"name": "x"}).valid
    assert schema.validate({}).errors == ["name is required."]
