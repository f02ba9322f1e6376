"""Update Expression tests — plain and $set/$unset forms resolve to change-sets."""

import copy

import pytest

from docmapper.core.errors import InvalidUpdateError
from docmapper.core.store_protocols import DELETE_FIELD
from docmapper.core.update_expression import resolve_update


def test_plain_update_is_its_own_change_set():
    assert resolve_update({"age": 31, "name": "Ada"}) == {"age": 31, "name": "Ada"}


def test_set_and_unset():
    changes = resolve_update({"$set": {"age": 31}, "$unset": ["nickname"]})
    assert changes["age"] == 31
    assert changes["nickname"] is DELETE_FIELD


def test_unset_accepts_mapping_and_string():
    assert resolve_update({"$unset": {"a": "", "b": 1}}) == {
        "a": DELETE_FIELD, "b": DELETE_FIELD,
    }
    assert resolve_update({"$unset": "a"}) == {"a": DELETE_FIELD}


def test_mixing_operators_and_plain_keys_rejected():
    with pytest.raises(InvalidUpdateError):
        resolve_update({"$set": {"a": 1}, "b": 2})


def test_unknown_operator_rejected():
    with pytest.raises(InvalidUpdateError):
        resolve_update({"$inc": {"age": 1}})


def test_set_requires_mapping():
    with pytest.raises(InvalidUpdateError):
        resolve_update({"$set": ["age"]})


def test_non_mapping_update_rejected():
    with pytest.raises(InvalidUpdateError):
        resolve_update([("age", 1)])


def test_delete_field_survives_copy():
    assert copy.deepcopy({"a": DELETE_FIELD})["a"] is DELETE_FIELD
