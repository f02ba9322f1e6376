"""Lifecycle tests — connect/disconnect of the process-wide store.

Tests cover:
    - get_store() raises StoreNotConnectedError before connect()
    - connect() creates the schema so models work immediately
    - Models declared before connect() resolve the store per call
    - disconnect() returns to the not-connected state
"""

import pytest

from docmapper.config import Settings
from docmapper.core.domain_types import FieldKind
from docmapper.core.errors import StoreNotConnectedError
from docmapper.core.schema_types import Schema
from docmapper.infrastructure.document_store import get_store
from docmapper.lifecycle import connect, disconnect
from docmapper.services.model_registry import ModelRegistry


def _settings() -> Settings:
    return Settings(store_url="sqlite+aiosqlite://")


def test_get_store_before_connect():
    with pytest.raises(StoreNotConnectedError):
        get_store()


async def test_connect_then_use_models_declared_earlier():
    Note = ModelRegistry().model("Note", Schema({"text": FieldKind.STRING}))

    store = await connect(_settings())
    try:
        assert get_store() is store
        assert await store.health_check() is True
        await Note.create({"text": "hello"})
        assert [n["text"] for n in await Note.find()] == ["hello"]
    finally:
        await disconnect()

    with pytest.raises(StoreNotConnectedError):
        await Note.find()


async def test_reconnect_replaces_store():
    first = await connect(_settings())
    second = await connect(_settings())
    try:
        assert second is not first
        assert get_store() is second
    finally:
        await disconnect()


async def test_disconnect_when_not_connected():
    await disconnect()
    with pytest.raises(StoreNotConnectedError):
        get_store()
