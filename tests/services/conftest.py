"""Service test fixtures — a model registry bound to the in-memory store.

Invariants:
    - Every test gets a fresh registry and a fresh in-memory SQLite database
    - Models from one test are never visible to another

Design Decisions:
    - Registry built with `lambda: store` instead of connect(): model tests do
      not depend on process-wide state
"""

import pytest

from docmapper.core.domain_types import FieldKind
from docmapper.core.schema_types import ArrayOf, Field, Schema
from docmapper.services.model_registry import ModelRegistry

ADDRESS_SCHEMA = Schema({
    "city": Field(FieldKind.STRING, required=True),
    "zip": FieldKind.STRING,
})

USER_SCHEMA = Schema({
    "name": Field(FieldKind.STRING, required=True),
    "age": Field(FieldKind.NUMBER, default=18),
    "active": Field(FieldKind.BOOLEAN, default=True),
    "tags": Field(ArrayOf(FieldKind.STRING), default=list),
    "address": ADDRESS_SCHEMA,
})


@pytest.fixture
def registry(store):
    return ModelRegistry(store_provider=lambda: store)


@pytest.fixture
def User(registry):
    return registry.model("User", USER_SCHEMA)


@pytest.fixture
async def seeded_users(User):
    """Three users: Ada 25 (Recife), Grace 30 (Lisbon), Linus 35 (Recife)."""
    users = {}
    for data in (
        {"name": "Ada", "age": 25, "tags": ["math"], "address": {"city": "Recife"}},
        {"name": "Grace", "age": 30, "tags": ["navy", "cobol"],
         "address": {"city": "Lisbon", "zip": "1000"}},
        {"name": "Linus", "age": 35, "active": False, "address": {"city": "Recife"}},
    ):
        user = await User.create(data)
        users[user["name"]] = user
    return users
