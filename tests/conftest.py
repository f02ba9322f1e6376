"""Root conftest — shared test configuration and an in-memory store.

Invariants:
    - Every test that asks for `store` gets a fresh in-memory SQLite database
    - The process-wide store handle and cached settings are reset after each test

Design Decisions:
    - SQLite in-memory via StaticPool: fast, no external dependency, same
      predicate semantics as any other backend because filtering runs in Python
"""

import os

import pytest

import docmapper.infrastructure.document_store as store_module
from docmapper.config import get_settings
from docmapper.infrastructure.document_store import SqlDocumentStore

# Ensure tests never touch a developer's real database
os.environ.setdefault("DOCMAPPER_STORE_URL", "sqlite+aiosqlite://")

MEMORY_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def store():
    s = SqlDocumentStore.from_url(MEMORY_URL)
    await s.create_schema()
    yield s
    await s.dispose()


@pytest.fixture(autouse=True)
def reset_shared_store():
    """Tests that connect() also disconnect(); this only drops stale handles."""
    yield
    store_module.document_store = None
    get_settings.cache_clear()
