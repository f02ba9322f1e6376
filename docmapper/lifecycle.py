"""Store Lifecycle — connect/disconnect for the process-wide document store.

Invariants:
    - connect() creates exactly one shared store handle; calling it again replaces it
    - Models resolve the handle per operation, so connect() may run after models are declared
    - disconnect() disposes the engine; later operations raise StoreNotConnectedError

Design Decisions:
    - Mirrors an application lifespan: settings → logging → store → schema
    - Root logging only configured when Settings.configure_logging is set
"""

import logging

from docmapper.config import Settings, get_settings
from docmapper.infrastructure import document_store as store_module
from docmapper.infrastructure.document_store import (
    SqlDocumentStore, close_store, init_store,
)
from docmapper.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


async def connect(settings: Settings | None = None) -> SqlDocumentStore:
    """Open the shared store described by settings (defaults: environment)."""
    settings = settings or get_settings()
    if settings.configure_logging:
        setup_logging(settings.log_level, settings.log_format)
    if store_module.document_store is not None:
        await close_store()
    store = init_store(
        settings.store_url,
        pool_size=settings.store_pool_size,
        max_overflow=settings.store_max_overflow,
        echo=settings.store_echo,
    )
    if settings.create_schema_on_connect:
        await store.create_schema()
    logger.info("Connected to document store")
    return store


async def disconnect() -> None:
    """Dispose the shared store. Safe to call when not connected."""
    await close_store()
    logger.info("Disconnected from document store")
