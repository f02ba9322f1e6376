"""Model Registry — one canonical Model class per logical entity name.

Invariants:
    - model(name, schema) is idempotent by name: the first registration wins and
      a later schema argument is ignored
    - collection_name = name.lower() + "s"
    - No unregistration; a registry lives as long as its owner

Design Decisions:
    - Explicit registry value owned by the application root instead of a module
      global: separate registries (e.g. one per test) never share models
    - Models get the registry's store_provider, so one registry maps to one store
"""

import logging
from typing import Iterator

from docmapper.core.schema_types import Schema
from docmapper.infrastructure.document_store import get_store
from docmapper.services.document_model import Model, StoreProvider

logger = logging.getLogger(__name__)


def collection_name_for(name: str) -> str:
    """Pluralized, lower-cased collection name for a model name."""
    return name.lower() + "s"


class ModelRegistry:
    """Name → Model class mapping."""

    def __init__(self, store_provider: StoreProvider = get_store):
        self._store_provider = store_provider
        self._models: dict[str, type[Model]] = {}

    def model(self, name: str, schema: Schema) -> type[Model]:
        """Return the Model registered under name, creating it on first call."""
        existing = self._models.get(name)
        if existing is not None:
            if existing.schema is not schema:
                logger.debug(
                    f"Model '{name}' already registered; ignoring new schema",
                    extra={"collection": existing.collection_name},
                )
            return existing

        model_cls = type(name, (Model,), {
            "__module__": __name__,
            "__doc__": f"{name} documents in '{collection_name_for(name)}'.",
            "model_name": name,
            "collection_name": collection_name_for(name),
            "schema": schema,
            "store_provider": staticmethod(self._store_provider),
        })
        self._models[name] = model_cls
        return model_cls

    def get(self, name: str) -> type[Model] | None:
        return self._models.get(name)

    def __getitem__(self, name: str) -> type[Model]:
        return self._models[name]

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __iter__(self) -> Iterator[str]:
        return iter(self._models)

    def __len__(self) -> int:
        return len(self._models)
