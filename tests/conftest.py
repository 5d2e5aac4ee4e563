"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from perseform import FormConfig, FormEngine, InMemoryValueStore, JsonFileValueStore, Namespace
from perseform.core.errors import StoreError


@pytest.fixture
def memory_store() -> InMemoryValueStore:
    """Return an empty in-memory value store."""
    return InMemoryValueStore()


@pytest.fixture
def json_store(tmp_path: Path) -> JsonFileValueStore:
    """Return a JSON-file value store in a temp directory."""
    return JsonFileValueStore(tmp_path / "store")


@pytest.fixture
def engine(memory_store: InMemoryValueStore) -> FormEngine:
    """Return an engine over an in-memory store."""
    return FormEngine(memory_store)


@pytest.fixture
def profile_config() -> FormConfig:
    """Form with one global-scoped input and one local input."""
    return FormConfig.model_validate(
        {
            "id": "profile",
            "inputsConfig": {
                "country": {"globalKey": "country", "value": "FR", "type": "select"},
                "nickname": {"value": "anon", "type": "text"},
            },
        }
    )


@pytest.fixture
def shipping_config() -> FormConfig:
    """Form sharing the country global and depending on it."""
    return FormConfig.model_validate(
        {
            "id": "shipping",
            "inputsConfig": {
                "country": {"globalKey": "country", "value": "DE"},
                "express": {
                    "value": False,
                    "dependencies": [
                        {"id": "country", "triggeringValues": ["FR", "DE"]},
                    ],
                },
                "gift_note": {"value": "", "dependencies": ["express"]},
            },
        }
    )


class FailingGlobalStore(InMemoryValueStore):
    """In-memory store whose global writes fail for selected keys."""

    def __init__(self, failing_keys: set[str]) -> None:
        super().__init__()
        self.failing_keys = failing_keys

    async def put(self, namespace, record_id, record):
        if Namespace(namespace) == Namespace.GLOBAL and record_id in self.failing_keys:
            raise StoreError("put", "global", record_id, "disk full")
        return await super().put(namespace, record_id, record)


@pytest.fixture
def failing_global_store():
    """Return a factory for stores that fail to write the given global keys."""
    return FailingGlobalStore
