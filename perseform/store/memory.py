"""In-process value store backed by plain dicts."""

import copy
from typing import Any

from perseform.store.base import Namespace


class InMemoryValueStore:
    """Dict-per-namespace store. Data is lost when the process exits.

    Records are deep-copied on the way in and out so callers can mutate
    what they get back without touching stored data.
    """

    def __init__(self) -> None:
        self._records: dict[Namespace, dict[str, dict[str, Any]]] = {
            namespace: {} for namespace in Namespace
        }

    async def get(self, namespace: Namespace, record_id: str) -> dict[str, Any] | None:
        record = self._records[Namespace(namespace)].get(record_id)
        if record is None:
            return None
        return copy.deepcopy(record)

    async def put(self, namespace: Namespace, record_id: str, record: dict[str, Any]) -> str:
        self._records[Namespace(namespace)][record_id] = copy.deepcopy(record)
        return record_id

    def ids(self, namespace: Namespace) -> list[str]:
        """List record ids stored in a namespace."""
        return sorted(self._records[Namespace(namespace)])
