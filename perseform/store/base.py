"""Value store protocol.

Defines the interface every storage backend must implement. The store
holds three namespaces of JSON-compatible records, each keyed by a
string id. There are no cross-namespace transactions; each ``put`` is an
independent upsert.
"""

from enum import Enum
from typing import Any, Protocol, runtime_checkable


class Namespace(str, Enum):
    """Record namespaces held by a value store."""

    CONFIG = "config"  # FormConfig records keyed by form id
    STATE = "state"  # FormState records keyed by form id
    GLOBAL = "global"  # GlobalValue records keyed by global key


@runtime_checkable
class ValueStore(Protocol):
    """Protocol for asynchronous key-value storage backends."""

    async def get(self, namespace: Namespace, record_id: str) -> dict[str, Any] | None:
        """Read a record.

        Args:
            namespace: The namespace to read from.
            record_id: The record id.

        Returns:
            The stored record, or None if no record exists for this id.

        Raises:
            StoreError: If the backend fails to read.
        """
        ...

    async def put(self, namespace: Namespace, record_id: str, record: dict[str, Any]) -> str:
        """Insert or overwrite a record.

        Args:
            namespace: The namespace to write to.
            record_id: The record id.
            record: JSON-compatible record.

        Returns:
            The id the record was stored under.

        Raises:
            StoreError: If the backend fails to write.
        """
        ...
