"""File-based value store.

Stores one JSON document per record under ``<root>/<namespace>/``. It's
local and needs no server, which makes it the default backend for the
CLI.
"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from urllib.parse import quote

from perseform.core.errors import StoreError
from perseform.store.base import Namespace

logger = logging.getLogger(__name__)


class JsonFileValueStore:
    """Value store keeping each record in its own JSON file.

    Layout::

        <root>/config/<form_id>.json
        <root>/state/<form_id>.json
        <root>/global/<global_key>.json

    Each file wraps the record with its id and created/updated timestamps.
    Blocking file I/O runs in a worker thread.
    """

    def __init__(self, root: Path | str) -> None:
        """Initialize the store.

        Args:
            root: Directory holding the namespaces.
                  Will be created if it doesn't exist.
        """
        self.root = Path(root)
        for namespace in Namespace:
            (self.root / namespace.value).mkdir(parents=True, exist_ok=True)

    def _get_record_path(self, namespace: Namespace, record_id: str) -> Path:
        """Get the path to a record file."""
        # Percent-encode so distinct ids never share a file
        safe_id = quote(record_id, safe="")
        return self.root / Namespace(namespace).value / f"{safe_id}.json"

    async def get(self, namespace: Namespace, record_id: str) -> dict[str, Any] | None:
        return await asyncio.to_thread(self._read, Namespace(namespace), record_id)

    async def put(self, namespace: Namespace, record_id: str, record: dict[str, Any]) -> str:
        await asyncio.to_thread(self._write, Namespace(namespace), record_id, record)
        return record_id

    def ids(self, namespace: Namespace) -> list[str]:
        """List record ids stored in a namespace."""
        ids = []
        for path in sorted((self.root / Namespace(namespace).value).glob("*.json")):
            try:
                with open(path) as f:
                    ids.append(json.load(f)["id"])
            except (OSError, json.JSONDecodeError, KeyError) as e:
                raise StoreError("list", Namespace(namespace).value, path.stem, str(e)) from e
        return ids

    def _read(self, namespace: Namespace, record_id: str) -> dict[str, Any] | None:
        path = self._get_record_path(namespace, record_id)
        if not path.exists():
            return None

        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError("get", namespace.value, record_id, str(e)) from e

        if data.get("id") != record_id:
            detail = f"file {path.name} holds record {data.get('id')!r}"
            raise StoreError("get", namespace.value, record_id, detail)
        return data.get("record")

    def _write(self, namespace: Namespace, record_id: str, record: dict[str, Any]) -> None:
        path = self._get_record_path(namespace, record_id)
        now = datetime.now(timezone.utc).isoformat()

        try:
            # Load existing to preserve created_at if it exists
            created_at = now
            if path.exists():
                with open(path) as f:
                    existing = json.load(f)
                    created_at = existing.get("meta", {}).get("created_at", now)

            data = {
                "id": record_id,
                "record": record,
                "meta": {
                    "created_at": created_at,
                    "updated_at": now,
                },
            }

            tmp_path = path.with_suffix(".json.tmp")
            with open(tmp_path, "w") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as e:
            raise StoreError("put", namespace.value, record_id, str(e)) from e

        logger.debug("Wrote %s/%s to %s", namespace.value, record_id, path)
