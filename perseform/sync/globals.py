"""Global value synchronizer.

Reads and writes values shared across forms by ``globalKey``. A global
value belongs to no single form: every input, in any form, that declares
the same key reads and writes the same record.

Multi-key operations here are sequences of independent store calls.
Nothing is atomic across keys, and the existence check in
:meth:`GlobalValueSynchronizer.ensure_global_defaults` is not atomic with
the write that follows it: two forms saving concurrently may both see a
key as unset, and either seed can win.
"""

import logging
from typing import Any

from perseform.core.models import FormConfig, FormState, GlobalValue
from perseform.store.base import Namespace, ValueStore

logger = logging.getLogger(__name__)


class GlobalValueSynchronizer:
    """Shared-cell access to the ``global`` namespace of a value store."""

    def __init__(self, store: ValueStore) -> None:
        self.store = store

    async def read_global_record(self, global_key: str | None) -> GlobalValue | None:
        """Get the stored record for a global key.

        Args:
            global_key: The global key. Empty or None means "no value".

        Returns:
            The GlobalValue, or None if the key is empty or was never set.
        """
        if not global_key:
            return None
        record = await self.store.get(Namespace.GLOBAL, global_key)
        if record is None:
            return None
        return GlobalValue.model_validate(record)

    async def read_global(self, global_key: str | None) -> Any:
        """Get the current value for a global key, or None if unset."""
        record = await self.read_global_record(global_key)
        return record.value if record is not None else None

    async def write_global(self, global_key: str, value: Any) -> None:
        """Set the value for a global key, overwriting any previous value."""
        await self.store.put(Namespace.GLOBAL, global_key, GlobalValue(id=global_key, value=value).to_record())
        logger.debug("Global %r set to %r", global_key, value)

    async def ensure_global_defaults(self, config: FormConfig) -> list[str]:
        """Seed unset global values with the config's declared defaults.

        First write wins: if a key already has a record, the default from
        this config is ignored, whatever form set it.

        Args:
            config: The form config being saved.

        Returns:
            The global keys seeded by this call.
        """
        seeded = []
        for input_id, input_config in config.global_inputs().items():
            global_key = input_config.global_key
            existing = await self.read_global_record(global_key)
            if existing is not None:
                logger.debug(
                    "Global %r already set; ignoring default from %s.%s",
                    global_key,
                    config.id,
                    input_id,
                )
                continue
            await self.write_global(global_key, input_config.value)
            seeded.append(global_key)
        return seeded

    async def propagate_form_to_globals(self, state: FormState, config: FormConfig | None) -> list[str]:
        """Copy a form's values for global-scoped inputs into the global store.

        Keys are written one after another. If a write fails, the keys
        written before it stay updated and the error propagates.

        Args:
            state: The form state being saved.
            config: The form's config. None means nothing to propagate.

        Returns:
            The global keys written by this call.
        """
        if config is None:
            logger.warning("No config for form %r; global values not propagated", state.id)
            return []

        written = []
        for input_id, value in state.state.items():
            input_config = config.get_input(input_id)
            if input_config is None or not input_config.global_key:
                continue
            await self.write_global(input_config.global_key, value)
            written.append(input_config.global_key)
        return written
