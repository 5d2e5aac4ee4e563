"""Form state resolution.

Produces the authoritative current state of a form by merging its
persisted state, the defaults declared in its config and the current
global values.
"""

import logging
from typing import Any

from perseform.core.models import FormConfig, FormState
from perseform.store.base import Namespace, ValueStore
from perseform.sync.globals import GlobalValueSynchronizer

logger = logging.getLogger(__name__)


def is_blank(value: Any) -> bool:
    """Check whether a stored value counts as not filled in.

    Only None, False, the empty string and numeric zero (or NaN) are
    blank. Empty lists and mappings are real selections.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or value != value
    return False


class FormStateResolver:
    """Loads, reconciles and saves form configs and states."""

    def __init__(self, store: ValueStore, synchronizer: GlobalValueSynchronizer | None = None) -> None:
        """Initialize the resolver.

        Args:
            store: Value store holding configs, states and globals.
            synchronizer: Optional synchronizer. If not provided, one is
                created over the same store.
        """
        self.store = store
        self.synchronizer = synchronizer if synchronizer is not None else GlobalValueSynchronizer(store)

    async def get_config(self, form_id: str) -> FormConfig | None:
        """Get the stored config for a form, or None if it was never saved."""
        record = await self.store.get(Namespace.CONFIG, form_id)
        if record is None:
            return None
        return FormConfig.model_validate(record)

    async def get_persisted_state(self, form_id: str) -> FormState | None:
        """Get the stored state for a form as saved, without reconciliation."""
        record = await self.store.get(Namespace.STATE, form_id)
        if record is None:
            return None
        return FormState.model_validate(record)

    async def resolve_state(self, form_id: str) -> FormState | None:
        """Get the current state of a form.

        1. No config means no state: returns None.
        2. A persisted state has each filled-in value of a global-scoped
           input replaced by the current global value. Blank values (0,
           False, "", None) are left as stored; empty lists and mappings
           are patched.
        3. Without a persisted state, one is synthesized from the config
           defaults, with global-scoped inputs showing the current global
           value when one is set. The synthesized state is not saved.

        Args:
            form_id: The form identifier.

        Returns:
            The reconciled FormState, or None if the form has no config.
        """
        config = await self.get_config(form_id)
        if config is None:
            return None

        state = await self.get_persisted_state(form_id)
        if state is None:
            return await self._synthesize_state(config)
        return await self._patch_with_global_values(config, state)

    async def _synthesize_state(self, config: FormConfig) -> FormState:
        """Build a state from config defaults and current globals.

        Unlike a persisted state, a global-scoped input here shows the
        global value even when its default is blank. A default was never
        entered by the user, so it cannot shadow a value another form
        saved; without this, a form never saved and declaring no default
        would not show values propagated from other forms.
        """
        values = {}
        for input_id, input_config in config.inputs_config.items():
            values[input_id] = input_config.value
            if input_config.global_key:
                record = await self.synchronizer.read_global_record(input_config.global_key)
                if record is not None:
                    values[input_id] = record.value
        return FormState(id=config.id, state=values)

    async def _patch_with_global_values(self, config: FormConfig, state: FormState) -> FormState:
        for input_id, input_config in config.global_inputs().items():
            if is_blank(state.state.get(input_id)):
                continue
            record = await self.synchronizer.read_global_record(input_config.global_key)
            if record is None:
                continue
            state.state[input_id] = record.value
        return state

    async def save_state(self, state: FormState) -> str:
        """Persist a form state after pushing its global-scoped values.

        Globals are written first. If that fails partway, the globals
        already written stay written, the state record is still written,
        and the propagation error is re-raised.

        Args:
            state: The form state to save.

        Returns:
            The id the state was stored under.
        """
        config = await self.get_config(state.id)
        try:
            await self.synchronizer.propagate_form_to_globals(state, config)
        finally:
            record_id = await self.store.put(Namespace.STATE, state.id, state.to_record())
            logger.debug("Saved state for form %r", state.id)
        return record_id

    async def save_config(self, config: FormConfig) -> str:
        """Persist a form config after seeding its unset global values.

        Args:
            config: The form config to save.

        Returns:
            The id the config was stored under.
        """
        seeded = await self.synchronizer.ensure_global_defaults(config)
        if seeded:
            logger.info("Form %r seeded global values: %s", config.id, ", ".join(seeded))
        record_id = await self.store.put(Namespace.CONFIG, config.id, config.to_record())
        logger.debug("Saved config for form %r", config.id)
        return record_id
