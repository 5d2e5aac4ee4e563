"""Form engine: the public entry point.

Wires a value store, the global value synchronizer, the form state
resolver and the dependency resolver together behind one object. Every
method is a coroutine. Absent data comes back as None; store failures
propagate as StoreError.
"""

import logging
from typing import Any

from perseform.config import Settings
from perseform.core.models import FormConfig, FormState, InputOption
from perseform.dependencies.models import EnablementReport
from perseform.dependencies.options import OptionsRegistry
from perseform.dependencies.resolver import DependencyResolver
from perseform.state.resolver import FormStateResolver
from perseform.store.base import ValueStore
from perseform.store.json_file import JsonFileValueStore
from perseform.store.memory import InMemoryValueStore
from perseform.sync.globals import GlobalValueSynchronizer

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> ValueStore:
    """Create the value store selected by the settings."""
    if settings.store_backend == "memory":
        return InMemoryValueStore()
    return JsonFileValueStore(settings.resolved_store_path())


class FormEngine:
    """Shares values across forms and resolves input dependencies."""

    def __init__(
        self,
        store: ValueStore | None = None,
        options_registry: OptionsRegistry | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Value store. If not provided, uses an in-memory store.
            options_registry: Registry of named options resolvers. If not
                provided, creates an empty one.
        """
        self.store = store if store is not None else InMemoryValueStore()
        self.options_registry = options_registry if options_registry is not None else OptionsRegistry()
        self.synchronizer = GlobalValueSynchronizer(self.store)
        self.state_resolver = FormStateResolver(self.store, self.synchronizer)
        self.dependency_resolver = DependencyResolver(self.state_resolver, self.options_registry)

    @classmethod
    def from_settings(cls, settings: Settings, options_registry: OptionsRegistry | None = None) -> "FormEngine":
        """Create an engine over the store the settings select."""
        return cls(create_store(settings), options_registry=options_registry)

    async def save_form_config(self, config: FormConfig) -> str:
        """Save a form config, seeding any unset global values.

        Callable options resolvers are registered under ``<form_id>.<input_id>``
        and the stored config refers to them by that name.

        Returns:
            The id the config was stored under.
        """
        callable_inputs = {
            input_id: input_config
            for input_id, input_config in config.inputs_config.items()
            if input_config.has_callable_options
        }
        if callable_inputs:
            inputs_config = dict(config.inputs_config)
            for input_id, input_config in callable_inputs.items():
                name = f"{config.id}.{input_id}"
                self.options_registry.register(name, input_config.options)
                inputs_config[input_id] = input_config.model_copy(update={"options": name})
            config = config.model_copy(update={"inputs_config": inputs_config})

        return await self.state_resolver.save_config(config)

    async def get_form_config(self, form_id: str) -> FormConfig | None:
        """Get a form config, or None if it was never saved."""
        return await self.state_resolver.get_config(form_id)

    async def save_form_state(self, state: FormState) -> str:
        """Save a form state, propagating its global-scoped values first.

        Returns:
            The id the state was stored under.
        """
        return await self.state_resolver.save_state(state)

    async def get_form_state(self, form_id: str) -> FormState | None:
        """Get the current state of a form, reconciled with global values.

        Returns:
            The FormState, or None if the form has no config.
        """
        return await self.state_resolver.resolve_state(form_id)

    async def get_input_value(self, form_id: str, input_id: str) -> Any:
        """Get the current value of one input, or None if unknown."""
        state = await self.get_form_state(form_id)
        if state is None:
            return None
        return state.state.get(input_id)

    async def get_input_options(self, form_id: str, input_id: str) -> list[InputOption]:
        """Get the options of an input for the form's current state.

        Raises:
            ConfigNotFoundError: If the form has no stored config.
            InputNotFoundError: If the config does not declare the input.
        """
        return await self.dependency_resolver.resolve_options(form_id, input_id)

    async def get_global_value(self, global_key: str) -> Any:
        """Get the current value of a global key, or None if unset."""
        return await self.synchronizer.read_global(global_key)

    async def is_enabled(self, form_id: str, input_id: str, cascade: bool = False) -> bool:
        """Check whether an input is enabled by its dependencies.

        Raises:
            ConfigNotFoundError: If the form has no stored config.
            InputNotFoundError: If the config does not declare the input.
        """
        return await self.dependency_resolver.is_enabled(form_id, input_id, cascade=cascade)

    async def get_input_dependencies_state(self, form_id: str, input_id: str) -> dict[str, Any]:
        """Get the current values of an input's dependencies, keyed by id.

        Raises:
            ConfigNotFoundError: If the form has no stored config.
            InputNotFoundError: If the config does not declare the input.
        """
        return await self.dependency_resolver.resolve_dependency_values(form_id, input_id)

    async def explain_enablement(self, form_id: str, input_id: str) -> EnablementReport:
        """Get the per-dependency breakdown behind ``is_enabled``."""
        return await self.dependency_resolver.evaluate(form_id, input_id)
