"""Dependency resolution for inputs.

Evaluates an input's declared dependencies against the current state of
the owning form, or of the parent form a dependency names, to produce
the dependency values, the input's enablement and its options.
"""

import inspect
import logging
from typing import Any

from perseform.core.errors import ConfigNotFoundError, DependencyCycleError, InputNotFoundError
from perseform.core.models import FormConfig, InputConfig, InputDependency, InputOption, ScopedRef, SimpleRef
from perseform.dependencies.models import DependencyResult, EnablementReport
from perseform.dependencies.options import OptionsRegistry
from perseform.state.resolver import FormStateResolver

logger = logging.getLogger(__name__)


def owning_form_id(dependency: InputDependency, form_id: str) -> str:
    """Return the id of the form that holds a dependency's value.

    Args:
        dependency: The declared dependency.
        form_id: The form declaring the dependent input.
    """
    if isinstance(dependency, SimpleRef):
        return form_id
    if isinstance(dependency, ScopedRef):
        return dependency.parent_form_id or form_id
    raise TypeError(f"Unsupported dependency type: {type(dependency).__name__}")


def allowed_values(dependency: InputDependency) -> list[Any] | None:
    """Return a dependency's triggering values, or None if it never disables."""
    if isinstance(dependency, ScopedRef):
        return dependency.triggering_values
    return None


def is_triggering(value: Any, triggering_values: list[Any]) -> bool:
    """Check allow-list membership, keeping booleans apart from numbers.

    ``True in [1]`` holds in Python, but a checked checkbox must not
    satisfy a numeric allow-list, nor ``1`` a boolean one.
    """
    return any(
        candidate == value and isinstance(candidate, bool) == isinstance(value, bool)
        for candidate in triggering_values
    )


class DependencyResolver:
    """Resolves dependency values, enablement and options for inputs."""

    def __init__(
        self,
        state_resolver: FormStateResolver,
        options_registry: OptionsRegistry | None = None,
    ) -> None:
        self.state_resolver = state_resolver
        self.options_registry = options_registry if options_registry is not None else OptionsRegistry()

    async def _load_input(self, form_id: str, input_id: str) -> tuple[FormConfig, InputConfig]:
        config = await self.state_resolver.get_config(form_id)
        if config is None:
            raise ConfigNotFoundError(form_id)
        input_config = config.get_input(input_id)
        if input_config is None:
            raise InputNotFoundError(form_id, input_id)
        return config, input_config

    async def _current_value(self, form_id: str, input_id: str) -> Any:
        state = await self.state_resolver.resolve_state(form_id)
        if state is None:
            return None
        return state.state.get(input_id)

    async def evaluate(self, form_id: str, input_id: str) -> EnablementReport:
        """Evaluate every dependency of an input.

        All dependencies are evaluated, in declaration order. The input is
        enabled only if no dependency with triggering values currently
        holds a value outside them. Dependencies without triggering values
        never disable the input.

        Args:
            form_id: The form declaring the input.
            input_id: The input to evaluate.

        Returns:
            EnablementReport with one DependencyResult per dependency.

        Raises:
            ConfigNotFoundError: If the form has no stored config.
            InputNotFoundError: If the config does not declare the input.
        """
        _, input_config = await self._load_input(form_id, input_id)

        results = []
        enabled = True
        for dependency in input_config.dependencies:
            owner = owning_form_id(dependency, form_id)
            value = await self._current_value(owner, dependency.id)
            triggering_values = allowed_values(dependency)
            satisfied = triggering_values is None or is_triggering(value, triggering_values)
            if not satisfied:
                enabled = False
            results.append(
                DependencyResult(
                    id=dependency.id,
                    form_id=owner,
                    value=value,
                    triggering_values=triggering_values,
                    satisfied=satisfied,
                )
            )

        return EnablementReport(
            form_id=form_id,
            input_id=input_id,
            enabled=enabled,
            dependencies=results,
        )

    async def resolve_dependency_values(self, form_id: str, input_id: str) -> dict[str, Any]:
        """Get the current value of each dependency, keyed by dependency id.

        Two dependencies with the same id in different forms share a key;
        the later declaration wins.
        """
        report = await self.evaluate(form_id, input_id)
        return report.values

    async def is_enabled(self, form_id: str, input_id: str, cascade: bool = False) -> bool:
        """Check whether an input is currently enabled.

        Args:
            form_id: The form declaring the input.
            input_id: The input to check.
            cascade: If True, the input is also disabled when any of its
                dependencies is itself disabled, checked transitively.

        Raises:
            ConfigNotFoundError: If a form on the walk has no stored config.
            DependencyCycleError: If cascade is True and the walk loops.
        """
        return await self._is_enabled(form_id, input_id, cascade, [])

    async def _is_enabled(
        self,
        form_id: str,
        input_id: str,
        cascade: bool,
        path: list[tuple[str, str]],
    ) -> bool:
        key = (form_id, input_id)
        if key in path:
            raise DependencyCycleError(path[path.index(key):] + [key])

        report = await self.evaluate(form_id, input_id)
        if not report.enabled:
            logger.debug(
                "%s.%s disabled by %s",
                form_id,
                input_id,
                ", ".join(f"{dep.form_id}.{dep.id}={dep.value!r}" for dep in report.failed),
            )
            return False
        if not cascade:
            return True

        path = path + [key]
        for dep in report.dependencies:
            if not await self._is_enabled(dep.form_id, dep.id, cascade, path):
                return False
        return True

    async def dependency_closure(self, form_id: str, input_id: str) -> list[tuple[str, str]]:
        """List every input an input depends on, directly or transitively.

        Args:
            form_id: The form declaring the input.
            input_id: The input to start from.

        Returns:
            (form_id, input_id) pairs in depth-first order, each input
            listed after its own dependencies, excluding the starting input.

        Raises:
            ConfigNotFoundError: If a form on the walk has no stored config.
            InputNotFoundError: If a form on the walk does not declare an input.
            DependencyCycleError: If the walk returns to an input on its own path.
        """
        found: list[tuple[str, str]] = []
        await self._walk(form_id, input_id, [], found)
        return found

    async def _walk(
        self,
        form_id: str,
        input_id: str,
        path: list[tuple[str, str]],
        found: list[tuple[str, str]],
    ) -> None:
        key = (form_id, input_id)
        if key in path:
            raise DependencyCycleError(path[path.index(key):] + [key])

        _, input_config = await self._load_input(form_id, input_id)
        path = path + [key]
        for dependency in input_config.dependencies:
            dep_key = (owning_form_id(dependency, form_id), dependency.id)
            if dep_key in found:
                continue
            await self._walk(dep_key[0], dep_key[1], path, found)
            if dep_key not in found:
                found.append(dep_key)

    async def resolve_options(self, form_id: str, input_id: str) -> list[InputOption]:
        """Get the selectable options for an input.

        Static option lists are returned as declared. Named and callable
        resolvers are called with the current form state and config, and
        may be coroutines.

        Raises:
            ConfigNotFoundError: If the form has no stored config.
            InputNotFoundError: If the config does not declare the input.
            OptionsResolverNotFoundError: If a named resolver is not registered.
        """
        config, input_config = await self._load_input(form_id, input_id)
        options = input_config.options
        if not options:
            return []
        if isinstance(options, list):
            return list(options)

        resolver = self.options_registry.get(options) if isinstance(options, str) else options
        state = await self.state_resolver.resolve_state(form_id)
        result = resolver(state, config)
        if inspect.isawaitable(result):
            result = await result
        return [InputOption.model_validate(option) for option in result or []]
