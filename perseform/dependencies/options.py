"""Registry of named options resolvers.

Options resolvers are plain callables and cannot be stored alongside a
form config. Inputs refer to them by name instead, and the registry maps
names back to callables at resolution time.
"""

from perseform.core.errors import OptionsResolverNotFoundError
from perseform.core.models import OptionsResolver


class OptionsRegistry:
    """Maps resolver names to options resolver callables."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._resolvers: dict[str, OptionsResolver] = {}

    def register(self, name: str, resolver: OptionsResolver) -> None:
        """Register an options resolver.

        Registering an existing name replaces the previous resolver.

        Args:
            name: Name inputs use to refer to the resolver.
            resolver: Callable taking ``(state, config)`` and returning
                a list of options.
        """
        if not callable(resolver):
            raise TypeError(f"Options resolver {name!r} is not callable")
        self._resolvers[name] = resolver

    def get(self, name: str) -> OptionsResolver:
        """Get a resolver by name.

        Raises:
            OptionsResolverNotFoundError: If no resolver is registered under this name.
        """
        if name not in self._resolvers:
            raise OptionsResolverNotFoundError(name)
        return self._resolvers[name]

    def has(self, name: str) -> bool:
        return name in self._resolvers

    @property
    def names(self) -> list[str]:
        """List all registered resolver names."""
        return list(self._resolvers.keys())
