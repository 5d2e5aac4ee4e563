"""perseform: shared values and input dependencies across independent forms."""

__version__ = "0.1.0"

# These imports must come after __version__ to avoid circular import
from perseform.core import (
    ConfigNotFoundError,
    DependencyCycleError,
    FormConfig,
    FormState,
    GlobalValue,
    InputConfig,
    InputNotFoundError,
    InputOption,
    PerseformError,
    ScopedRef,
    SimpleRef,
    StoreError,
)
from perseform.dependencies import EnablementReport, OptionsRegistry
from perseform.engine import FormEngine
from perseform.store import InMemoryValueStore, JsonFileValueStore, Namespace, ValueStore

__all__ = [
    "__version__",
    "ConfigNotFoundError",
    "DependencyCycleError",
    "EnablementReport",
    "FormConfig",
    "FormEngine",
    "FormState",
    "GlobalValue",
    "InMemoryValueStore",
    "InputConfig",
    "InputNotFoundError",
    "InputOption",
    "JsonFileValueStore",
    "Namespace",
    "OptionsRegistry",
    "PerseformError",
    "ScopedRef",
    "SimpleRef",
    "StoreError",
    "ValueStore",
]
