"""Core data models and errors shared across perseform."""

from perseform.core.errors import (
    ConfigNotFoundError,
    DependencyCycleError,
    FormDocumentError,
    InputNotFoundError,
    OptionsResolverNotFoundError,
    PerseformError,
    StoreError,
)
from perseform.core.models import (
    FormConfig,
    FormState,
    GlobalValue,
    InputConfig,
    InputDependency,
    InputOption,
    InputType,
    OptionsResolver,
    ScopedRef,
    SimpleRef,
)

__all__ = [
    # Models
    "FormConfig",
    "FormState",
    "GlobalValue",
    "InputConfig",
    "InputDependency",
    "InputOption",
    "InputType",
    "OptionsResolver",
    "ScopedRef",
    "SimpleRef",
    # Errors
    "ConfigNotFoundError",
    "DependencyCycleError",
    "FormDocumentError",
    "InputNotFoundError",
    "OptionsResolverNotFoundError",
    "PerseformError",
    "StoreError",
]
