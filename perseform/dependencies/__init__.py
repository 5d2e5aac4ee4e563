"""Dependency resolution: dependency values, enablement and options."""

from perseform.dependencies.models import DependencyResult, EnablementReport
from perseform.dependencies.options import OptionsRegistry
from perseform.dependencies.resolver import DependencyResolver, owning_form_id

__all__ = [
    "DependencyResolver",
    "DependencyResult",
    "EnablementReport",
    "OptionsRegistry",
    "owning_form_id",
]
