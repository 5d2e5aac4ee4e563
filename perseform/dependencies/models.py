"""Data models for dependency evaluation results."""

from typing import Any

from pydantic import BaseModel, Field


class DependencyResult(BaseModel):
    """Evaluation of one declared dependency."""

    id: str  # Dependency input id
    form_id: str  # Form the value was read from
    value: Any = None
    triggering_values: list[Any] | None = None
    satisfied: bool = True  # False when value is outside triggering_values


class EnablementReport(BaseModel):
    """Why an input is enabled or disabled."""

    form_id: str
    input_id: str
    enabled: bool
    dependencies: list[DependencyResult] = Field(default_factory=list)

    @property
    def failed(self) -> list[DependencyResult]:
        """Dependencies whose allow-list excludes the current value."""
        return [dep for dep in self.dependencies if not dep.satisfied]

    @property
    def values(self) -> dict[str, Any]:
        """Dependency values keyed by dependency id."""
        return {dep.id: dep.value for dep in self.dependencies}
