"""Form state resolution."""

from perseform.state.resolver import FormStateResolver

__all__ = ["FormStateResolver"]
