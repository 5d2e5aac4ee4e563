"""Synchronization of values shared across forms."""

from perseform.sync.globals import GlobalValueSynchronizer

__all__ = ["GlobalValueSynchronizer"]
