"""Storage module - baseline snapshot persistence."""

from .baseline import BaselineStore

__all__ = ["BaselineStore"]
