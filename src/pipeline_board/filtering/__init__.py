"""Board filters (owner, creation date range)."""

from .engine import DealFilter, FilterEngine

__all__ = ["DealFilter", "FilterEngine"]
