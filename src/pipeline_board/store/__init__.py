"""Local state: the deal cache and the persisted view state."""

from pipeline_board.store.deal_cache import DealCache, Snapshot
from pipeline_board.store.view_state import ViewState

__all__ = ["DealCache", "Snapshot", "ViewState"]
