"""Highlight, auto-expand and scroll-into-view for the last viewed deal."""

import asyncio
import logging
from typing import Callable, Mapping, Optional, Sequence

from pipeline_board.board.expansion import ColumnExpansion
from pipeline_board.models.deal import Deal, Stage
from pipeline_board.store.view_state import ViewState

logger = logging.getLogger(__name__)

ScrollHandler = Callable[[str], None]


def _log_scroll(deal_id: str) -> None:
    logger.debug("Scroll into view: deal-card-%s", deal_id)


class ViewHighlightTracker:
    """
    Translates ViewState.last_viewed_deal_id into render decisions.

    sync() runs during a render pass: it finds the owning column, forces
    that column open when the deal sits past the collapsed window, and
    queues one scroll per (deal, collection version). schedule_scroll()
    runs after the pass so the scroll lands once expansion has applied.
    Targets are deal ids, never positions.
    """

    def __init__(
        self,
        view_state: ViewState,
        scroll_handler: Optional[ScrollHandler] = None,
        settle_delay: float = 0.3,
    ):
        self._view_state = view_state
        self._scroll_handler = scroll_handler or _log_scroll
        self._settle_delay = settle_delay
        self._pending: Optional[str] = None
        self._last_key: Optional[tuple[str, int]] = None
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def target(self) -> Optional[str]:
        return self._view_state.last_viewed_deal_id

    def is_highlighted(self, deal: Deal) -> bool:
        """Render-time comparison only; never writes ViewState."""
        target = self.target
        return target is not None and deal.id == target

    def sync(
        self,
        columns: Mapping[Stage, tuple[Sequence[Deal], ColumnExpansion]],
        version: int,
    ) -> Optional[Stage]:
        """Returns the stage holding the highlighted deal, if any column does."""
        target = self.target
        if not target:
            return None
        for stage, (deals, expansion) in columns.items():
            index = next((i for i, d in enumerate(deals) if d.id == target), -1)
            if index == -1:
                continue
            if expansion.needs_expansion(index):
                expansion.force_expand()
                logger.debug("Auto-expanded %s for deal %s at position %d", stage.value, target, index)
            key = (target, version)
            if key != self._last_key:
                self._last_key = key
                self._pending = target
            return stage
        return None

    def schedule_scroll(self) -> bool:
        """Fire the queued scroll after the settle delay. Returns True if one was queued."""
        if self._pending is None:
            return False
        deal_id, self._pending = self._pending, None
        self.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop: the render pass has already completed.
            self._scroll_handler(deal_id)
            return True
        self._handle = loop.call_later(self._settle_delay, self._scroll_handler, deal_id)
        return True

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
