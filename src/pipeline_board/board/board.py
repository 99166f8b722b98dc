"""Pipeline board: stage columns, drag wiring, KPI strip and reload gating."""

import logging
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from pipeline_board.board.aggregation import StageAggregator
from pipeline_board.board.drag import ROLLBACK_MESSAGE, DragMoveController, DragOutcome, DragResult
from pipeline_board.board.expansion import ColumnExpansion
from pipeline_board.board.highlight import ScrollHandler, ViewHighlightTracker
from pipeline_board.board.views import EMPTY_COLUMN_MESSAGE, BoardView, CardView, ColumnView
from pipeline_board.connectors.base import DealSource, DealSourceError
from pipeline_board.filtering import DealFilter, FilterEngine
from pipeline_board.models.deal import STAGE_ORDER, Deal, Stage
from pipeline_board.models.settings import DEFAULT_VISIBLE_ROWS, BoardSettings
from pipeline_board.models.viewer import Viewer
from pipeline_board.notifications.poller import NotificationFeed, NotificationPoller
from pipeline_board.store.deal_cache import DealCache
from pipeline_board.store.view_state import ViewState

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load dashboard data. Please refresh the page."
REFRESH_ERROR_MESSAGE = "Failed to refresh opportunities."


class ReloadStatus(str, Enum):
    APPLIED = "applied"
    DEFERRED = "deferred"
    FAILED = "failed"
    CLOSED = "closed"


class PipelineBoard:
    """
    Composes the cache, drag controller, aggregator, expansion state and
    highlight tracker into one board.

    Full reloads never land while a move is committing: they are deferred
    until the move settles, and a fetch that raced a move is thrown away
    and fetched again. A slow confirmation therefore cannot be clobbered by
    a reload that read the server before the move.
    """

    def __init__(
        self,
        source: DealSource,
        *,
        viewer: Optional[Viewer] = None,
        view_state: Optional[ViewState] = None,
        stages: Iterable[Stage] = STAGE_ORDER,
        visible_rows: int = DEFAULT_VISIBLE_ROWS,
        notifications: Optional[NotificationFeed] = None,
        filters: Optional[FilterEngine] = None,
        on_navigate: Optional[Callable[[str], None]] = None,
        on_scroll: Optional[ScrollHandler] = None,
        settle_delay: float = 0.3,
        reconcile_after_move: bool = True,
        cache: Optional[DealCache] = None,
    ):
        self._source = source
        self.viewer = viewer or Viewer()
        self.view_state = view_state or ViewState()
        self.stages: tuple[Stage, ...] = tuple(Stage(s) for s in stages)
        self.cache = cache if cache is not None else DealCache()
        self.notifications = notifications
        self.filters = filters or FilterEngine()
        self._on_navigate = on_navigate

        self._expansions = {s: ColumnExpansion(visible_rows) for s in self.stages}
        self.tracker = ViewHighlightTracker(self.view_state, on_scroll, settle_delay)
        self.drag = DragMoveController(
            self.cache,
            source,
            reconcile=self.refresh if reconcile_after_move else None,
        )
        self.aggregator = StageAggregator(self.visible_deals)

        self.loaded = False
        self.closed = False
        self.error: Optional[str] = None
        self.blocking_error: Optional[str] = None
        self._reload_deferred = False

    @classmethod
    def from_settings(cls, settings: BoardSettings, source: DealSource, **kwargs: Any) -> "PipelineBoard":
        """Wire a board (with a notification poller) from settings."""
        kwargs.setdefault("viewer", settings.viewer)
        kwargs.setdefault("view_state", ViewState(settings.view_state_path))
        kwargs.setdefault("notifications", NotificationPoller(source, settings.poll_interval))
        return cls(
            source,
            stages=settings.stages,
            visible_rows=settings.visible_rows,
            settle_delay=settings.scroll_settle_delay,
            reconcile_after_move=settings.reconcile_after_move,
            **kwargs,
        )

    @property
    def reload_deferred(self) -> bool:
        return self._reload_deferred

    # -- reads -----------------------------------------------------------

    def visible_deals(self) -> list[Deal]:
        """Cached deals after board filters, fetch order kept."""
        return self.filters.apply(self.cache.ordered())

    def column_deals(self, stage: Stage) -> list[Deal]:
        return [d for d in self.visible_deals() if d.stage == stage]

    def expansion(self, stage: Stage) -> ColumnExpansion:
        return self._expansions[Stage(stage)]

    def toggle_column(self, stage: Stage) -> bool:
        return self.expansion(stage).toggle()

    def set_filters(self, criteria: DealFilter) -> None:
        self.filters.criteria = criteria

    # -- lifecycle -------------------------------------------------------

    async def mount(self) -> bool:
        """Initial load, then start the notification feed. Returns False on a blocking load error."""
        try:
            deals = await self._source.fetch_deals(self.viewer)
        except DealSourceError as e:
            logger.warning("Initial deal load failed: %s", e)
            self.blocking_error = LOAD_ERROR_MESSAGE
            return False
        if self.closed:
            return False
        self.cache.load(deals)
        self.loaded = True
        self.blocking_error = None
        logger.info("Board loaded with %d deal(s)", len(self.cache))
        if self.notifications is not None:
            await self.notifications.start()
        return True

    async def refresh(self) -> ReloadStatus:
        """Reconciling full reload, gated behind any committing move."""
        while True:
            if self.closed:
                return ReloadStatus.CLOSED
            if self.drag.is_committing:
                self._reload_deferred = True
                logger.debug("Reload deferred: a move is committing")
                return ReloadStatus.DEFERRED
            self._reload_deferred = False
            generation = self.drag.generation
            try:
                deals = await self._source.fetch_deals(self.viewer)
            except DealSourceError as e:
                logger.warning("Deal reload failed: %s", e)
                if self.loaded:
                    self.error = REFRESH_ERROR_MESSAGE
                else:
                    self.blocking_error = LOAD_ERROR_MESSAGE
                return ReloadStatus.FAILED
            if self.closed:
                return ReloadStatus.CLOSED
            if self.drag.generation != generation:
                # A move started while this fetch was out; its data may predate the move.
                logger.debug("Discarding reload that raced a move")
                continue
            self.cache.load(deals)
            self.loaded = True
            self.blocking_error = None
            logger.info("Board reloaded with %d deal(s)", len(self.cache))
            return ReloadStatus.APPLIED

    async def close(self) -> None:
        """Teardown: stop polling, cancel scrolls, discard the cache."""
        if self.closed:
            return
        self.closed = True
        self.tracker.cancel()
        if self.notifications is not None:
            await self.notifications.stop()
        self.cache.discard()

    # -- shell callbacks -------------------------------------------------

    async def on_drag_end(self, result: DragResult | dict) -> DragOutcome:
        if not isinstance(result, DragResult):
            result = DragResult.model_validate(result)
        outcome = await self.drag.on_drag_end(result)
        if outcome is DragOutcome.ROLLED_BACK:
            self.error = self.drag.last_error
        elif outcome is DragOutcome.CONFIRMED and self.error == ROLLBACK_MESSAGE:
            self.error = None
        settled = outcome in (DragOutcome.CONFIRMED, DragOutcome.ROLLED_BACK)
        if settled and self._reload_deferred and not self.drag.is_committing:
            await self.refresh()
        return outcome

    def select_opportunity(self, deal_id: str) -> None:
        """Record the deal as last viewed, then hand navigation to the shell."""
        self.view_state.select(deal_id)
        if self._on_navigate is not None:
            self._on_navigate(deal_id)

    def dismiss_error(self) -> None:
        self.error = None

    # -- render ----------------------------------------------------------

    def render(self) -> BoardView:
        notification_count = self.notifications.badge_count if self.notifications else 0
        if self.blocking_error:
            return BoardView(blocking_error=self.blocking_error, notification_count=notification_count)
        if not self.loaded:
            return BoardView(loading=True, notification_count=notification_count)

        visible = self.visible_deals()
        per_stage = {
            stage: ([d for d in visible if d.stage == stage], self._expansions[stage])
            for stage in self.stages
        }
        highlighted_stage = self.tracker.sync(per_stage, self.cache.version)

        columns: list[ColumnView] = []
        for stage, (deals, expansion) in per_stage.items():
            bucket = self.aggregator.bucket(stage)
            shown = expansion.visible(deals)
            columns.append(
                ColumnView(
                    stage=stage,
                    count=bucket.count,
                    revenue=bucket.revenue,
                    expanded=expansion.expanded,
                    cards=[
                        CardView.from_deal(d, stage, self.tracker.is_highlighted(d))
                        for d in shown
                    ],
                    hidden_count=len(deals) - len(shown),
                    control_label=expansion.control_label(len(deals)),
                    empty_message=EMPTY_COLUMN_MESSAGE if not shown else None,
                )
            )

        view = BoardView(
            columns=columns,
            kpis=self.aggregator.kpis(),
            error=self.error,
            highlighted_deal_id=self.tracker.target if highlighted_stage else None,
            notification_count=notification_count,
        )
        self.tracker.schedule_scroll()
        return view
