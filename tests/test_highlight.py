"""Tests for ViewHighlightTracker (auto-expand and scroll-into-view)."""

import asyncio

import pytest

from pipeline_board.board.expansion import ColumnExpansion
from pipeline_board.board.highlight import ViewHighlightTracker
from pipeline_board.models.deal import Deal, Stage
from pipeline_board.store import ViewState


def _make_deals(count: int, prefix: str = "n", stage: Stage = Stage.NEW) -> list[Deal]:
    return [Deal(id=f"{prefix}{i}", stage=stage) for i in range(count)]


@pytest.fixture
def view_state() -> ViewState:
    return ViewState()


class TestSync:
    """Tests for render-time sync."""

    def test_no_target(self, view_state: ViewState) -> None:
        """Nothing selected: no stage, no expansion, no scroll."""
        scrolls: list[str] = []
        tracker = ViewHighlightTracker(view_state, scrolls.append)
        exp = ColumnExpansion()
        assert tracker.sync({Stage.NEW: (_make_deals(6), exp)}, version=1) is None
        assert exp.expanded is False
        assert tracker.schedule_scroll() is False
        assert scrolls == []

    def test_fifth_position_forces_expansion(self, view_state: ViewState) -> None:
        """A target at 0-based position 4 expands its column and scrolls once."""
        scrolls: list[str] = []
        tracker = ViewHighlightTracker(view_state, scrolls.append)
        exp = ColumnExpansion()
        view_state.select("n4")
        assert tracker.sync({Stage.NEW: (_make_deals(6), exp)}, version=1) == Stage.NEW
        assert exp.expanded is True
        assert tracker.schedule_scroll() is True
        assert scrolls == ["n4"]

    def test_visible_position_keeps_collapsed(self, view_state: ViewState) -> None:
        """A target in the first four rows does not change expansion."""
        tracker = ViewHighlightTracker(view_state, lambda _: None)
        exp = ColumnExpansion()
        view_state.select("n3")
        tracker.sync({Stage.NEW: (_make_deals(6), exp)}, version=1)
        assert exp.expanded is False

    def test_finds_owning_column(self, view_state: ViewState) -> None:
        """The column holding the target is the one reported and expanded."""
        tracker = ViewHighlightTracker(view_state, lambda _: None)
        new_exp, won_exp = ColumnExpansion(), ColumnExpansion()
        view_state.select("w5")
        stage = tracker.sync(
            {
                Stage.NEW: (_make_deals(6), new_exp),
                Stage.WON: (_make_deals(6, "w", Stage.WON), won_exp),
            },
            version=1,
        )
        assert stage == Stage.WON
        assert won_exp.expanded is True
        assert new_exp.expanded is False

    def test_one_scroll_per_version(self, view_state: ViewState) -> None:
        """Re-rendering the same collection does not scroll again; a new version does."""
        scrolls: list[str] = []
        tracker = ViewHighlightTracker(view_state, scrolls.append)
        columns = {Stage.NEW: (_make_deals(6), ColumnExpansion())}
        view_state.select("n1")
        tracker.sync(columns, version=1)
        tracker.schedule_scroll()
        tracker.sync(columns, version=1)
        assert tracker.schedule_scroll() is False
        tracker.sync(columns, version=2)
        tracker.schedule_scroll()
        assert scrolls == ["n1", "n1"]

    def test_is_highlighted(self, view_state: ViewState) -> None:
        """Highlight compares ids only."""
        tracker = ViewHighlightTracker(view_state)
        view_state.select("n2")
        deals = _make_deals(3)
        assert [tracker.is_highlighted(d) for d in deals] == [False, False, True]


class TestScheduleScroll:
    """Tests for the settle delay."""

    @pytest.mark.asyncio
    async def test_scroll_waits_for_settle_delay(self, view_state: ViewState) -> None:
        """With a running loop the scroll fires after the delay."""
        scrolls: list[str] = []
        tracker = ViewHighlightTracker(view_state, scrolls.append, settle_delay=0.01)
        view_state.select("n0")
        tracker.sync({Stage.NEW: (_make_deals(1), ColumnExpansion())}, version=1)
        tracker.schedule_scroll()
        assert scrolls == []
        await asyncio.sleep(0.05)
        assert scrolls == ["n0"]

    @pytest.mark.asyncio
    async def test_cancel_drops_pending_scroll(self, view_state: ViewState) -> None:
        """Teardown cancels a scroll that has not fired yet."""
        scrolls: list[str] = []
        tracker = ViewHighlightTracker(view_state, scrolls.append, settle_delay=0.01)
        view_state.select("n0")
        tracker.sync({Stage.NEW: (_make_deals(1), ColumnExpansion())}, version=1)
        tracker.schedule_scroll()
        tracker.cancel()
        await asyncio.sleep(0.05)
        assert scrolls == []
