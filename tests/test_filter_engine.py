"""Unit tests for FilterEngine."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from pipeline_board.filtering import DealFilter, FilterEngine
from pipeline_board.models import Deal

NOW = datetime(2024, 5, 15, 10, 0, tzinfo=timezone.utc)


def _make_deal(deal_id: str, created_at: datetime | None = None, owner: str | None = None) -> Deal:
    return Deal(id=deal_id, created_at=created_at, salesperson_id=owner)


@pytest.fixture
def deals() -> list[Deal]:
    return [
        _make_deal("a", datetime(2024, 5, 14, tzinfo=timezone.utc), "u-1"),
        _make_deal("b", datetime(2023, 12, 1, tzinfo=timezone.utc), "u-1"),
        _make_deal("c", datetime(2024, 5, 15, 8, tzinfo=timezone.utc), "u-2"),
        _make_deal("d", None, "u-2"),
    ]


class TestDealFilter:
    """Tests for DealFilter validation."""

    def test_defaults_inactive(self) -> None:
        """Default criteria filter nothing."""
        assert DealFilter().active is False

    def test_unknown_range_rejected(self) -> None:
        """Unknown date ranges fail validation."""
        with pytest.raises(ValidationError):
            DealFilter(date_range="fortnight")

    def test_range_case_insensitive(self) -> None:
        """Range names are normalized."""
        assert DealFilter(date_range="Week").date_range == "week"


class TestFilterEngine:
    """Tests for FilterEngine."""

    def test_inactive_returns_all(self, deals: list[Deal]) -> None:
        """No active criteria: every deal, same order."""
        engine = FilterEngine(now=lambda: NOW)
        assert [d.id for d in engine.apply(deals)] == ["a", "b", "c", "d"]

    def test_owner_and_range_combined(self, deals: list[Deal]) -> None:
        """Both criteria must pass."""
        engine = FilterEngine(DealFilter(owner="u-1", date_range="month"), now=lambda: NOW)
        assert [d.id for d in engine.apply(deals)] == ["a"]

    def test_today(self, deals: list[Deal]) -> None:
        """'today' keeps deals created since midnight."""
        engine = FilterEngine(DealFilter(date_range="today"), now=lambda: NOW)
        assert [d.id for d in engine.apply(deals)] == ["c"]

    def test_explain(self, deals: list[Deal]) -> None:
        """explain returns one line per rule."""
        engine = FilterEngine(DealFilter(owner="u-2"), now=lambda: NOW)
        passed, explanations = engine.explain(deals[0])
        assert passed is False
        assert len(explanations) == 2

    def test_criteria_can_change(self, deals: list[Deal]) -> None:
        """Replacing criteria takes effect on the next apply."""
        engine = FilterEngine(now=lambda: NOW)
        engine.criteria = DealFilter(owner="u-2")
        assert [d.id for d in engine.apply(deals)] == ["c", "d"]
