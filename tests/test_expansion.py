"""Unit tests for ColumnExpansion."""

import pytest

from pipeline_board.board.expansion import ColumnExpansion


class TestColumnExpansion:
    """Tests for the two-state expand/collapse machine."""

    def test_starts_collapsed(self) -> None:
        """Initial state is collapsed with K=4."""
        exp = ColumnExpansion()
        assert exp.expanded is False
        assert exp.visible_rows == 4

    def test_four_deals_no_control(self) -> None:
        """Exactly K deals never get an expand control."""
        exp = ColumnExpansion()
        assert exp.has_control(4) is False
        assert exp.control_label(4) is None
        assert exp.visible(list("abcd")) == list("abcd")

    def test_five_deals_control_reveals_fifth(self) -> None:
        """K+1 deals show a control; toggling reveals the fifth."""
        exp = ColumnExpansion()
        deals = list("abcde")
        assert exp.has_control(5) is True
        assert exp.control_label(5) == "More Opportunities (1 more)"
        assert exp.visible(deals) == list("abcd")
        exp.toggle()
        assert exp.visible(deals) == deals
        assert exp.control_label(5) == "Show Less"

    def test_toggle_collapses_again(self) -> None:
        """Show Less returns to the first K."""
        exp = ColumnExpansion()
        exp.toggle()
        assert exp.toggle() is False
        assert exp.visible(list("abcdef")) == list("abcd")

    def test_force_only_expands(self) -> None:
        """Forcing expands once and never collapses."""
        exp = ColumnExpansion()
        assert exp.force_expand() is True
        assert exp.force_expand() is False
        assert exp.expanded is True

    def test_needs_expansion_threshold(self) -> None:
        """Positions 0..3 are visible while collapsed; 4 and beyond are not."""
        exp = ColumnExpansion()
        assert exp.needs_expansion(3) is False
        assert exp.needs_expansion(4) is True
        exp.toggle()
        assert exp.needs_expansion(9) is False

    def test_invalid_rows(self) -> None:
        """K must be positive."""
        with pytest.raises(ValueError):
            ColumnExpansion(0)
