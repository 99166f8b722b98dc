"""Per-column expand/collapse state."""

from typing import Sequence, TypeVar

from pipeline_board.models.settings import DEFAULT_VISIBLE_ROWS

T = TypeVar("T")


class ColumnExpansion:
    """
    Two states, collapsed (initial) and expanded. Forcing only ever
    expands; collapsing needs an explicit toggle.
    """

    def __init__(self, visible_rows: int = DEFAULT_VISIBLE_ROWS):
        if visible_rows < 1:
            raise ValueError("visible_rows must be >= 1")
        self.visible_rows = visible_rows
        self._expanded = False

    @property
    def expanded(self) -> bool:
        return self._expanded

    def toggle(self) -> bool:
        """User toggle ("More Opportunities" / "Show Less"). Returns the new state."""
        self._expanded = not self._expanded
        return self._expanded

    def force_expand(self) -> bool:
        """Expand without user action. Returns True if the state changed."""
        if self._expanded:
            return False
        self._expanded = True
        return True

    def needs_expansion(self, index: int) -> bool:
        """True when a 0-based position is hidden while collapsed."""
        return not self._expanded and index >= self.visible_rows

    def has_control(self, total: int) -> bool:
        """Only columns with more than K deals get an expand control."""
        return total > self.visible_rows

    def control_label(self, total: int) -> str | None:
        if not self.has_control(total):
            return None
        if self._expanded:
            return "Show Less"
        return f"More Opportunities ({total - self.visible_rows} more)"

    def visible(self, items: Sequence[T]) -> list[T]:
        """First K items while collapsed, all when expanded."""
        if self._expanded:
            return list(items)
        return list(items[: self.visible_rows])
