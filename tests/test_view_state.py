"""Unit tests for ViewState."""

import tempfile
from pathlib import Path

import pytest

from pipeline_board.store import ViewState


@pytest.fixture
def temp_db() -> Path:
    """Temporary database path for isolated tests."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    path.unlink(missing_ok=True)


class TestViewState:
    """Tests for the last-viewed deal holder."""

    def test_starts_empty(self) -> None:
        """Nothing selected initially."""
        assert ViewState().last_viewed_deal_id is None

    def test_select_sets_value(self) -> None:
        """select is the single setter."""
        state = ViewState()
        state.select("d-1")
        state.select("d-2")
        assert state.last_viewed_deal_id == "d-2"

    def test_listeners(self) -> None:
        """Subscribers hear each selection until they unsubscribe."""
        state = ViewState()
        seen: list[str] = []
        unsubscribe = state.subscribe(seen.append)
        state.select("d-1")
        unsubscribe()
        state.select("d-2")
        assert seen == ["d-1"]

    def test_persists_across_instances(self, temp_db: Path) -> None:
        """With a db path the selection survives a restart."""
        ViewState(temp_db).select("d-1")
        ViewState(temp_db).select("d-3")
        assert ViewState(temp_db).last_viewed_deal_id == "d-3"

    def test_memory_only_does_not_persist(self, temp_db: Path) -> None:
        """Without a db path nothing is written."""
        ViewState().select("d-1")
        assert ViewState(temp_db).last_viewed_deal_id is None
