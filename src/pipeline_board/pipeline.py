"""Board session orchestration: build source → mount board → tear down."""

import contextlib
from pathlib import Path
from typing import AsyncIterator, Optional

from pipeline_board.board import PipelineBoard
from pipeline_board.connectors import ConnectorRegistry, DealSource
from pipeline_board.filtering import DealFilter, FilterEngine
from pipeline_board.models.settings import BoardSettings


def build_source(
    settings: BoardSettings,
    *,
    source_id: str = "http",
    input_path: Optional[Path] = None,
) -> DealSource:
    """Instantiate a deal source from settings via the registry."""
    if source_id == "json":
        if input_path is None:
            raise ValueError("The json source requires an input file")
        return ConnectorRegistry.get("json", path=input_path)
    return ConnectorRegistry.get(source_id, base_url=settings.api_url, token=settings.token)


@contextlib.asynccontextmanager
async def board_session(
    settings: BoardSettings,
    *,
    source: Optional[DealSource] = None,
    criteria: Optional[DealFilter] = None,
    poll: bool = True,
) -> AsyncIterator[PipelineBoard]:
    """
    Mount a board for the duration of the block.
    Teardown always runs: poller stopped, cache discarded, transport closed.
    """
    owns_source = source is None
    source = source or build_source(settings)
    kwargs = {}
    if not poll:
        kwargs["notifications"] = None
    board = PipelineBoard.from_settings(
        settings,
        source,
        filters=FilterEngine(criteria),
        **kwargs,
    )
    try:
        await board.mount()
        yield board
    finally:
        await board.close()
        if owns_source:
            await source.aclose()
