"""The pipeline board core: cache-driven columns, drag protocol, KPIs, highlight."""

from pipeline_board.board.aggregation import PipelineKpis, StageAggregator, StageBucket
from pipeline_board.board.board import LOAD_ERROR_MESSAGE, REFRESH_ERROR_MESSAGE, PipelineBoard, ReloadStatus
from pipeline_board.board.drag import ROLLBACK_MESSAGE, DragMoveController, DragOutcome, DragResult, DragState
from pipeline_board.board.expansion import ColumnExpansion
from pipeline_board.board.highlight import ViewHighlightTracker
from pipeline_board.board.views import BoardView, CardView, ColumnView

__all__ = [
    "LOAD_ERROR_MESSAGE",
    "REFRESH_ERROR_MESSAGE",
    "ROLLBACK_MESSAGE",
    "BoardView",
    "CardView",
    "ColumnExpansion",
    "ColumnView",
    "DragMoveController",
    "DragOutcome",
    "DragResult",
    "DragState",
    "PipelineBoard",
    "PipelineKpis",
    "ReloadStatus",
    "StageAggregator",
    "StageBucket",
    "ViewHighlightTracker",
]
