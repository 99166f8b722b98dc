"""Data models for deals, notifications, viewers and settings."""

from pipeline_board.models.deal import Deal, OwnerRef, QuotationStatus, Stage
from pipeline_board.models.notification import DealSnapshot, Notification
from pipeline_board.models.settings import BoardSettings
from pipeline_board.models.viewer import Viewer

__all__ = [
    "BoardSettings",
    "Deal",
    "DealSnapshot",
    "Notification",
    "OwnerRef",
    "QuotationStatus",
    "Stage",
    "Viewer",
]
