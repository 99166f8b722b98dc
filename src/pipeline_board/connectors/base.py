"""Abstract base class for deal sources (the remote system of record)."""

from abc import ABC, abstractmethod

from pipeline_board.models.deal import Deal, Stage
from pipeline_board.models.notification import Notification
from pipeline_board.models.viewer import Viewer


class DealSourceError(Exception):
    """Remote call failed: transport error, non-2xx status or malformed payload."""


class DealSource(ABC):
    """
    Standard interface for the system of record behind the board.
    All methods are coroutines; failures surface as DealSourceError.
    """

    source_id: str = ""

    @abstractmethod
    async def fetch_deals(self, viewer: Viewer) -> list[Deal]:
        """
        Full deal collection for the viewer's scope, in fetch order.
        """
        pass

    @abstractmethod
    async def update_deal_stage(self, deal_id: str, stage: Stage) -> None:
        """
        Persist a stage change for one deal.
        """
        pass

    @abstractmethod
    async def fetch_pending_notifications(self) -> list[Notification]:
        """
        Unread notifications for the current user.
        """
        pass

    @abstractmethod
    async def mark_notifications_read(self, ids: list[str]) -> None:
        """
        Mark notifications as read.
        """
        pass

    async def aclose(self) -> None:
        """Release transport resources. Default: nothing to release."""
        return None
