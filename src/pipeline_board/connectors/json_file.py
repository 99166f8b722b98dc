"""Offline connector serving deals and notifications from a local JSON file."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from pipeline_board.connectors.base import DealSource, DealSourceError
from pipeline_board.models.deal import Deal, Stage
from pipeline_board.models.notification import Notification
from pipeline_board.models.viewer import Viewer

logger = logging.getLogger(__name__)


class JsonFileDealSource(DealSource):
    """
    Reads a JSON export: either a list of deals, or an object with
    "deals" and "notifications" keys. Writes stay in memory.
    """

    source_id = "json"

    def __init__(self, path: str | Path):
        self._path = Path(path)
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise DealSourceError(f"Cannot read {self._path}: {e}") from e
        if isinstance(data, list):
            data = {"deals": data}
        try:
            self._deals = [Deal.model_validate(d) for d in data.get("deals", [])]
            self._notifications = [
                Notification.model_validate(n) for n in data.get("notifications", [])
            ]
        except ValidationError as e:
            raise DealSourceError(f"Malformed export {self._path}: {e.error_count()} error(s)") from e

    async def fetch_deals(self, viewer: Viewer) -> list[Deal]:
        return viewer.scope(list(self._deals))

    async def update_deal_stage(self, deal_id: str, stage: Stage) -> None:
        for i, deal in enumerate(self._deals):
            if deal.id == deal_id:
                self._deals[i] = deal.model_copy(update={"stage": Stage(stage)})
                return
        raise DealSourceError(f"HTTP 404: deal {deal_id} not found")

    async def fetch_pending_notifications(self) -> list[Notification]:
        return list(self._notifications)

    async def mark_notifications_read(self, ids: list[str]) -> None:
        read = set(ids)
        self._notifications = [n for n in self._notifications if n.id not in read]
        logger.debug("Marked %d notification(s) read in %s", len(read), self._path)
