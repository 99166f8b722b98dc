"""HTTP connector for the CRM deal API."""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from pipeline_board.connectors.base import DealSource, DealSourceError
from pipeline_board.models.deal import Deal, Stage
from pipeline_board.models.notification import Notification
from pipeline_board.models.viewer import Viewer

logger = logging.getLogger(__name__)


class HttpDealSource(DealSource):
    """
    Deal source backed by the CRM REST API.
    Scope filtering is applied client-side too, so a permissive server
    never leaks other users' deals onto a salesperson's board.
    """

    source_id = "http"

    DEALS_PATH = "/api/deals"
    STAGE_PATH_TEMPLATE = "/api/deals/{deal_id}/stage"
    NOTIFICATIONS_PATH = "/api/quotations/stats/notifications"
    MARK_READ_PATH = "/api/quotations/stats/mark-read"

    DEFAULT_HEADERS = {
        "User-Agent": "pipeline-board/0.1",
        "Accept": "application/json",
    }

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        headers = dict(self.DEFAULT_HEADERS)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=30.0,
            follow_redirects=True,
            headers=headers,
        )

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        """Send one request; map every failure onto DealSourceError."""
        try:
            response = await self._client.request(method, path, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DealSourceError(f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise DealSourceError(str(e) or type(e).__name__) from e
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise DealSourceError(f"Invalid JSON from {path}") from e

    async def fetch_deals(self, viewer: Viewer) -> list[Deal]:
        payload = await self._request("GET", self.DEALS_PATH)
        if not isinstance(payload, list):
            raise DealSourceError(f"Expected a list from {self.DEALS_PATH}")
        try:
            deals = [Deal.model_validate(item) for item in payload]
        except ValidationError as e:
            raise DealSourceError(f"Malformed deal payload: {e.error_count()} error(s)") from e
        scoped = viewer.scope(deals)
        logger.debug("Fetched %d deal(s), %d in scope for %s", len(deals), len(scoped), viewer.role)
        return scoped

    async def update_deal_stage(self, deal_id: str, stage: Stage) -> None:
        path = self.STAGE_PATH_TEMPLATE.format(deal_id=deal_id)
        await self._request("PATCH", path, json={"stage": Stage(stage).value})

    async def fetch_pending_notifications(self) -> list[Notification]:
        payload = await self._request("GET", self.NOTIFICATIONS_PATH)
        try:
            return [Notification.model_validate(item) for item in payload or []]
        except ValidationError as e:
            raise DealSourceError(
                f"Malformed notification payload: {e.error_count()} error(s)"
            ) from e

    async def mark_notifications_read(self, ids: list[str]) -> None:
        await self._request("PUT", self.MARK_READ_PATH, json={"ids": list(ids)})

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
