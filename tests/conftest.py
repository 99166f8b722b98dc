"""Pytest fixtures for pipeline-board tests."""

import asyncio
from typing import Optional

import pytest

from pipeline_board.connectors.base import DealSource, DealSourceError
from pipeline_board.models.deal import Deal, Stage
from pipeline_board.models.notification import Notification
from pipeline_board.models.viewer import Viewer


class FakeDealSource(DealSource):
    """
    In-memory system of record with failure switches and gates.
    A gate (asyncio.Event) holds the call at its network boundary until set.
    fetch_deals reads server state before waiting, like a request that
    reached the server early but whose response is slow.
    """

    source_id = "fake"

    def __init__(self, deals: Optional[list[Deal]] = None, notifications: Optional[list[Notification]] = None):
        self.deals: list[Deal] = list(deals or [])
        self.notifications: list[Notification] = list(notifications or [])
        self.fetch_calls = 0
        self.notification_calls = 0
        self.stage_calls: list[tuple[str, Stage]] = []
        self.mark_read_calls: list[list[str]] = []
        self.fail_fetch = False
        self.fail_updates = False
        self.fail_notifications = False
        self.fail_mark_read = False
        self.fetch_gate: Optional[asyncio.Event] = None
        self.update_gate: Optional[asyncio.Event] = None
        self.notification_gate: Optional[asyncio.Event] = None

    async def fetch_deals(self, viewer: Viewer) -> list[Deal]:
        self.fetch_calls += 1
        fail = self.fail_fetch
        server_view = list(self.deals)
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        if fail:
            raise DealSourceError("HTTP 500")
        return viewer.scope(server_view)

    async def update_deal_stage(self, deal_id: str, stage: Stage) -> None:
        self.stage_calls.append((deal_id, stage))
        if self.update_gate is not None:
            await self.update_gate.wait()
        if self.fail_updates:
            raise DealSourceError("HTTP 500")
        self.deals = [d.model_copy(update={"stage": stage}) if d.id == deal_id else d for d in self.deals]

    async def fetch_pending_notifications(self) -> list[Notification]:
        self.notification_calls += 1
        if self.notification_gate is not None:
            await self.notification_gate.wait()
        if self.fail_notifications:
            raise DealSourceError("connection refused")
        return list(self.notifications)

    async def mark_notifications_read(self, ids: list[str]) -> None:
        self.mark_read_calls.append(list(ids))
        if self.fail_mark_read:
            raise DealSourceError("HTTP 500")
        self.notifications = [n for n in self.notifications if n.id not in ids]


@pytest.fixture
def fake_source() -> FakeDealSource:
    """Empty fake deal source; tests assign .deals / .notifications."""
    return FakeDealSource()


@pytest.fixture
def sample_deal_payload() -> dict:
    """Deal as served by GET /api/deals (populated assignee, bare salesperson id)."""
    return {
        "_id": "64f0c1",
        "opportunityId": "OPP-240105-1234",
        "customer": "Acme Industries",
        "contactName": "Jane Roe",
        "type": "Product",
        "stage": "Qualified",
        "expectedRevenue": 125000,
        "expectedMargin": 18000,
        "accountManager": "",
        "assignedTo": {"_id": "u-7", "firstName": "Priya", "lastName": "Shah", "username": "pshah"},
        "salespersonId": "u-9",
        "quotationStatus": "Pending",
        "createdAt": "2024-01-05T09:30:00.000Z",
    }


@pytest.fixture
def sample_notification_payload() -> dict:
    """Notification as served by GET /api/quotations/stats/notifications."""
    return {
        "_id": "q-1",
        "deal": {"_id": "64f0c1", "opportunityId": "OPP-240105-1234", "customer": "Acme Industries"},
        "status": "Approved",
        "isRead": False,
        "updatedAt": "2024-01-06T12:00:00.000Z",
    }
