"""Pending notification (approved quotation not yet acknowledged)."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DealSnapshot(BaseModel):
    """Minimal deal reference embedded in a notification."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, extra="ignore")

    id: Optional[str] = Field(default=None, alias="_id")
    opportunity_id: Optional[str] = None
    customer: Optional[str] = None


class Notification(BaseModel):
    """
    Unread notification as returned by the poll endpoint.
    Absence from a fetched collection means it was already read.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, extra="ignore")

    id: str = Field(..., alias="_id")
    deal: Optional[DealSnapshot] = None
    status: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def deal_id(self) -> Optional[str]:
        return self.deal.id if self.deal else None
