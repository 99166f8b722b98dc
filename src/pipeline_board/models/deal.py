"""Deal record as served by the system of record."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Stage(str, Enum):
    """Fixed ordered pipeline stages."""

    NEW = "New"
    QUALIFIED = "Qualified"
    PROPOSITION = "Proposition"
    WON = "Won"
    LOST = "Lost"


STAGE_ORDER: tuple[Stage, ...] = tuple(Stage)
IN_PROGRESS_STAGES: tuple[Stage, ...] = (Stage.NEW, Stage.QUALIFIED, Stage.PROPOSITION)


class QuotationStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class OwnerRef(BaseModel):
    """Populated user reference (assignedTo / salespersonId)."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    id: Optional[str] = Field(default=None, alias="_id")
    first_name: str = ""
    last_name: str = ""
    username: str = ""


class Deal(BaseModel):
    """
    Cached copy of one opportunity.
    Records are immutable; the cache swaps in a copy to change the stage.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    id: str = Field(..., alias="_id")
    opportunity_id: Optional[str] = None
    stage: Stage = Stage.NEW
    expected_revenue: Optional[float] = Field(default=None, ge=0)
    expected_margin: Optional[float] = Field(default=None, ge=0)
    customer: str = ""
    deal_type: str = Field(default="", alias="type")
    account_manager: Optional[str] = None

    assigned_to: Optional[OwnerRef] = None
    assigned_to_id: Optional[str] = None
    salesperson: Optional[OwnerRef] = None
    salesperson_id: Optional[str] = None

    quotation_status: Optional[QuotationStatus] = None
    created_at: Optional[datetime] = None

    # Fetch order, assigned by the cache on load; drives "first K visible".
    sequence: int = Field(default=0, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _split_references(cls, data: Any) -> Any:
        """assignedTo and salespersonId arrive either populated (object) or as bare ids."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for wire_key, ref_key, id_key in (
            ("assignedTo", "assigned_to", "assigned_to_id"),
            ("salespersonId", "salesperson", "salesperson_id"),
        ):
            value = data.pop(wire_key, None)
            if isinstance(value, dict):
                data[ref_key] = value
            elif value is not None:
                data[id_key] = str(value)

            ref = data.get(ref_key)
            if isinstance(ref, OwnerRef):
                ref_id = ref.id
            elif isinstance(ref, dict):
                ref_id = ref.get("_id") or ref.get("id")
            else:
                ref_id = None
            if ref_id and not data.get(id_key):
                data[id_key] = str(ref_id)
        return data

    @property
    def revenue(self) -> float:
        return self.expected_revenue or 0.0

    @property
    def margin(self) -> float:
        return self.expected_margin or 0.0

    def owner_id(self) -> Optional[str]:
        """Owning user id: assignee first, then salesperson."""
        return self.assigned_to_id or self.salesperson_id
