"""Filter engine narrowing the rendered deal set (owner, creation date)."""

from datetime import datetime
from typing import Callable, Optional

from pydantic import BaseModel, Field, field_validator

from pipeline_board.models.deal import Deal

from .rules import ALL, DATE_RANGES, apply_date_range_rule, apply_owner_rule


def _local_now() -> datetime:
    return datetime.now().astimezone()


class DealFilter(BaseModel):
    """Admin board filters; "all" disables a criterion."""

    owner: str = Field(default=ALL, description="'all' or a user id")
    date_range: str = Field(default=ALL, description="all | today | week | month | year")

    @field_validator("date_range")
    @classmethod
    def _known_range(cls, value: str) -> str:
        value = (value or ALL).lower()
        if value not in DATE_RANGES:
            raise ValueError(f"Unknown date range: {value}. Available: {list(DATE_RANGES)}")
        return value

    @property
    def active(self) -> bool:
        return self.owner != ALL or self.date_range != ALL


class FilterEngine:
    """
    Applies DealFilter criteria to deals.
    Filters only narrow what is shown; they never touch the cache.
    """

    def __init__(
        self,
        criteria: Optional[DealFilter] = None,
        now: Callable[[], datetime] = _local_now,
    ):
        self.criteria = criteria or DealFilter()
        self._now = now

    def explain(self, deal: Deal) -> tuple[bool, list[str]]:
        """Apply all rules and return (passed, explanations)."""
        now = self._now()
        owner_ok, owner_why = apply_owner_rule(deal, self.criteria.owner)
        date_ok, date_why = apply_date_range_rule(deal, self.criteria.date_range, now)
        return owner_ok and date_ok, [owner_why, date_why]

    def passes(self, deal: Deal) -> bool:
        return self.explain(deal)[0]

    def apply(self, deals: tuple[Deal, ...] | list[Deal]) -> list[Deal]:
        """Matching deals, original order preserved."""
        if not self.criteria.active:
            return list(deals)
        return [d for d in deals if self.passes(d)]
