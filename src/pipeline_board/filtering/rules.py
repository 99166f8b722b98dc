"""Board filter rules. Each returns (passed, explanation)."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from pipeline_board.models.deal import Deal

ALL = "all"
DATE_RANGES = (ALL, "today", "week", "month", "year")


def range_start(date_range: str, now: datetime) -> Optional[datetime]:
    """Start of the named range in now's timezone; weeks start on Monday."""
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if date_range == "today":
        return today
    if date_range == "week":
        return today - timedelta(days=today.weekday())
    if date_range == "month":
        return today.replace(day=1)
    if date_range == "year":
        return today.replace(month=1, day=1)
    return None


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def apply_owner_rule(deal: Deal, owner: str) -> tuple[bool, str]:
    """Owner filter matches the assignee, falling back to the salesperson."""
    if owner == ALL:
        return True, "Owner: any"
    deal_owner = deal.owner_id()
    if deal_owner == owner:
        return True, f"Owner {owner} matched"
    return False, f"Excluded: owner {deal_owner or 'unassigned'} is not {owner}"


def apply_date_range_rule(deal: Deal, date_range: str, now: datetime) -> tuple[bool, str]:
    """Created strictly after the range start; undated deals fail any bounded range."""
    start = range_start(date_range, now)
    if start is None:
        return True, "Created: any time"
    if deal.created_at is None:
        return False, f"Excluded: no creation date for range '{date_range}'"
    if _as_aware(deal.created_at) > _as_aware(start):
        return True, f"Created within '{date_range}'"
    return False, f"Excluded: created before '{date_range}' start {start.date().isoformat()}"
