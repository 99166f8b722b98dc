"""Owner display-name resolution for deal cards."""

from typing import Optional

from pipeline_board.models.deal import Deal, OwnerRef

OWNER_FALLBACK = "Owner N/A"


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _name_from_ref(ref: Optional[OwnerRef]) -> Optional[str]:
    """First + last name if either is non-blank, else username, else None."""
    if ref is None:
        return None
    full = f"{_clean(ref.first_name)} {_clean(ref.last_name)}".strip()
    if full:
        return full
    username = _clean(ref.username)
    return username or None


def resolve_owner(deal: Deal) -> str:
    """
    Human-readable owner for a deal. Tried in order:
    account manager, assignee name/username, salesperson name/username, fallback.
    Candidates are trimmed before the blank check.
    """
    manager = _clean(deal.account_manager)
    if manager:
        return manager
    for ref in (deal.assigned_to, deal.salesperson):
        name = _name_from_ref(ref)
        if name:
            return name
    return OWNER_FALLBACK
