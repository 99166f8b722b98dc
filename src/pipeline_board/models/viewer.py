"""Viewer identity used to scope the deal collection."""

from typing import Optional

from pydantic import BaseModel, Field

from pipeline_board.models.deal import Deal

RESTRICTED_ROLES = frozenset({"salesperson"})


class Viewer(BaseModel):
    """Current user of the board."""

    user_id: Optional[str] = None
    role: str = Field(default="admin", description="admin | subadmin | salesperson")

    @property
    def restricted(self) -> bool:
        return self.role.lower() in RESTRICTED_ROLES

    def can_see(self, deal: Deal) -> bool:
        """Admins see everything; salespeople only deals they own or are assigned."""
        if not self.restricted:
            return True
        if not self.user_id:
            return False
        return deal.salesperson_id == self.user_id or deal.assigned_to_id == self.user_id

    def scope(self, deals: list[Deal]) -> list[Deal]:
        return [d for d in deals if self.can_see(d)]
