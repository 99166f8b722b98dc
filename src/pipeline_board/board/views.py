"""Render-surface records produced by PipelineBoard.render()."""

from typing import Optional

from pydantic import BaseModel, Field

from pipeline_board.board.aggregation import PipelineKpis
from pipeline_board.models.deal import Deal, QuotationStatus, Stage
from pipeline_board.owners import resolve_owner

EMPTY_COLUMN_MESSAGE = "No deals"

_QUOTE_TONES = {
    QuotationStatus.APPROVED: "success",
    QuotationStatus.REJECTED: "error",
    QuotationStatus.PENDING: "warning",
}


class QuoteChip(BaseModel):
    label: str
    tone: str  # success | error | warning


class CardView(BaseModel):
    """One deal card."""

    deal_id: str
    element_id: str
    customer: str
    deal_type: str
    owner: str
    highlighted: bool = False
    quote: Optional[QuoteChip] = None

    @classmethod
    def from_deal(cls, deal: Deal, stage: Stage, highlighted: bool) -> "CardView":
        quote = None
        # Quotation status only matters while the deal is being qualified.
        if stage == Stage.QUALIFIED and deal.quotation_status is not None:
            quote = QuoteChip(
                label=f"Quote: {deal.quotation_status.value}",
                tone=_QUOTE_TONES[deal.quotation_status],
            )
        return cls(
            deal_id=deal.id,
            element_id=f"deal-card-{deal.id}",
            customer=deal.customer.strip() or "No Name",
            deal_type=deal.deal_type.strip() or "-",
            owner=resolve_owner(deal),
            highlighted=highlighted,
            quote=quote,
        )


class ColumnView(BaseModel):
    """One stage column with its header numbers."""

    stage: Stage
    count: int
    revenue: float
    expanded: bool = False
    cards: list[CardView] = Field(default_factory=list)
    hidden_count: int = 0
    control_label: Optional[str] = None
    empty_message: Optional[str] = None


class BoardView(BaseModel):
    """Everything a shell needs to draw the board."""

    columns: list[ColumnView] = Field(default_factory=list)
    kpis: PipelineKpis = Field(default_factory=PipelineKpis)
    loading: bool = False
    error: Optional[str] = None
    blocking_error: Optional[str] = None
    highlighted_deal_id: Optional[str] = None
    notification_count: int = 0

    def column(self, stage: Stage) -> Optional[ColumnView]:
        for col in self.columns:
            if col.stage == stage:
                return col
        return None
