"""Plain-text rendering of a BoardView for the terminal."""

from pipeline_board.board.views import BoardView, ColumnView


def _money(value: float) -> str:
    return f"{value:,.2f}"


def format_column(column: ColumnView) -> list[str]:
    lines = [f"== {column.stage.value} ({column.count}) · {_money(column.revenue)} =="]
    if column.empty_message:
        lines.append(f"   {column.empty_message}")
    for card in column.cards:
        marker = "*" if card.highlighted else " "
        lines.append(f" {marker} [{card.deal_id}] {card.customer} · {card.deal_type} · {card.owner}")
        if card.quote:
            lines.append(f"     {card.quote.label}")
    if column.control_label:
        lines.append(f"   [{column.control_label}]")
    return lines


def format_board(view: BoardView) -> str:
    """Columns top to bottom, KPI strip first."""
    if view.blocking_error:
        return f"ERROR: {view.blocking_error}"
    if view.loading:
        return "Loading..."
    k = view.kpis
    lines = [
        f"Leads: {k.total_leads}  Won: {k.won_count}  In progress: {k.in_progress_count}",
        f"Sales target: {_money(k.sales_target)}  Revenue generated: {_money(k.revenue_generated)}",
        f"Expected margin: {_money(k.expected_margin)}  Margin earned: {_money(k.margin_earned)}",
        f"Notifications: {view.notification_count}",
    ]
    if view.error:
        lines.append(f"! {view.error}")
    for column in view.columns:
        lines.append("")
        lines.extend(format_column(column))
    return "\n".join(lines)
