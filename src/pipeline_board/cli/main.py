"""Main CLI entry point."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from pipeline_board.models.deal import Stage


def main() -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(prog="pipeline-board", description="Sales pipeline board")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings YAML (environment PIPELINE_BOARD_* overrides it)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log to stderr")
    parser.add_argument(
        "--source",
        default="http",
        choices=["http", "json"],
        help="Deal source: the CRM API or a local JSON export",
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="JSON export to read when --source json",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # show
    show_parser = subparsers.add_parser("show", help="Render the board")
    show_parser.add_argument("--owner", default="all", help="Only deals owned by this user id")
    show_parser.add_argument(
        "--date-range",
        default="all",
        choices=["all", "today", "week", "month", "year"],
        help="Only deals created in this range",
    )
    show_parser.add_argument(
        "--expand",
        action="append",
        default=[],
        choices=[s.value for s in Stage],
        help="Expand a column (repeatable)",
    )
    show_parser.add_argument("--json", action="store_true", help="Print the board view as JSON")

    # move
    move_parser = subparsers.add_parser("move", help="Move a deal to another stage")
    move_parser.add_argument("deal_id", help="Deal id")
    move_parser.add_argument("stage", choices=[s.value for s in Stage], help="Destination stage")

    # select
    select_parser = subparsers.add_parser("select", help="Record a deal as last viewed")
    select_parser.add_argument("deal_id", help="Deal id")

    # notifications
    notif_parser = subparsers.add_parser("notifications", help="List unread notifications")
    notif_parser.add_argument("--mark-all-read", action="store_true", help="Mark every listed notification read")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    settings = _load_settings(args.config)

    if args.command == "show":
        asyncio.run(_run_show(args, settings))
    elif args.command == "move":
        code = asyncio.run(_run_move(args, settings))
        raise SystemExit(code)
    elif args.command == "select":
        _run_select(args, settings)
    elif args.command == "notifications":
        asyncio.run(_run_notifications(args, settings))
    else:
        parser.print_help()


def _load_settings(config: Path | None):
    from pipeline_board.models.settings import BoardSettings

    try:
        base = BoardSettings.from_yaml(config) if config else None
        return BoardSettings.from_env(base)
    except (OSError, ValidationError, ValueError) as e:
        raise SystemExit(f"Invalid settings: {e}")


def _source_for(args: argparse.Namespace, settings):
    from pipeline_board.connectors import DealSourceError
    from pipeline_board.pipeline import build_source

    try:
        return build_source(settings, source_id=args.source, input_path=args.input)
    except (ValueError, DealSourceError) as e:
        raise SystemExit(str(e))


async def _run_show(args: argparse.Namespace, settings) -> None:
    """Run show command."""
    from pipeline_board.cli.render import format_board
    from pipeline_board.filtering import DealFilter
    from pipeline_board.pipeline import board_session

    criteria = DealFilter(owner=args.owner, date_range=args.date_range)
    source = _source_for(args, settings)
    try:
        async with board_session(settings, source=source, criteria=criteria) as board:
            if board.notifications is not None:
                # One poll so the badge is populated before printing.
                await board.notifications.poll_once()
            for stage in args.expand:
                if not board.expansion(Stage(stage)).expanded:
                    board.toggle_column(Stage(stage))
            view = board.render()
    finally:
        await source.aclose()

    if args.json:
        print(json.dumps(view.model_dump(mode="json"), indent=2))
    else:
        print(format_board(view))
    if view.blocking_error:
        raise SystemExit(1)


async def _run_move(args: argparse.Namespace, settings) -> int:
    """Run move command. Returns exit code (1 when the move was rolled back)."""
    from pipeline_board.board import DragOutcome, DragResult
    from pipeline_board.pipeline import board_session

    source = _source_for(args, settings)
    try:
        async with board_session(settings, source=source, poll=False) as board:
            if board.blocking_error:
                print(f"ERROR: {board.blocking_error}", file=sys.stderr)
                return 1
            deal = board.cache.get(args.deal_id)
            if deal is None:
                print(f"Deal not found on board: {args.deal_id}", file=sys.stderr)
                return 1
            column = board.column_deals(deal.stage)
            result = DragResult(
                deal_id=deal.id,
                source_stage=deal.stage,
                source_index=column.index(deal) if deal in column else 0,
                destination_stage=Stage(args.stage),
                destination_index=0,
            )
            outcome = await board.on_drag_end(result)
            buckets = board.aggregator.buckets(board.stages)
            error = board.error
    finally:
        await source.aclose()

    print(f"Move {args.deal_id} -> {args.stage}: {outcome.value}")
    for bucket in buckets:
        print(f"  {bucket.stage.value}: {bucket.count} deal(s), {bucket.revenue:,.2f}")
    if outcome is DragOutcome.ROLLED_BACK:
        print(error, file=sys.stderr)
        return 1
    return 0


def _run_select(args: argparse.Namespace, settings) -> None:
    """Run select command."""
    from pipeline_board.store import ViewState

    if settings.view_state_path is None:
        print(
            "No view_state_path configured; selection will not persist.",
            file=sys.stderr,
        )
    state = ViewState(settings.view_state_path)
    state.select(args.deal_id)
    print(f"Last viewed deal: {state.last_viewed_deal_id}")


async def _run_notifications(args: argparse.Namespace, settings) -> None:
    """Run notifications command."""
    from pipeline_board.notifications import NotificationPoller

    source = _source_for(args, settings)
    try:
        poller = NotificationPoller(source, settings.poll_interval)
        await poller.poll_once()
        unread = poller.unread
        for n in unread:
            opp = (n.deal.opportunity_id if n.deal else None) or "Unknown ID"
            customer = (n.deal.customer if n.deal else None) or "Customer"
            print(f"  [{n.id}] Quotation {n.status or 'Approved'}: {opp} · {customer}")
        if not unread:
            print("No new notifications")
        elif args.mark_all_read:
            await poller.mark_all_read()
            print(f"Marked {len(unread)} notification(s) read")
    finally:
        await source.aclose()


if __name__ == "__main__":
    main()
