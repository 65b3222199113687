"""Console interface for the expense tracker."""

from __future__ import annotations

import argparse
import sys
from decimal import Decimal
from pathlib import Path
from typing import Iterable, List, Optional

from common.config import Settings
from common.display import CHART_CAPTION, amount_tone, build_segments, format_currency
from common.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from common.logging_setup import configure_logging
from common.models import BUSINESS, PERSONAL, ExpenseItem, ViewMode
from common.services import ExpenseStore
from common.storage import JSONStorage
from common.validators import parse_amount

TONE_MARKERS = {"high": "++", "positive": "+", "negative": "-"}


def _parse_amount(value: str) -> Decimal:
    try:
        return parse_amount(value, "Amount")
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _parse_position(value: str) -> int:
    try:
        position = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid position '{value}'") from exc
    if position < 0:
        raise argparse.ArgumentTypeError("Positions start at 0")
    return position


def _parse_mode(value: str) -> ViewMode:
    try:
        return ViewMode.parse(value)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _load_store(settings: Settings) -> ExpenseStore:
    return ExpenseStore(JSONStorage(settings.data_dir), key=settings.storage_key)


def _format_expense(position: int, item: ExpenseItem, currency: str) -> str:
    marker = TONE_MARKERS[amount_tone(item.amount)]
    return (
        f"{position:>3}  {item.name:<24} {item.category:<12} "
        f"{format_currency(item.amount, currency):>16} {marker}"
    )


def _print_items(items: Iterable[ExpenseItem], currency: str) -> None:
    for position, item in enumerate(items):
        print(_format_expense(position, item, currency))


def handle_add(args: argparse.Namespace, store: ExpenseStore, settings: Settings) -> None:
    item = store.add(ExpenseItem.create(args.name, args.category, args.amount))
    print(f"Expense added: {item.name} ({item.category}) "
          f"{format_currency(item.amount, settings.currency)} [{item.id}]")


def handle_list(args: argparse.Namespace, store: ExpenseStore, settings: Settings) -> None:
    items = list(store.view(args.mode))
    if not items:
        print(f"No expenses found ({store.scope_label(args.mode)}).")
        return
    print(f"{store.scope_label(args.mode)}: {len(items)} expenses")
    _print_items(items, settings.currency)


def handle_delete(args: argparse.Namespace, store: ExpenseStore, settings: Settings) -> None:
    removed = store.remove(args.positions, args.mode)
    for item in removed:
        print(f"Expense deleted: {item.name} ({item.category}) "
              f"{format_currency(item.amount, settings.currency)}")


def handle_chart(args: argparse.Namespace, store: ExpenseStore, settings: Settings) -> None:
    segments = build_segments(store.chart_items(args.mode), args.mode)
    print(f"{store.scope_label(args.mode)} {CHART_CAPTION}")
    if not segments:
        print("No expenses to chart.")
        return
    for segment in segments:
        share = segment.extent / 360 * 100
        print(f"  {segment.label:<24} {format_currency(segment.amount, settings.currency):>16} {share:5.1f}%")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Expense Tracker CLI")
    parser.add_argument(
        "--data-dir",
        default=None,
        type=Path,
        help="Directory to store JSON data (default: $EXPENSE_TRACKER_DATA_DIR or ./data)",
    )
    parser.add_argument("--log-level", help="Logging level (default: $EXPENSE_TRACKER_LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_mode_option(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--mode",
            type=_parse_mode,
            default=ViewMode.BOTH,
            help="personal, business or both (default: both)",
        )

    add = subparsers.add_parser("add", help="Add a new expense")
    add.add_argument("name")
    add.add_argument("category", help=f"Usually {PERSONAL} or {BUSINESS}")
    add.add_argument("amount", type=_parse_amount)

    list_cmd = subparsers.add_parser("list", help="List expenses with their row positions")
    add_mode_option(list_cmd)

    delete = subparsers.add_parser("delete", help="Delete expenses by row position")
    delete.add_argument("positions", nargs="+", type=_parse_position)
    add_mode_option(delete)

    chart = subparsers.add_parser("chart", help="Show the chart segments")
    add_mode_option(chart)

    return parser


HANDLERS = {
    "add": handle_add,
    "list": handle_list,
    "delete": handle_delete,
    "chart": handle_chart,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings.from_env().with_data_dir(args.data_dir)
    configure_logging(args.log_level or settings.log_level)
    store = _load_store(settings)

    try:
        HANDLERS[args.command](args, store, settings)
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
