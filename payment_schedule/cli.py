"""Command line entry point for viewing a payment schedule."""

from __future__ import annotations

import argparse
import logging
import os
from datetime import date, datetime, time
from pathlib import Path
from typing import Iterable

from .calendar import build_month_grid, deferred_payments
from .errors import PaymentScheduleError
from .excel import export_workbook
from .formatting import (
    format_dashboard,
    format_deferred,
    format_month_grid,
    format_payment_table,
    format_trash,
)
from .i18n import DEFAULT_LANGUAGE, Language, get_language, text
from .loader import build_store, load_payments, sample_payments
from .periods import parse_month
from .store import SORT_KEYS, PaymentFilter, PaymentStore
from .summary import build_dashboard_summary

logger = logging.getLogger("payment_schedule.cli")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_LEVEL_ENV = "PAYMENT_SCHEDULE_LOG_LEVEL"
STATUS_CHOICES = ["all", "upcoming", "pending", "paid", "overdue", "deferred"]


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show the payment schedule as a dashboard, calendar or table."
    )
    parser.add_argument(
        "--csv",
        type=Path,
        help="CSV file of payments to load. Defaults to the built-in sample schedule.",
    )
    parser.add_argument(
        "--language",
        choices=[language.value for language in Language],
        default=DEFAULT_LANGUAGE.value,
        help="Language for labels (default: en).",
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        help="Override today's date, e.g. to view the sample data as of 2024-01-12.",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV, "WARNING"),
        help=f"Logging level (default: ${LOG_LEVEL_ENV} or WARNING).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the text output to the specified file instead of stdout.",
    )

    commands = parser.add_subparsers(dest="command")
    commands.add_parser("dashboard", help="Totals, counts and upcoming payments.")

    calendar = commands.add_parser("calendar", help="Month calendar with payments per day.")
    calendar.add_argument(
        "--month",
        type=parse_month,
        help="Month to display as YYYY-MM (default: the --as-of month).",
    )

    table = commands.add_parser("table", help="All active payments as a table.")
    table.add_argument("--status", choices=STATUS_CHOICES, default="all")
    table.add_argument("--search", help="Case-insensitive match on payee or notes.")
    table.add_argument("--sort", choices=sorted(SORT_KEYS), help="Column to sort by.")
    table.add_argument(
        "--descending", action="store_true", help="Reverse the --sort order."
    )

    commands.add_parser("deferred", help="Payments postponed by decision.")
    commands.add_parser("trash", help="Deleted payments awaiting restore or removal.")

    export = commands.add_parser("export", help="Write an Excel workbook.")
    export.add_argument("excel_output", type=Path, help="Path of the .xlsx file to write.")
    export.add_argument("--month", type=parse_month, help="Calendar month as YYYY-MM.")

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "dashboard"
    return args


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def load_store(csv_path: Path | None, today: date | None = None) -> PaymentStore:
    store = PaymentStore(clock=(lambda: datetime.combine(today, time())) if today else None)
    if csv_path is None:
        return build_store(sample_payments(), store)
    if not csv_path.exists():
        raise SystemExit(f"CSV file not found: {csv_path}")
    try:
        payments = load_payments(csv_path)
        if not payments:
            raise SystemExit("No payments found in the CSV file.")
        return build_store(payments, store)
    except ValueError as exc:
        raise SystemExit(f"Failed to load {csv_path}: {exc}")


def render(args: argparse.Namespace, store: PaymentStore, today: date) -> str:
    language = get_language(args.language)
    payments = list(store.list())

    if args.command == "dashboard":
        return format_dashboard(build_dashboard_summary(payments, today), language)
    if args.command == "calendar":
        year, month = args.month or (today.year, today.month)
        return format_month_grid(build_month_grid(payments, year, month), language)
    if args.command == "table":
        criteria = PaymentFilter.from_text(args.status, args.search)
        sort_key = f"-{args.sort}" if args.sort and args.descending else args.sort
        rows = store.list(criteria, sort_key=sort_key)
        return text(language, "table_view") + "\n" + format_payment_table(rows, language, today)
    if args.command == "deferred":
        return format_deferred(deferred_payments(payments), language)
    if args.command == "trash":
        return format_trash(store.trash(sort_key="-id"), language)
    if args.command == "export":
        year, month = args.month or (today.year, today.month)
        path = export_workbook(
            args.excel_output,
            payments,
            year,
            month,
            trashed=store.trash(),
            language=language,
            today=today,
        )
        return f"Wrote {path}"
    raise SystemExit(f"Unknown command: {args.command}")


def run(argv: Iterable[str] | None = None) -> str:
    args = parse_args(argv)
    configure_logging(args.log_level)

    store = load_store(args.csv, args.as_of)
    today = store.today()
    logger.debug("Loaded %d active payments, rendering %s as of %s", len(store), args.command, today)

    try:
        output_text = render(args, store, today)
    except PaymentScheduleError as exc:
        raise SystemExit(str(exc))

    if args.output:
        args.output.write_text(output_text + "\n", encoding="utf-8")
    else:
        print(output_text)
    return output_text


def main() -> None:
    run()


if __name__ == "__main__":
    main()
