"""Utility helpers for turning payments and summaries into text."""

from __future__ import annotations

import unicodedata
from typing import Iterable, List, Sequence

from .calendar import MonthGrid
from .i18n import (
    Language,
    day_names,
    format_date,
    get_language,
    method_label,
    month_title,
    status_label,
    text,
)
from .lifecycle import effective_status
from .models import Payment
from .summary import DashboardSummary

CELL_PAYEE_LIMIT = 2
CELL_WIDTH = 14


def format_currency(amount: int) -> str:
    """Whole-yen amount with grouping, e.g. ``¥120,000``."""

    sign = "-" if amount < 0 else ""
    return f"{sign}¥{abs(amount):,}"


def _display_width(value: str) -> int:
    # CJK characters occupy two terminal columns
    return sum(2 if unicodedata.east_asian_width(ch) in "WF" else 1 for ch in value)


def _ljust(value: str, width: int) -> str:
    return value + " " * max(0, width - _display_width(value))


def _truncate(value: str, width: int) -> str:
    out = ""
    for ch in value:
        if _display_width(out + ch) > width:
            break
        out += ch
    return out


def _column_widths(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> Sequence[int]:
    widths = [_display_width(h) for h in headers]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], _display_width(cell))
    return widths


def _format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    widths = _column_widths(headers, rows)

    def format_row(row: Sequence[str]) -> str:
        return " | ".join(_ljust(cell, widths[idx]) for idx, cell in enumerate(row))

    header_line = format_row(headers)
    separator = "-+-".join("-" * w for w in widths)
    body = "\n".join(format_row(row) for row in rows)
    return "\n".join([header_line, separator, body]) if body else "\n".join(
        [header_line, separator]
    )


def format_payment_table(
    payments: Iterable[Payment], language: Language | str = "en", today=None
) -> str:
    language = get_language(language)
    rows = [
        [
            str(payment.id),
            payment.payee_name,
            format_currency(payment.amount),
            payment.due_date.isoformat(),
            status_label(
                effective_status(payment, today) if today else payment.status, language
            ),
            method_label(payment.payment_method, language),
            payment.notes or "",
        ]
        for payment in payments
    ]
    headers = [
        "ID",
        text(language, "payee"),
        text(language, "amount"),
        text(language, "due_date"),
        text(language, "status"),
        text(language, "method"),
        text(language, "notes"),
    ]
    table = _format_table(headers, rows)
    if not rows:
        return table + "\n" + text(language, "no_payments")
    return table


def format_trash(payments: Iterable[Payment], language: Language | str = "en") -> str:
    language = get_language(language)
    rows = [
        [
            str(payment.id),
            payment.payee_name,
            format_currency(payment.amount),
            payment.due_date.isoformat(),
            f"{payment.deleted_at:%Y-%m-%d}" if payment.deleted_at else "",
        ]
        for payment in payments
    ]
    if not rows:
        return text(language, "no_deleted_payments")
    headers = [
        "ID",
        text(language, "payee"),
        text(language, "amount"),
        text(language, "due_date"),
        text(language, "deleted_date"),
    ]
    return text(language, "trash_view") + "\n" + _format_table(headers, rows)


def format_deferred(payments: Iterable[Payment], language: Language | str = "en") -> str:
    language = get_language(language)
    payments = list(payments)
    lines = [text(language, "deferred_payments")]
    if not payments:
        lines.append(text(language, "no_deferred_payments"))
        return "\n".join(lines)
    for payment in payments:
        lines.append(
            f"- {payment.payee_name} {format_currency(payment.amount)} | "
            f"{text(language, 'original_due')}: {payment.original_due_date} | "
            f"{text(language, 'planned_for')}: {payment.planned_payment_date} | "
            f"{text(language, 'method')}: {method_label(payment.payment_method, language)}"
        )
        if payment.deferred_reason:
            lines.append(f"  {text(language, 'deferred_reason')}: {payment.deferred_reason}")
        if payment.notes:
            lines.append(f"  {text(language, 'notes')}: {payment.notes}")
    return "\n".join(lines)


def format_dashboard(summary: DashboardSummary, language: Language | str = "en") -> str:
    language = get_language(language)
    lines = [
        text(language, "overview"),
        f"{format_date(summary.as_of, language)}",
        f"{text(language, 'weekly_total')}: {format_currency(summary.weekly_total)}",
        f"{text(language, 'monthly_total')}: {format_currency(summary.monthly_total)}",
        f"{text(language, 'pending_payments')}: {summary.pending_count}",
        f"{text(language, 'overdue_payments')}: {summary.overdue_count}",
        f"{text(language, 'deferred_count')}: {summary.deferred_count}",
        "",
        text(language, "upcoming_payments"),
    ]
    upcoming_rows = [
        [
            p.payee_name,
            format_currency(p.amount),
            p.due_date.isoformat(),
            status_label(effective_status(p, summary.as_of), language),
        ]
        for p in summary.upcoming
    ]
    lines.append(
        _format_table(
            [
                text(language, "payee"),
                text(language, "amount"),
                text(language, "due_date"),
                text(language, "status"),
            ],
            upcoming_rows,
        )
    )
    lines.append("")
    lines.append(format_deferred(summary.deferred, language))
    return "\n".join(lines)


def _cell_lines(cell, language: Language) -> List[str]:
    if cell is None:
        return []
    lines = [str(cell.day)]
    for payment in cell.payments[:CELL_PAYEE_LIMIT]:
        lines.append(_truncate(payment.payee_name, CELL_WIDTH))
    hidden = len(cell.payments) - CELL_PAYEE_LIMIT
    if hidden > 0:
        lines.append(f"+{hidden} {text(language, 'more')}")
    if cell.payments:
        lines.append(_truncate(format_currency(cell.total), CELL_WIDTH))
    return lines


def format_month_grid(grid: MonthGrid, language: Language | str = "en") -> str:
    """Render the month as a seven-column text calendar."""

    language = get_language(language)
    title = month_title(grid.year, grid.month, language)
    border = "+" + "+".join("-" * CELL_WIDTH for _ in range(7)) + "+"
    header = "|" + "|".join(_ljust(name, CELL_WIDTH) for name in day_names(language)) + "|"
    out = [title, border, header, border]
    for week in grid.weeks():
        columns = [_cell_lines(cell, language) for cell in week]
        height = max(1, max(len(col) for col in columns))
        for row_idx in range(height):
            out.append(
                "|"
                + "|".join(
                    _ljust(col[row_idx] if row_idx < len(col) else "", CELL_WIDTH)
                    for col in columns
                )
                + "|"
            )
        out.append(border)
    return "\n".join(out)
