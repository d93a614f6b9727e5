from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Iterable, List, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

from .calendar import build_month_grid, deferred_payments
from .i18n import (
    Language,
    day_names,
    get_language,
    method_label,
    month_title,
    status_label,
    text,
    type_label,
)
from .lifecycle import effective_status
from .models import Payment

YEN_FORMAT = '"¥"#,##0'
DATE_FORMAT = "yyyy-mm-dd"


def _write_header(ws, headers: Sequence[str]) -> None:
    ws.append(list(headers))
    for cell in ws[1]:
        cell.font = Font(bold=True)


def _fit_columns(ws, min_width: int = 8, max_width: int = 48) -> None:
    for column in ws.columns:
        letter = column[0].column_letter
        longest = max((len(str(c.value)) for c in column if c.value is not None), default=0)
        ws.column_dimensions[letter].width = max(min_width, min(max_width, longest + 2))


def _payments_sheet(ws, payments: Sequence[Payment], language: Language, today: date | None) -> None:
    ws.title = text(language, "table_view")
    _write_header(
        ws,
        [
            "ID",
            text(language, "payee"),
            text(language, "amount"),
            text(language, "due_date"),
            text(language, "type"),
            text(language, "method"),
            text(language, "status"),
            text(language, "notes"),
            text(language, "document"),
        ],
    )
    for payment in payments:
        status = effective_status(payment, today) if today else payment.status
        ws.append(
            [
                payment.id,
                payment.payee_name,
                payment.amount,
                payment.due_date,
                type_label(payment.payment_type, language),
                method_label(payment.payment_method, language),
                status_label(status, language),
                payment.notes,
                payment.document.name if payment.document else None,
            ]
        )
    for row_idx in range(2, ws.max_row + 1):
        ws.cell(row=row_idx, column=3).number_format = YEN_FORMAT
        ws.cell(row=row_idx, column=4).number_format = DATE_FORMAT
    _fit_columns(ws)


def _calendar_sheet(ws, payments: Sequence[Payment], year: int, month: int, language: Language) -> None:
    ws.title = text(language, "calendar_view")
    grid = build_month_grid(payments, year, month)
    ws.append([month_title(year, month, language)])
    ws["A1"].font = Font(bold=True)
    ws.append(list(day_names(language)))
    for cell in ws[2]:
        cell.font = Font(bold=True)

    for week in grid.weeks():
        row: List[object] = []
        for cell in week:
            if cell is None:
                row.append(None)
                continue
            lines = [str(cell.day)]
            lines.extend(f"{p.payee_name} ¥{p.amount:,}" for p in cell.payments)
            if cell.payments:
                lines.append(f"{text(language, 'daily_total')}: ¥{cell.total:,}")
            row.append("\n".join(lines))
        ws.append(row)
        for xl_cell in ws[ws.max_row]:
            xl_cell.alignment = Alignment(wrap_text=True, vertical="top")

    for column in "ABCDEFG":
        ws.column_dimensions[column].width = 24


def _deferred_sheet(ws, payments: Sequence[Payment], language: Language) -> None:
    ws.title = text(language, "deferred_payments")
    _write_header(
        ws,
        [
            "ID",
            text(language, "payee"),
            text(language, "amount"),
            text(language, "original_due"),
            text(language, "planned_for"),
            text(language, "deferred_reason"),
        ],
    )
    for payment in deferred_payments(payments):
        ws.append(
            [
                payment.id,
                payment.payee_name,
                payment.amount,
                payment.original_due_date,
                payment.planned_payment_date,
                payment.deferred_reason,
            ]
        )
    for row_idx in range(2, ws.max_row + 1):
        ws.cell(row=row_idx, column=3).number_format = YEN_FORMAT
        ws.cell(row=row_idx, column=4).number_format = DATE_FORMAT
        ws.cell(row=row_idx, column=5).number_format = DATE_FORMAT
    _fit_columns(ws)


def _trash_sheet(ws, trashed: Sequence[Payment], language: Language) -> None:
    ws.title = text(language, "trash_view")
    _write_header(
        ws,
        ["ID", text(language, "payee"), text(language, "amount"), text(language, "deleted_date")],
    )
    for payment in trashed:
        ws.append([payment.id, payment.payee_name, payment.amount, payment.deleted_at])
    _fit_columns(ws)


def export_workbook(
    output_path: Path,
    payments: Iterable[Payment],
    year: int,
    month: int,
    trashed: Iterable[Payment] = (),
    language: Language | str = "en",
    today: date | None = None,
) -> Path:
    """
    Write the payment table, a month calendar, the deferred list and the trash
    to an ``.xlsx`` workbook at ``output_path``.
    """

    language = get_language(language)
    payments = list(payments)
    trashed = list(trashed)

    wb = Workbook()
    _payments_sheet(wb.active, payments, language, today)
    _calendar_sheet(wb.create_sheet(), payments, year, month, language)
    _deferred_sheet(wb.create_sheet(), payments, language)
    _trash_sheet(wb.create_sheet(), trashed, language)

    output_path = Path(output_path)
    wb.save(str(output_path))
    return output_path
