"""Helpers for seeding a store from a CSV export or the built-in sample data."""

from __future__ import annotations

import csv
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Iterator, List

from .errors import ValidationError
from .fields import coerce_field
from .models import DocumentRef, Payment, PaymentMethod, PaymentStatus, PaymentType
from .store import PaymentStore, validate_payment


CSV_HEADER = [
    "Id",
    "Payee",
    "Amount",
    "Due Date",
    "Payment Type",
    "Payment Method",
    "Status",
    "Notes",
    "Document Path",
    "Document Name",
    "Original Due Date",
    "Planned Payment Date",
    "Deferred Reason",
    "Deleted At",
]


def _iter_clean_rows(path: Path) -> Iterator[List[str]]:
    with path.open(newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.reader(csvfile)
        for row in reader:
            if not any(field.strip() for field in row):
                continue
            yield row


def _blank_to_none(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


def _parse_row(record: dict) -> Payment:
    document = None
    if _blank_to_none(record["Document Path"]):
        document = DocumentRef(
            path=record["Document Path"].strip(),
            name=_blank_to_none(record["Document Name"]) or Path(record["Document Path"]).name,
        )
    deleted_at = _blank_to_none(record["Deleted At"])
    payment = Payment(
        id=int(record["Id"]),
        payee_name=(record["Payee"] or "").strip(),
        amount=coerce_field("amount", record["Amount"]),
        due_date=coerce_field("due_date", record["Due Date"]),
        payment_type=coerce_field("payment_type", record["Payment Type"] or PaymentType.ONE_TIME),
        payment_method=coerce_field(
            "payment_method", record["Payment Method"] or PaymentMethod.BANK_TRANSFER
        ),
        status=coerce_field("status", record["Status"] or PaymentStatus.UPCOMING),
        notes=coerce_field("notes", record["Notes"]),
        document=document,
        original_due_date=coerce_field("original_due_date", _blank_to_none(record["Original Due Date"])),
        planned_payment_date=coerce_field(
            "planned_payment_date", _blank_to_none(record["Planned Payment Date"])
        ),
        deferred_reason=coerce_field("deferred_reason", record["Deferred Reason"]),
        deleted_at=datetime.fromisoformat(deleted_at) if deleted_at else None,
    )
    return validate_payment(payment)


def load_payments(path: str | Path) -> List[Payment]:
    """Load payments from a CSV file with :data:`CSV_HEADER` columns."""

    path = Path(path)
    rows = list(_iter_clean_rows(path))
    if not rows:
        return []

    header, *data_rows = rows
    if [cell.strip() for cell in header] != CSV_HEADER:
        raise ValueError("Unexpected CSV header")

    payments: List[Payment] = []
    for line_no, raw in enumerate(data_rows, start=2):
        record = dict(zip(CSV_HEADER, raw + [""] * (len(CSV_HEADER) - len(raw))))
        if not record["Id"].strip():
            continue
        try:
            payments.append(_parse_row(record))
        except (ValidationError, ValueError) as exc:
            raise ValueError(f"Row {line_no}: {exc}") from exc
    return payments


def build_store(payments: Iterable[Payment], store: PaymentStore | None = None) -> PaymentStore:
    if store is None:
        store = PaymentStore()
    for payment in payments:
        store.add(payment)
    return store


def sample_payments() -> List[Payment]:
    """The demo schedule for January 2024 shown on first launch."""

    m = PaymentMethod
    return [
        Payment(
            id=1,
            payee_name="Tokyo Electric Power",
            amount=15000,
            due_date=date(2024, 1, 15),
            payment_type=PaymentType.MONTHLY,
            payment_method=m.BANK_TRANSFER,
            notes="Monthly electricity bill",
            document=DocumentRef("/uploads/tokyo-electric-invoice.pdf", "January_Electric_Bill.pdf"),
        ),
        Payment(
            id=2,
            payee_name="NTT Communications",
            amount=8500,
            due_date=date(2024, 1, 15),
            payment_type=PaymentType.MONTHLY,
            payment_method=m.CREDIT_CARD,
            status=PaymentStatus.PENDING,
            notes="Internet service",
            document=DocumentRef("/uploads/ntt-invoice.pdf", "NTT_Internet_Bill.pdf"),
        ),
        Payment(
            id=3,
            payee_name="Office Rent",
            amount=120000,
            due_date=date(2024, 1, 20),
            payment_type=PaymentType.MONTHLY,
            payment_method=m.BANK_TRANSFER,
            notes="Monthly office rent",
            document=DocumentRef("/uploads/rent-contract.pdf", "Office_Rent_Contract.pdf"),
        ),
        Payment(
            id=4,
            payee_name="Software License",
            amount=12000,
            due_date=date(2024, 1, 18),
            payment_method=m.CREDIT_CARD,
            notes="Adobe Creative Suite",
        ),
        Payment(
            id=5,
            payee_name="Marketing Campaign",
            amount=45000,
            due_date=date(2024, 1, 10),
            payment_method=m.BANK_TRANSFER,
            status=PaymentStatus.DEFERRED,
            notes="Deferred due to budget review - will pay after Q1 results",
            document=DocumentRef("/uploads/marketing-invoice.pdf", "Marketing_Campaign_Invoice.pdf"),
            original_due_date=date(2024, 1, 10),
            planned_payment_date=date(2024, 4, 15),
            deferred_reason="Budget review pending",
        ),
        Payment(
            id=6,
            payee_name="Equipment Purchase",
            amount=85000,
            due_date=date(2024, 1, 5),
            payment_method=m.BANK_TRANSFER,
            status=PaymentStatus.DEFERRED,
            notes="Equipment delivery delayed, payment deferred accordingly",
            original_due_date=date(2024, 1, 5),
            planned_payment_date=date(2024, 3, 1),
            deferred_reason="Equipment delivery delayed",
        ),
        Payment(
            id=7,
            payee_name="Insurance Premium",
            amount=25000,
            due_date=date(2024, 1, 10),
            payment_type=PaymentType.MONTHLY,
            payment_method=m.BANK_TRANSFER,
            status=PaymentStatus.PAID,
            notes="Health insurance",
        ),
        Payment(
            id=8,
            payee_name="Old Subscription",
            amount=5000,
            due_date=date(2024, 1, 8),
            deleted_at=datetime(2024, 1, 10),
        ),
        Payment(
            id=9,
            payee_name="Cancelled Service",
            amount=12000,
            due_date=date(2024, 1, 15),
            deleted_at=datetime(2024, 1, 8),
        ),
    ]
