"""Conversion of form and CSV input into payment field values."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Dict, Type

from .errors import ValidationError
from .models import PaymentMethod, PaymentStatus, PaymentType

DATE_FIELDS = {"due_date", "original_due_date", "planned_payment_date"}
ENUM_FIELDS: Dict[str, Type[Enum]] = {
    "status": PaymentStatus,
    "payment_type": PaymentType,
    "payment_method": PaymentMethod,
}


def coerce_enum(field: str, value):
    enum_cls = ENUM_FIELDS[field]
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value!r}", field=field) from None


def coerce_date(field: str, value):
    if value is None or isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, datetime):
        return value.date()
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(f"Invalid date for {field}: {value!r}", field=field) from None


def coerce_amount(value) -> int:
    if isinstance(value, bool):
        raise ValidationError("Amount must be a whole number", field="amount")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    try:
        return int(str(value).strip().replace(",", ""))
    except ValueError:
        raise ValidationError(f"Amount must be a whole number, got {value!r}", field="amount") from None


def coerce_field(field: str, value):
    """Convert form or CSV input for ``field`` into its model type."""

    if field in DATE_FIELDS:
        return coerce_date(field, value)
    if field in ENUM_FIELDS:
        return coerce_enum(field, value)
    if field == "amount":
        return coerce_amount(value)
    if field in ("notes", "deferred_reason") and value is not None:
        return str(value).strip() or None
    return value
