"""Data models used by the payment schedule tracker."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union


class PaymentStatus(Enum):
    """Where a payment sits in its lifecycle."""

    UPCOMING = "upcoming"
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    DEFERRED = "deferred"


class PaymentType(Enum):
    """Recurrence classification. Informational only."""

    ONE_TIME = "one-time"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class PaymentMethod(Enum):
    """How the payment is settled."""

    BANK_TRANSFER = "bank-transfer"
    CREDIT_CARD = "credit-card"
    CHECK = "check"
    CASH = "cash"
    OTHER = "other"


@dataclass(frozen=True)
class DocumentRef:
    """An attached invoice held by the document store."""

    path: str
    name: str


@dataclass(frozen=True)
class Payment:
    """A single scheduled or completed payment."""

    id: int
    payee_name: str
    amount: int
    due_date: date
    payment_type: PaymentType = PaymentType.ONE_TIME
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    status: PaymentStatus = PaymentStatus.UPCOMING
    notes: Optional[str] = None
    document: Optional[DocumentRef] = None
    original_due_date: Optional[date] = None
    planned_payment_date: Optional[date] = None
    deferred_reason: Optional[str] = None
    deleted_at: Optional[datetime] = None

    @property
    def is_deferred(self) -> bool:
        return self.status is PaymentStatus.DEFERRED

    @property
    def is_trashed(self) -> bool:
        """Return ``True`` while the record sits in the trash partition."""

        return self.deleted_at is not None


@dataclass(frozen=True)
class PaymentDraft:
    """Input collected by the Add form.

    Values may arrive as form strings (``"15000"``, ``"2024-01-20"``,
    ``"bank-transfer"``); the store coerces and validates them on create.
    """

    payee_name: str
    amount: Union[int, str]
    due_date: Union[date, str]
    payment_type: Union[PaymentType, str] = PaymentType.ONE_TIME
    payment_method: Union[PaymentMethod, str] = PaymentMethod.BANK_TRANSFER
    notes: Optional[str] = None
    document: Optional[DocumentRef] = None
