"""In-memory owner of payment records and their active/trash partitions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from datetime import date, datetime
from typing import Callable, Dict, Iterable, Iterator

from .errors import ConfirmationRequiredError, NotFoundError, ValidationError
from .fields import (
    DATE_FIELDS,
    ENUM_FIELDS,
    coerce_amount,
    coerce_date,
    coerce_enum,
    coerce_field,
)
from .lifecycle import effective_status
from .models import Payment, PaymentDraft, PaymentStatus

logger = logging.getLogger("payment_schedule.store")

Clock = Callable[[], datetime]

_DEFERRED_FIELDS = ("original_due_date", "planned_payment_date", "deferred_reason")
# status and deferral bookkeeping change only through LifecycleController
_PATCHABLE = {f.name for f in fields(Payment)} - {"id", "deleted_at", "status", *_DEFERRED_FIELDS}

def _to_lower(value: str | None) -> str | None:
    if not value:
        return None
    return value.strip().lower()


@dataclass(frozen=True)
class PaymentFilter:
    """Predicate used by the table view: status equality plus free-text search."""

    status: PaymentStatus | None = None
    search: str | None = None

    @classmethod
    def from_text(cls, status: str | None = None, search: str | None = None) -> "PaymentFilter":
        status = _to_lower(status)
        if status in (None, "all"):
            return cls(search=_to_lower(search))
        return cls(status=coerce_enum("status", status), search=_to_lower(search))

    def matches(self, payment: Payment, today: date | None = None) -> bool:
        if self.status is not None:
            current = effective_status(payment, today) if today else payment.status
            if current is not self.status:
                return False
        if self.search:
            needle = self.search.lower()
            payee = (payment.payee_name or "").lower()
            notes = (payment.notes or "").lower()
            if needle not in payee and needle not in notes:
                return False
        return True


SORT_KEYS: Dict[str, Callable[[Payment], object]] = {
    "id": lambda p: p.id,
    "due_date": lambda p: p.due_date,
    "amount": lambda p: p.amount,
    "payee": lambda p: p.payee_name.lower(),
    "status": lambda p: p.status.value,
}


def resolve_sort_key(name: str | None):
    """Turn ``"amount"`` or ``"-due_date"`` into ``(key, reverse)``."""

    if not name:
        return None, False
    reverse = name.startswith("-")
    key = SORT_KEYS.get(name.lstrip("-"))
    if key is None:
        raise ValidationError(
            f"Unknown sort key {name!r}; choose from {', '.join(sorted(SORT_KEYS))}",
            field="sort",
        )
    return key, reverse


class PaymentView:
    """Lazy, restartable sequence over one partition of a store.

    Each iteration re-reads the partition, so a view reflects later changes.
    """

    def __init__(
        self,
        source: Callable[[], Iterable[Payment]],
        criteria: PaymentFilter | None = None,
        sort_key: str | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._source = source
        self._criteria = criteria
        self._key, self._reverse = resolve_sort_key(sort_key)
        self._today = today

    def __iter__(self) -> Iterator[Payment]:
        today = self._today() if self._today else None
        matching = (
            payment
            for payment in tuple(self._source())
            if self._criteria is None or self._criteria.matches(payment, today)
        )
        if self._key is None:
            yield from matching
        else:
            yield from sorted(matching, key=self._key, reverse=self._reverse)


def validate_payment(payment: Payment) -> Payment:
    """Check the record-level invariants and return the payment unchanged."""

    if not isinstance(payment.payee_name, str) or not payment.payee_name.strip():
        raise ValidationError("Payee name is required", field="payee_name")
    if not isinstance(payment.amount, int) or isinstance(payment.amount, bool):
        raise ValidationError("Amount must be a whole number", field="amount")
    if payment.amount < 0:
        raise ValidationError("Amount cannot be negative", field="amount")
    if not isinstance(payment.due_date, date):
        raise ValidationError("Due date is required", field="due_date")
    for name in sorted(DATE_FIELDS):
        value = getattr(payment, name)
        if value is not None and (not isinstance(value, date) or isinstance(value, datetime)):
            raise ValidationError(f"{name} must be a date", field=name)
    for name, enum_cls in ENUM_FIELDS.items():
        if not isinstance(getattr(payment, name), enum_cls):
            raise ValidationError(f"Invalid {name}", field=name)

    if payment.is_deferred:
        if payment.original_due_date is None or payment.planned_payment_date is None:
            raise ValidationError(
                "Deferred payments need an original due date and a planned payment date",
                field="planned_payment_date",
            )
        if payment.due_date != payment.original_due_date:
            raise ValidationError(
                "A deferred payment keeps its original due date", field="due_date"
            )
    else:
        for name in _DEFERRED_FIELDS:
            if getattr(payment, name) is not None:
                raise ValidationError(
                    f"{name} is only allowed on deferred payments", field=name
                )
    return payment


class PaymentStore:
    """Exclusive owner of payment records.

    Active and trashed records live in separate insertion-ordered maps. Ids
    come from a counter that never goes backwards, so an id is never reissued
    even after a permanent delete.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or datetime.now
        self._active: Dict[int, Payment] = {}
        self._trash: Dict[int, Payment] = {}
        self._next_id = 1

    def today(self) -> date:
        return self._clock().date()

    # -- creation -----------------------------------------------------------

    def create(self, draft: PaymentDraft) -> Payment:
        """Validate ``draft`` and insert it as a new upcoming payment."""

        payee_name = (draft.payee_name or "").strip()
        payment = validate_payment(
            Payment(
                id=self._next_id,
                payee_name=payee_name,
                amount=coerce_amount(draft.amount),
                due_date=coerce_date("due_date", draft.due_date),
                payment_type=coerce_enum("payment_type", draft.payment_type),
                payment_method=coerce_enum("payment_method", draft.payment_method),
                status=PaymentStatus.UPCOMING,
                notes=coerce_field("notes", draft.notes),
                document=draft.document,
            )
        )
        self._active[payment.id] = payment
        self._next_id += 1
        logger.info("Created payment %s for %s (%s)", payment.id, payee_name, payment.amount)
        return payment

    def add(self, payment: Payment) -> Payment:
        """Insert a fully built record, keeping its id."""

        if payment.id in self._active or payment.id in self._trash:
            raise ValidationError(f"Duplicate payment id {payment.id}", field="id")
        if payment.id < 1:
            raise ValidationError("Payment ids start at 1", field="id")
        validate_payment(payment)
        target = self._trash if payment.is_trashed else self._active
        target[payment.id] = payment
        self._next_id = max(self._next_id, payment.id + 1)
        logger.debug("Loaded payment %s", payment.id)
        return payment

    # -- lookups ------------------------------------------------------------

    def get(self, payment_id: int) -> Payment:
        try:
            return self._active[payment_id]
        except KeyError:
            raise NotFoundError(payment_id) from None

    def get_trashed(self, payment_id: int) -> Payment:
        try:
            return self._trash[payment_id]
        except KeyError:
            raise NotFoundError(payment_id, partition="trashed") from None

    def list(
        self, criteria: PaymentFilter | None = None, *, sort_key: str | None = None
    ) -> PaymentView:
        return PaymentView(self._active.values, criteria, sort_key, today=self.today)

    def trash(self, sort_key: str | None = None) -> PaymentView:
        return PaymentView(self._trash.values, None, sort_key)

    def __len__(self) -> int:
        return len(self._active)

    def __contains__(self, payment_id: object) -> bool:
        return payment_id in self._active

    # -- mutation -----------------------------------------------------------

    def update(self, payment_id: int, **changes) -> Payment:
        """Merge ``changes`` into an active payment and re-validate it.

        Status and deferral fields are not patchable; use
        :class:`~payment_schedule.lifecycle.LifecycleController` for those.
        """

        current = self.get(payment_id)
        unknown = set(changes) - _PATCHABLE
        if unknown:
            field = sorted(unknown)[0]
            if field == "status" or field in _DEFERRED_FIELDS:
                raise ValidationError(
                    f"Field {field!r} changes through the payment lifecycle", field=field
                )
            raise ValidationError(f"Field {field!r} cannot be updated", field=field)
        coerced = {name: coerce_field(name, value) for name, value in changes.items()}
        if "payee_name" in coerced and isinstance(coerced["payee_name"], str):
            coerced["payee_name"] = coerced["payee_name"].strip()
        updated = validate_payment(replace(current, **coerced))
        self._active[payment_id] = updated
        logger.info("Updated payment %s: %s", payment_id, ", ".join(sorted(changes)))
        return updated

    def put(self, payment: Payment) -> Payment:
        """Swap in a new version of an active payment with the same id."""

        current = self.get(payment.id)
        if payment.deleted_at != current.deleted_at:
            raise ValidationError("Use soft_delete/restore to move payments", field="deleted_at")
        self._active[payment.id] = validate_payment(payment)
        return payment

    def soft_delete(self, payment_id: int) -> Payment:
        """Move a payment to the trash."""

        payment = self.get(payment_id)
        trashed = replace(payment, deleted_at=self._clock())
        del self._active[payment_id]
        self._trash[payment_id] = trashed
        logger.info("Moved payment %s to trash", payment_id)
        return trashed

    def restore(self, payment_id: int) -> Payment:
        """Move a trashed payment back to the active set."""

        trashed = self.get_trashed(payment_id)
        restored = replace(trashed, deleted_at=None)
        del self._trash[payment_id]
        self._active[payment_id] = restored
        logger.info("Restored payment %s", payment_id)
        return restored

    def hard_delete(self, payment_id: int, *, confirmed: bool = False) -> Payment:
        """Permanently remove a trashed payment. Requires ``confirmed=True``."""

        trashed = self.get_trashed(payment_id)
        if not confirmed:
            raise ConfirmationRequiredError(
                f"Permanently deleting payment {payment_id} needs confirmation"
            )
        del self._trash[payment_id]
        logger.warning("Permanently deleted payment %s", payment_id)
        return trashed
