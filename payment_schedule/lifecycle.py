"""Status lifecycle rules: which status changes are allowed and how deferral
bookkeeping is kept consistent."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING, Dict, FrozenSet

from .errors import ValidationError
from .fields import coerce_date
from .models import Payment, PaymentStatus

if TYPE_CHECKING:
    from .store import PaymentStore

logger = logging.getLogger("payment_schedule.lifecycle")

S = PaymentStatus

ALLOWED_TRANSITIONS: Dict[PaymentStatus, FrozenSet[PaymentStatus]] = {
    S.UPCOMING: frozenset({S.PENDING, S.PAID, S.DEFERRED}),
    S.PENDING: frozenset({S.UPCOMING, S.PAID, S.DEFERRED}),
    S.OVERDUE: frozenset({S.PENDING, S.PAID, S.DEFERRED}),
    # paid is terminal apart from a correction back to pending
    S.PAID: frozenset({S.PENDING}),
    S.DEFERRED: frozenset({S.PENDING}),
}

_OVERDUE_CANDIDATES = frozenset({S.UPCOMING, S.PENDING})


def effective_status(payment: Payment, today: date) -> PaymentStatus:
    """Return the status to show for ``payment`` as of ``today``.

    Upcoming and pending payments whose due date has passed read as overdue.
    The stored status is left untouched.
    """

    if payment.status in _OVERDUE_CANDIDATES and payment.due_date < today:
        return S.OVERDUE
    return payment.status


def can_transition(current: PaymentStatus, target: PaymentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


class LifecycleController:
    """Applies explicit status changes to payments held by a store."""

    def __init__(self, store: "PaymentStore") -> None:
        self.store = store

    def transition(self, payment_id: int, target: PaymentStatus) -> Payment:
        """Move a payment to ``target`` when the change is allowed.

        Deferral needs extra data and goes through :meth:`defer`; leaving the
        deferred state goes through :meth:`mark_as_pending`.
        """

        try:
            target = PaymentStatus(target)
        except ValueError:
            raise ValidationError(f"Unknown status: {target!r}", field="status") from None
        payment = self.store.get(payment_id)
        if target is S.DEFERRED:
            raise ValidationError(
                "Use defer() to postpone a payment", field="status"
            )
        if target is S.OVERDUE:
            raise ValidationError(
                "Overdue is derived from the due date and cannot be set",
                field="status",
            )
        if payment.is_deferred and target is S.PENDING:
            return self.mark_as_pending(payment_id)
        self._check(payment, target)
        updated = self.store.put(replace(payment, status=target))
        logger.info(
            "Payment %s: %s -> %s", payment_id, payment.status.value, target.value
        )
        return updated

    def mark_paid(self, payment_id: int) -> Payment:
        return self.transition(payment_id, S.PAID)

    def mark_pending(self, payment_id: int) -> Payment:
        return self.transition(payment_id, S.PENDING)

    def defer(self, payment_id: int, planned_payment_date: date | str, reason: str) -> Payment:
        """Postpone a payment, remembering its original due date."""

        payment = self.store.get(payment_id)
        planned_payment_date = coerce_date("planned_payment_date", planned_payment_date)
        if payment.is_deferred:
            raise ValidationError(
                f"Payment {payment_id} is already deferred; reschedule it instead",
                field="status",
            )
        self._check(payment, S.DEFERRED)
        if planned_payment_date is None:
            raise ValidationError(
                "A planned payment date is required", field="planned_payment_date"
            )
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("A deferral reason is required", field="deferred_reason")

        updated = self.store.put(
            replace(
                payment,
                status=S.DEFERRED,
                original_due_date=payment.due_date,
                planned_payment_date=planned_payment_date,
                deferred_reason=reason,
            )
        )
        logger.info(
            "Payment %s deferred from %s to %s (%s)",
            payment_id,
            payment.due_date,
            planned_payment_date,
            reason,
        )
        return updated

    def reschedule(self, payment_id: int, planned_payment_date: date | str) -> Payment:
        """Change the planned date of a deferred payment. Status stays deferred."""

        payment = self._deferred(payment_id)
        planned_payment_date = coerce_date("planned_payment_date", planned_payment_date)
        if planned_payment_date is None:
            raise ValidationError(
                "A planned payment date is required", field="planned_payment_date"
            )
        updated = self.store.put(
            replace(payment, planned_payment_date=planned_payment_date)
        )
        logger.info(
            "Payment %s rescheduled to %s", payment_id, planned_payment_date
        )
        return updated

    def mark_as_pending(self, payment_id: int) -> Payment:
        """Bring a deferred payment back onto the calendar as pending."""

        payment = self._deferred(payment_id)
        updated = self.store.put(
            replace(
                payment,
                status=S.PENDING,
                due_date=payment.original_due_date or payment.due_date,
                original_due_date=None,
                planned_payment_date=None,
                deferred_reason=None,
            )
        )
        logger.info("Payment %s returned to pending", payment_id)
        return updated

    def _deferred(self, payment_id: int) -> Payment:
        payment = self.store.get(payment_id)
        if not payment.is_deferred:
            raise ValidationError(
                f"Payment {payment_id} is not deferred", field="status"
            )
        return payment

    @staticmethod
    def _check(payment: Payment, target: PaymentStatus) -> None:
        if not can_transition(payment.status, target):
            raise ValidationError(
                f"Cannot change payment {payment.id} from "
                f"{payment.status.value} to {target.value}",
                field="status",
            )
