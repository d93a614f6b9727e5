"""Derived totals and counts for the dashboard and calendar."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Sequence

from .calendar import deferred_payments
from .lifecycle import effective_status
from .models import Payment, PaymentStatus
from .periods import month_range, week_range

_DUE_SOON = (PaymentStatus.UPCOMING, PaymentStatus.PENDING)


@dataclass(frozen=True)
class DashboardSummary:
    as_of: date
    weekly_total: int
    monthly_total: int
    pending_count: int
    overdue_count: int
    deferred_count: int
    upcoming: Sequence[Payment]
    deferred: Sequence[Payment]


def daily_total(payments: Iterable[Payment]) -> int:
    """Sum of amounts; 0 for an empty sequence."""

    return sum(payment.amount for payment in payments)


def count_by_status(
    payments: Iterable[Payment], status: PaymentStatus, today: date | None = None
) -> int:
    """Count payments in ``status``.

    With ``today`` the derived (overdue-aware) status is compared, otherwise
    the stored one.
    """

    status = PaymentStatus(status)
    if today is None:
        return sum(1 for p in payments if p.status is status)
    return sum(1 for p in payments if effective_status(p, today) is status)


def _total_between(payments: Iterable[Payment], start: date, end: date) -> int:
    return daily_total(
        p for p in payments if not p.is_deferred and start <= p.due_date <= end
    )


def weekly_total(payments: Iterable[Payment], day: date) -> int:
    """Total due in the Sunday-based week containing ``day``."""

    start, end = week_range(day)
    return _total_between(payments, start, end)


def monthly_total(payments: Iterable[Payment], year: int, month: int) -> int:
    start, end = month_range(year, month)
    return _total_between(payments, start, end)


def totals_by_day(payments: Iterable[Payment], year: int, month: int) -> Dict[date, int]:
    start, end = month_range(year, month)
    totals: Dict[date, int] = defaultdict(int)
    for p in payments:
        if not p.is_deferred and start <= p.due_date <= end:
            totals[p.due_date] += p.amount
    return dict(sorted(totals.items()))


def upcoming_payments(
    payments: Iterable[Payment], today: date, limit: int | None = 5
) -> List[Payment]:
    """Payments still to be made, soonest first."""

    rows = [
        p
        for p in payments
        if p.due_date >= today and effective_status(p, today) in _DUE_SOON
    ]
    rows.sort(key=lambda p: (p.due_date, p.id))
    return rows if limit is None else rows[:limit]


def build_dashboard_summary(payments: Iterable[Payment], today: date) -> DashboardSummary:
    payments = list(payments)
    return DashboardSummary(
        as_of=today,
        weekly_total=weekly_total(payments, today),
        monthly_total=monthly_total(payments, today.year, today.month),
        pending_count=count_by_status(payments, PaymentStatus.PENDING, today),
        overdue_count=count_by_status(payments, PaymentStatus.OVERDUE, today),
        deferred_count=count_by_status(payments, PaymentStatus.DEFERRED),
        upcoming=tuple(upcoming_payments(payments, today)),
        deferred=tuple(deferred_payments(payments)),
    )
