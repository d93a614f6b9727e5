"""Month grid construction and day bucketing for the calendar view."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import Payment
from .periods import days_in_month, leading_blanks, month_range


@dataclass(frozen=True)
class DayCell:
    day: int
    date: date
    payments: Tuple[Payment, ...] = ()

    @property
    def total(self) -> int:
        return sum(payment.amount for payment in self.payments)


Cell = Optional[DayCell]


@dataclass(frozen=True)
class MonthGrid:
    """One displayed month: leading blanks followed by a cell per day."""

    year: int
    month: int
    cells: Tuple[Cell, ...]

    @property
    def leading_blanks(self) -> int:
        return leading_blanks(self.year, self.month)

    @property
    def days_in_month(self) -> int:
        return days_in_month(self.year, self.month)

    @property
    def day_cells(self) -> Tuple[DayCell, ...]:
        return tuple(cell for cell in self.cells if cell is not None)

    def cell_for(self, day: int) -> DayCell:
        if not 1 <= day <= self.days_in_month:
            raise ValueError(f"Day {day} is outside {self.year}-{self.month:02d}")
        return self.cells[self.leading_blanks + day - 1]

    def weeks(self) -> List[Tuple[Cell, ...]]:
        """Split the cells into Sunday-first rows of seven."""

        padded: List[Cell] = list(self.cells)
        padded.extend([None] * (-len(padded) % 7))
        return [tuple(padded[i : i + 7]) for i in range(0, len(padded), 7)]


def _places_on_calendar(payment: Payment) -> bool:
    return not payment.is_deferred


def build_month_grid(payments: Iterable[Payment], year: int, month: int) -> MonthGrid:
    """Build the grid for ``year``/``month`` and drop each payment on its due day.

    Deferred payments never land on the grid; see :func:`deferred_payments`.
    """

    first, last = month_range(year, month)
    by_day: Dict[int, List[Payment]] = defaultdict(list)
    for payment in payments:
        if _places_on_calendar(payment) and first <= payment.due_date <= last:
            by_day[payment.due_date.day].append(payment)

    cells: List[Cell] = [None] * leading_blanks(year, month)
    for day in range(1, last.day + 1):
        cells.append(DayCell(day=day, date=date(year, month, day), payments=tuple(by_day.get(day, ()))))
    return MonthGrid(year=year, month=month, cells=tuple(cells))


def payments_on(payments: Iterable[Payment], day: date) -> List[Payment]:
    """Return the non-deferred payments due on ``day``."""

    return [p for p in payments if _places_on_calendar(p) and p.due_date == day]


def deferred_payments(payments: Iterable[Payment]) -> Sequence[Payment]:
    """Return deferred payments ordered by their planned payment date."""

    deferred = [p for p in payments if p.is_deferred]
    deferred.sort(key=lambda p: (p.planned_payment_date or p.due_date, p.id))
    return deferred
