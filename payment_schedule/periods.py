"""Utilities for working with calendar months and weeks."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Tuple


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in ``month`` (proleptic Gregorian)."""

    first_of_next = date(year + month // 12, month % 12 + 1, 1)
    return (first_of_next - timedelta(days=1)).day


def leading_blanks(year: int, month: int) -> int:
    """Return the weekday of the 1st with Sunday as 0."""

    # date.weekday() counts from Monday.
    return (date(year, month, 1).weekday() + 1) % 7


def month_range(year: int, month: int) -> Tuple[date, date]:
    """Return the first and last day of the given month."""

    return date(year, month, 1), date(year, month, days_in_month(year, month))


def week_range(day: date) -> Tuple[date, date]:
    """Return the Sunday and Saturday of the week containing ``day``."""

    start = day - timedelta(days=(day.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    """Move ``offset`` months forward (or back when negative)."""

    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def parse_month(value: str) -> Tuple[int, int]:
    """Parse ``YYYY-MM`` into ``(year, month)``."""

    try:
        year_text, month_text = value.strip().split("-")
        year, month = int(year_text), int(month_text)
    except ValueError:
        raise ValueError(f"Expected a month as YYYY-MM, got {value!r}") from None
    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range in {value!r}")
    return year, month
