from datetime import date

import pytest

from payment_schedule.calendar import build_month_grid, deferred_payments, payments_on
from payment_schedule.loader import sample_payments
from payment_schedule.models import Payment, PaymentStatus
from payment_schedule.periods import days_in_month


def make_payment(**kwargs):
    base = dict(id=1, payee_name="Payee", amount=1000, due_date=date(2024, 1, 15))
    base.update(kwargs)
    return Payment(**base)


def make_deferred(**kwargs):
    due = kwargs.pop("due_date", date(2024, 1, 10))
    base = dict(
        status=PaymentStatus.DEFERRED,
        due_date=due,
        original_due_date=due,
        planned_payment_date=date(2024, 4, 15),
        deferred_reason="Budget review pending",
    )
    base.update(kwargs)
    return make_payment(**base)


@pytest.mark.parametrize(
    "year, month",
    [(2024, 1), (2024, 2), (2023, 2), (2024, 6), (2024, 9), (2025, 12)],
)
def test_grid_cells_are_exhaustive_and_non_overlapping(year, month):
    grid = build_month_grid([], year, month)

    assert 0 <= grid.leading_blanks <= 6
    assert len(grid.cells) == grid.leading_blanks + days_in_month(year, month)
    assert all(cell is None for cell in grid.cells[: grid.leading_blanks])
    assert [cell.day for cell in grid.day_cells] == list(range(1, days_in_month(year, month) + 1))


def test_january_2024_starts_on_monday():
    grid = build_month_grid([], 2024, 1)
    assert grid.leading_blanks == 1
    weeks = grid.weeks()
    assert len(weeks) == 5
    assert all(len(week) == 7 for week in weeks)
    assert weeks[0][0] is None
    assert weeks[0][1].day == 1


def test_payments_land_on_their_due_day():
    payments = [
        make_payment(id=1, amount=15000),
        make_payment(id=2, amount=8500),
        make_payment(id=3, amount=120000, due_date=date(2024, 1, 20)),
        make_payment(id=4, due_date=date(2024, 2, 15)),
    ]
    grid = build_month_grid(payments, 2024, 1)

    assert [p.id for p in grid.cell_for(15).payments] == [1, 2]
    assert grid.cell_for(15).total == 23500
    assert [p.id for p in grid.cell_for(20).payments] == [3]
    placed = [p.id for cell in grid.day_cells for p in cell.payments]
    assert sorted(placed) == [1, 2, 3]


def test_deferred_payments_never_placed_on_grid():
    deferred = make_deferred(id=5)
    for year, month in [(2024, 1), (2024, 4)]:
        grid = build_month_grid([deferred], year, month)
        assert all(not cell.payments for cell in grid.day_cells)

    listed = deferred_payments([make_payment(id=1), deferred])
    assert [p.id for p in listed] == [5]
    assert listed[0].original_due_date == date(2024, 1, 10)


def test_deferred_list_is_ordered_by_planned_date():
    listed = deferred_payments(sample_payments())
    assert [p.payee_name for p in listed] == ["Equipment Purchase", "Marketing Campaign"]


def test_payments_on_skips_deferred():
    payments = [make_payment(id=1, due_date=date(2024, 1, 10)), make_deferred(id=2)]
    assert [p.id for p in payments_on(payments, date(2024, 1, 10))] == [1]


def test_cell_for_rejects_days_outside_month():
    grid = build_month_grid([], 2024, 2)
    with pytest.raises(ValueError):
        grid.cell_for(30)
    with pytest.raises(ValueError):
        grid.cell_for(0)
    assert grid.cell_for(1).date == date(2024, 2, 1)
    assert grid.cell_for(29).date == date(2024, 2, 29)
