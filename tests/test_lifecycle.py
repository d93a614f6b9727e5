from datetime import date, datetime

import pytest

from payment_schedule.calendar import build_month_grid, deferred_payments
from payment_schedule.errors import NotFoundError, ValidationError
from payment_schedule.lifecycle import LifecycleController, can_transition, effective_status
from payment_schedule.models import Payment, PaymentDraft, PaymentStatus
from payment_schedule.store import PaymentStore


def make_controller():
    store = PaymentStore(clock=lambda: datetime(2024, 1, 12))
    return store, LifecycleController(store)


def create_rent(store):
    return store.create(PaymentDraft(payee_name="Rent", amount=120000, due_date="2024-01-20"))


def test_effective_status_derives_overdue_without_storing_it():
    payment = Payment(id=1, payee_name="A", amount=1, due_date=date(2024, 1, 10))
    assert effective_status(payment, date(2024, 1, 10)) is PaymentStatus.UPCOMING
    assert effective_status(payment, date(2024, 1, 11)) is PaymentStatus.OVERDUE
    assert payment.status is PaymentStatus.UPCOMING

    paid = Payment(
        id=2, payee_name="B", amount=1, due_date=date(2024, 1, 1), status=PaymentStatus.PAID
    )
    assert effective_status(paid, date(2024, 2, 1)) is PaymentStatus.PAID


def test_transition_table():
    assert can_transition(PaymentStatus.UPCOMING, PaymentStatus.PAID)
    assert can_transition(PaymentStatus.PAID, PaymentStatus.PENDING)
    assert not can_transition(PaymentStatus.PAID, PaymentStatus.UPCOMING)
    assert not can_transition(PaymentStatus.DEFERRED, PaymentStatus.PAID)


def test_mark_paid_and_correct_back_to_pending():
    store, controller = make_controller()
    rent = create_rent(store)

    paid = controller.mark_paid(rent.id)
    assert paid.status is PaymentStatus.PAID
    with pytest.raises(ValidationError):
        controller.transition(rent.id, PaymentStatus.UPCOMING)
    assert store.get(rent.id).status is PaymentStatus.PAID

    corrected = controller.mark_pending(rent.id)
    assert corrected.status is PaymentStatus.PENDING


def test_overdue_and_unknown_targets_are_rejected():
    store, controller = make_controller()
    rent = create_rent(store)
    with pytest.raises(ValidationError):
        controller.transition(rent.id, PaymentStatus.OVERDUE)
    with pytest.raises(ValidationError):
        controller.transition(rent.id, "archived")
    with pytest.raises(ValidationError):
        controller.transition(rent.id, PaymentStatus.DEFERRED)
    with pytest.raises(NotFoundError):
        controller.mark_paid(999)


def test_defer_then_mark_as_pending_returns_payment_to_calendar():
    store, controller = make_controller()
    rent = create_rent(store)

    deferred = controller.defer(rent.id, date(2024, 4, 15), "cash flow")
    assert deferred.status is PaymentStatus.DEFERRED
    assert deferred.original_due_date == date(2024, 1, 20)
    assert deferred.planned_payment_date == date(2024, 4, 15)
    assert deferred.deferred_reason == "cash flow"

    january = build_month_grid(store.list(), 2024, 1)
    assert january.cell_for(20).payments == ()
    assert [p.id for p in deferred_payments(store.list())] == [rent.id]

    pending = controller.mark_as_pending(rent.id)
    assert pending.status is PaymentStatus.PENDING
    assert pending.due_date == date(2024, 1, 20)
    assert pending.original_due_date is None
    assert pending.planned_payment_date is None
    assert pending.deferred_reason is None

    january = build_month_grid(store.list(), 2024, 1)
    assert [p.id for p in january.cell_for(20).payments] == [rent.id]
    assert deferred_payments(store.list()) == []


def test_transition_to_pending_from_deferred_clears_deferral():
    store, controller = make_controller()
    rent = create_rent(store)
    controller.defer(rent.id, date(2024, 4, 15), "cash flow")

    pending = controller.transition(rent.id, "pending")
    assert pending.status is PaymentStatus.PENDING
    assert pending.planned_payment_date is None


def test_reschedule_only_moves_planned_date():
    store, controller = make_controller()
    rent = create_rent(store)
    controller.defer(rent.id, date(2024, 4, 15), "cash flow")

    moved = controller.reschedule(rent.id, date(2024, 5, 1))
    assert moved.status is PaymentStatus.DEFERRED
    assert moved.planned_payment_date == date(2024, 5, 1)
    assert moved.original_due_date == date(2024, 1, 20)
    assert moved.deferred_reason == "cash flow"


def test_defer_requires_reason_and_rejects_double_deferral():
    store, controller = make_controller()
    rent = create_rent(store)

    with pytest.raises(ValidationError):
        controller.defer(rent.id, date(2024, 4, 15), "   ")
    assert store.get(rent.id) == rent

    controller.defer(rent.id, date(2024, 4, 15), "cash flow")
    with pytest.raises(ValidationError):
        controller.defer(rent.id, date(2024, 6, 1), "again")


def test_reschedule_and_mark_as_pending_need_a_deferred_payment():
    store, controller = make_controller()
    rent = create_rent(store)
    with pytest.raises(ValidationError):
        controller.reschedule(rent.id, date(2024, 5, 1))
    with pytest.raises(ValidationError):
        controller.mark_as_pending(rent.id)


def test_paid_payments_cannot_be_deferred():
    store, controller = make_controller()
    rent = create_rent(store)
    controller.mark_paid(rent.id)
    with pytest.raises(ValidationError):
        controller.defer(rent.id, date(2024, 4, 15), "cash flow")


def test_defer_accepts_iso_date_strings():
    store, controller = make_controller()
    rent = create_rent(store)

    deferred = controller.defer(rent.id, "2024-04-15", "cash flow")
    assert deferred.planned_payment_date == date(2024, 4, 15)
    assert store.get(rent.id).planned_payment_date == date(2024, 4, 15)

    moved = controller.reschedule(rent.id, "2024-05-01")
    assert moved.planned_payment_date == date(2024, 5, 1)


def test_defer_with_bad_date_leaves_payment_untouched():
    store, controller = make_controller()
    rent = create_rent(store)

    with pytest.raises(ValidationError):
        controller.defer(rent.id, "mid-April", "cash flow")
    with pytest.raises(ValidationError):
        controller.defer(rent.id, None, "cash flow")
    assert store.get(rent.id) == rent

    controller.defer(rent.id, "2024-04-15", "cash flow")
    with pytest.raises(ValidationError):
        controller.reschedule(rent.id, "someday")
    assert store.get(rent.id).planned_payment_date == date(2024, 4, 15)
