from datetime import date

from payment_schedule.calendar import build_month_grid, deferred_payments
from payment_schedule.formatting import (
    format_currency,
    format_dashboard,
    format_deferred,
    format_month_grid,
    format_payment_table,
    format_trash,
)
from payment_schedule.loader import sample_payments
from payment_schedule.models import Payment
from payment_schedule.summary import build_dashboard_summary


def active_sample():
    return [p for p in sample_payments() if not p.is_trashed]


def test_format_currency_groups_whole_yen():
    assert format_currency(0) == "¥0"
    assert format_currency(120000) == "¥120,000"
    assert format_currency(-500) == "-¥500"


def test_payment_table_lists_rows_with_labels():
    output = format_payment_table(active_sample()[:2], "en", today=date(2024, 1, 16))
    lines = output.splitlines()
    assert lines[0].startswith("ID ")
    assert "Tokyo Electric Power" in lines[2]
    assert "¥15,000" in lines[2]
    assert "Overdue" in lines[2]
    assert "Credit Card" in lines[3]


def test_payment_table_empty_message():
    assert format_payment_table([], "ja").endswith("該当する支払いが見つかりません")


def test_trash_and_deferred_sections():
    trashed = [p for p in sample_payments() if p.is_trashed]
    assert "Old Subscription" in format_trash(trashed)
    assert format_trash([], "en") == "No deleted payments"

    deferred = format_deferred(deferred_payments(sample_payments()), "en")
    assert "Originally Due: 2024-01-05" in deferred
    assert "Reason: Budget review pending" in deferred
    assert format_deferred([], "en").endswith("No deferred payments")


def test_dashboard_text():
    summary = build_dashboard_summary(active_sample(), date(2024, 1, 12))
    output = format_dashboard(summary, "en")
    assert "Financial Overview" in output
    assert "Monthly Total: ¥180,500" in output
    assert "Deferred Count: 2" in output
    assert "Office Rent" in output


def test_month_grid_truncates_busy_days():
    payments = [
        Payment(id=i, payee_name=f"Payee {i}", amount=1000, due_date=date(2024, 1, 15))
        for i in range(1, 4)
    ]
    output = format_month_grid(build_month_grid(payments, 2024, 1), "en")
    assert output.splitlines()[0] == "January 2024"
    assert "Payee 1" in output
    assert "Payee 2" in output
    assert "Payee 3" not in output
    assert "+1 more" in output
    assert "¥3,000" in output


def test_month_grid_japanese_headers():
    output = format_month_grid(build_month_grid([], 2024, 1), "ja")
    assert output.splitlines()[0] == "2024年1月"
    assert "日" in output.splitlines()[2]
