import pytest

from payment_schedule.cli import parse_args, run


def test_defaults_to_dashboard():
    args = parse_args(["--as-of", "2024-01-12"])
    assert args.command == "dashboard"
    assert args.language == "en"


def test_dashboard_uses_sample_data(capsys):
    output = run(["--as-of", "2024-01-12", "dashboard"])
    assert "Weekly Total: ¥25,000" in output
    assert "Pending Payments: 1" in output
    assert "January 12, 2024" in output
    assert "Overdue Payments: 0" in output
    assert "Financial Overview" in capsys.readouterr().out


def test_calendar_defaults_to_as_of_month():
    output = run(["--as-of", "2024-01-12", "calendar"])
    assert output.splitlines()[0] == "January 2024"
    assert "Office Rent" in output

    february = run(["--as-of", "2024-01-12", "calendar", "--month", "2024-02"])
    assert february.splitlines()[0] == "February 2024"
    assert "Office Rent" not in february


def test_table_filters_and_sorts():
    output = run(
        ["--as-of", "2024-01-12", "table", "--status", "deferred", "--sort", "amount", "--descending"]
    )
    assert output.index("Equipment Purchase") < output.index("Marketing Campaign")
    assert "Office Rent" not in output

    ascending = run(["--as-of", "2024-01-12", "table", "--status", "deferred", "--sort", "amount"])
    assert ascending.index("Marketing Campaign") < ascending.index("Equipment Purchase")

    searched = run(["--language", "ja", "--as-of", "2024-01-12", "table", "--search", "rent"])
    assert searched.splitlines()[0] == "テーブル表示"
    assert "Office Rent" in searched


def test_trash_and_deferred_commands():
    trash = run(["trash"])
    assert trash.index("Cancelled Service") < trash.index("Old Subscription")
    deferred = run(["deferred"])
    assert "Planned For: 2024-03-01" in deferred


def test_export_writes_workbook(tmp_path):
    target = tmp_path / "out.xlsx"
    output = run(["--as-of", "2024-01-12", "export", str(target)])
    assert target.exists()
    assert output == f"Wrote {target}"


def test_output_file(tmp_path):
    target = tmp_path / "dashboard.txt"
    run(["--as-of", "2024-01-12", "--output", str(target)])
    assert "Monthly Total" in target.read_text(encoding="utf-8")


def test_missing_csv_exits(tmp_path):
    with pytest.raises(SystemExit, match="CSV file not found"):
        run(["--csv", str(tmp_path / "missing.csv")])
