import pytest
from datetime import date, datetime, timezone
from helpers import at_local_time, days_before, month_range, month_of, percent_used, normalize_csv, category_spend

def test_at_local_time():
    now = datetime(2026, 10, 19, 12, 30)
    assert at_local_time(date(2026, 10, 21), 9, now) == datetime(2026, 10, 21, 9, 0)

    # Aware `now` -> aware result in the same zone
    aware = datetime(2026, 10, 19, 12, 30, tzinfo=timezone.utc)
    fired = at_local_time(date(2026, 10, 21), 8, aware)
    assert fired.tzinfo is timezone.utc
    assert fired.hour == 8

def test_days_before():
    assert days_before(date(2026, 3, 2), 3) == date(2026, 2, 27)
    assert days_before(date(2024, 3, 1), 1) == date(2024, 2, 29)  # Leap year
    assert days_before(date(2026, 1, 1), 0) == date(2026, 1, 1)

def test_month_range():
    assert month_range(2026, 2) == (date(2026, 2, 1), date(2026, 2, 28))
    assert month_range(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))

def test_month_of():
    assert month_of(datetime(2026, 12, 31, 23, 59)) == (12, 2026)

def test_percent_used_rounds_half_up():
    assert percent_used(895, 1000) == 90
    assert percent_used(894, 1000) == 89
    # Python's round() would give 88 here
    assert percent_used(885, 1000) == 89
    assert percent_used(0, 500) == 0
    assert percent_used(1500, 1000) == 150

def test_normalize_csv_rejects_missing_columns(tmp_path):
    path = tmp_path / "tx.csv"
    path.write_text("Date,Amount\n2026-10-01,10\n")
    assert normalize_csv(path) is None

def test_category_spend(tmp_path):
    path = tmp_path / "tx.csv"
    path.write_text(
        "Date,Amount,Category,type\n"
        "2026-10-05,100,7,expense\n"
        "2026-10-20,50.5,7,Expense\n"
        "2026-09-30,999,7,expense\n"
        "2026-10-07,2000,7,income\n"
        "2026-10-08,40,8,expense\n"
        "not-a-date,10,7,expense\n"
    )
    df = normalize_csv(path)
    assert len(df) == 5
    assert category_spend(df, "7", 10, 2026) == pytest.approx(150.5)
    assert category_spend(df, "8", 10, 2026) == pytest.approx(40.0)
    assert category_spend(df, "7", 11, 2026) == 0.0
    assert category_spend(None, "7", 10, 2026) == 0.0
