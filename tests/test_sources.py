import asyncio
import pytest
from datetime import date

from data import save_bills, save_budgets
from sources import CsvBudgetSource, LocalBillSource

TODAY = date(2026, 10, 19)

@pytest.fixture
def bills_file(tmp_path):
    path = tmp_path / "bills.json"
    save_bills([
        {"id": 1, "name": "Internet", "amount": 49.9, "due_date": "2026-10-20", "reminder_days": 3},
        {"id": 2, "name": "Insurance", "due_date": "2026-11-30"},
        {"id": 3, "name": "Water", "due_date": "2026-10-10"},
        {"id": 4, "name": "Phone", "due_date": "2026-10-21", "is_paid": True},
        {"id": 5, "name": "Gym"},
        {"id": 6, "name": "Broken", "amount": -5, "due_date": "2026-10-22"},
        {"id": 7, "name": "Rent", "due_date": "2026-10-19"},
        {"id": 8, "name": "Gas", "due_date": "2026-10-02"},
    ], path)
    return path

def test_due_soon_filters_unpaid_within_horizon(bills_file):
    source = LocalBillSource(bills_file, today=lambda: TODAY)
    bills = asyncio.run(source.due_soon(30))
    assert [b.name for b in bills] == ["Rent", "Internet"]
    assert bills[1].id == "1"
    assert bills[1].amount == pytest.approx(49.9)

def test_overdue_sorted_by_due_date(bills_file):
    source = LocalBillSource(bills_file, today=lambda: TODAY)
    assert [b.name for b in asyncio.run(source.overdue())] == ["Gas", "Water"]

def test_missing_bills_file_is_empty(tmp_path):
    source = LocalBillSource(tmp_path / "nope.json", today=lambda: TODAY)
    assert asyncio.run(source.due_soon(7)) == []

def test_budget_source(tmp_path):
    budgets_path = tmp_path / "budgets.json"
    csv_path = tmp_path / "tx.csv"
    save_budgets([
        {"category_id": 7, "category_name": "Groceries", "limit_amount": 1000, "month": 10, "year": 2026},
        {"category_id": 8, "category_name": "Fuel", "limit_amount": 200},
        {"category_id": 9, "category_name": "Old", "limit_amount": 50, "month": 9, "year": 2026},
        {"category_name": "Invalid"},
    ], budgets_path)
    csv_path.write_text(
        "Date,Amount,Category,type\n"
        "2026-10-01,600,7,expense\n"
        "2026-10-15,300,7,expense\n"
        "2026-10-15,80,8,expense\n"
    )
    source = CsvBudgetSource(budgets_path, csv_path)
    budgets = asyncio.run(source.budgets(10, 2026))
    assert [b.category_name for b in budgets] == ["Groceries", "Fuel"]
    assert asyncio.run(source.spend_for_category("7", 10, 2026)) == pytest.approx(900.0)
    assert asyncio.run(source.spend_for_category("8", 10, 2026)) == pytest.approx(80.0)

def test_budget_source_without_transactions(tmp_path):
    source = CsvBudgetSource(tmp_path / "b.json", tmp_path / "missing.csv")
    assert asyncio.run(source.budgets(10, 2026)) == []
    assert asyncio.run(source.spend_for_category("7", 10, 2026)) == 0.0
