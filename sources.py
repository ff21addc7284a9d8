# sources.py
# Bill and budget collaborators: the contracts the scheduler consumes, plus
# local JSON/CSV implementations used by the control panel.

from datetime import date, timedelta
from pathlib import Path
from typing import Callable, List, Optional, Protocol
import logging

import pandas as pd
from pydantic import ValidationError

from config import BILLS_FILE, BUDGETS_FILE, TRANSACTIONS_CSV
from data import load_bills, load_budgets
from helpers import category_spend, normalize_csv
from models import Bill, Budget

logger = logging.getLogger(__name__)

class BillSource(Protocol):
    async def due_soon(self, horizon_days: int) -> List[Bill]: ...

    async def overdue(self) -> List[Bill]: ...

class BudgetSource(Protocol):
    async def budgets(self, month: int, year: int) -> List[Budget]: ...

    async def spend_for_category(self, category_id: str, month: int, year: int) -> float: ...

def _parse_bills(rows: List[dict]) -> List[Bill]:
    bills = []
    for row in rows:
        try:
            bills.append(Bill.model_validate(row))
        except ValidationError as e:
            logger.warning(f"Skipping invalid bill {row.get('id')!r}: {e.error_count()} error(s)")
    return bills

class LocalBillSource:
    """
    Bills read from a local JSON file, filtered the way the backend does.
    The file read is synchronous under the async methods; fine for one action at a time.
    """

    def __init__(self, path: Path = BILLS_FILE, today: Callable[[], date] = date.today):
        self.path = Path(path)
        self._today = today

    def _unpaid_with_due_date(self) -> List[Bill]:
        return [b for b in _parse_bills(load_bills(self.path))
                if not b.is_paid and b.due_date is not None]

    async def due_soon(self, horizon_days: int) -> List[Bill]:
        today = self._today()
        until = today + timedelta(days=horizon_days)
        bills = [b for b in self._unpaid_with_due_date() if today <= b.due_date <= until]
        return sorted(bills, key=lambda b: b.due_date)

    async def overdue(self) -> List[Bill]:
        today = self._today()
        bills = [b for b in self._unpaid_with_due_date() if b.due_date < today]
        return sorted(bills, key=lambda b: b.due_date)

class CsvBudgetSource:
    """
    Budgets from a local JSON file; spend computed from the transactions CSV.
    Budgets without month/year apply to every month.
    JSON and CSV reads are synchronous under the async methods.
    """

    def __init__(self, budgets_path: Path = BUDGETS_FILE, transactions_csv: Path = TRANSACTIONS_CSV):
        self.budgets_path = Path(budgets_path)
        self.transactions_csv = Path(transactions_csv)
        self._df: Optional[pd.DataFrame] = None

    def _transactions(self) -> Optional[pd.DataFrame]:
        if self._df is None and self.transactions_csv.exists():
            self._df = normalize_csv(self.transactions_csv)
        return self._df

    def reload(self) -> None:
        self._df = None

    async def budgets(self, month: int, year: int) -> List[Budget]:
        out = []
        for row in load_budgets(self.budgets_path):
            try:
                budget = Budget.model_validate(row)
            except ValidationError as e:
                logger.warning(f"Skipping invalid budget {row.get('category_id')!r}: {e.error_count()} error(s)")
                continue
            if budget.month not in (None, month) or budget.year not in (None, year):
                continue
            out.append(budget)
        return out

    async def spend_for_category(self, category_id: str, month: int, year: int) -> float:
        return category_spend(self._transactions(), category_id, month, year)
