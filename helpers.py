# helpers.py
# Reminder time math, budget percentages, transaction CSV normalization

from typing import Optional, Tuple
from datetime import date, datetime, time, timedelta
import calendar
import logging
import math

import pandas as pd

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

REQUIRED_COLS = {"Date", "Amount", "Category", "type"}
OPTIONAL_COLS = ["Note"]

# ---------- Date helpers ----------
def at_local_time(day: date, hour: int, now: datetime) -> datetime:
    """Pin a calendar day to hour:00, in the same timezone (or naivety) as `now`."""
    return datetime.combine(day, time(hour, 0), tzinfo=now.tzinfo)

def days_before(day: date, days: int) -> date:
    return day - timedelta(days=days)

def month_range(y: int, m: int) -> Tuple[date, date]:
    """Return the first and last date of a given month."""
    start = date(y, m, 1)
    last = calendar.monthrange(y, m)[1]
    return start, date(y, m, last)

def month_of(now: datetime) -> Tuple[int, int]:
    """(month, year) of the evaluation instant."""
    return now.month, now.year

# ---------- Budgets ----------
def percent_used(spend: float, limit_amount: float) -> int:
    """
    Whole percentage of a budget consumed, rounding halves up.
    The caller must ensure limit_amount > 0.
    """
    ratio = round(spend * 100 / limit_amount, 9)  # absorb float noise like 89.49999999999999
    return int(math.floor(ratio + 0.5))

# ---------- Transactions CSV ----------
def normalize_csv(file) -> Optional[pd.DataFrame]:
    """
    Read the transactions CSV, validate, and normalize schema.
    Expected columns: Date, Amount, Category, type.
    """
    try:
        df = pd.read_csv(file)
    except Exception as e:
        logger.error(f"Failed to read CSV: {e}")
        return None

    missing = REQUIRED_COLS.difference(df.columns)
    if missing:
        logger.error(f"Missing required columns: {missing}")
        return None

    for c in OPTIONAL_COLS:
        if c not in df.columns:
            df[c] = ""

    df["Date"] = pd.to_datetime(df["Date"], errors="coerce")
    # Drop rows with invalid dates
    if df["Date"].isna().any():
        logger.warning(f"Dropping {df['Date'].isna().sum()} rows with invalid dates")
        df = df[df["Date"].notna()].copy()

    df["Amount"] = pd.to_numeric(df["Amount"], errors="coerce").fillna(0.0).round(2)
    df["type"] = df["type"].fillna("").astype(str)
    df["Category"] = df["Category"].fillna("").astype(str).str.strip()
    return df

def category_spend(df: Optional[pd.DataFrame], category_id: str, month: int, year: int) -> float:
    """Total expense amount booked to a category within a calendar month."""
    if df is None or df.empty:
        return 0.0
    start_dt, end_dt = month_range(year, month)
    mask = (
        (df["Category"] == str(category_id)) &
        (df["type"].str.lower().eq("expense")) &
        (df["Date"].dt.date >= start_dt) &
        (df["Date"].dt.date <= end_dt)
    )
    sub = df.loc[mask, "Amount"]
    return round(float(sub.abs().sum()), 2) if not sub.empty else 0.0
