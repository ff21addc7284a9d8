# config.py
# Paths & reminder defaults

from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "data"

BILLS_FILE = DATA_DIR / "bills.json"
BUDGETS_FILE = DATA_DIR / "budgets.json"
TRANSACTIONS_CSV = DATA_DIR / "transactions.csv"
PENDING_FILE = DATA_DIR / "pending_notifications.json"
DELIVERED_FILE = DATA_DIR / "delivered_notifications.json"
SETTINGS_FILE = DATA_DIR / "reminder_settings.json"

# Local time-of-day at which reminders fire
ADVANCE_REMINDER_HOUR = 9
DUE_TODAY_HOUR = 8

DEFAULT_REMINDER_DAYS = 3
DUE_SOON_HORIZON_DAYS = 30
BUDGET_ALERT_PERCENT = 90
OVERDUE_PREVIEW_COUNT = 3

SUPPORTED_LOCALES = ("tr", "en")
DEFAULT_LOCALE = "tr"

# Empty defaults
EMPTY_BILLS = []
EMPTY_BUDGETS = []
EMPTY_NOTIFICATIONS = []
DEFAULT_SETTINGS = {"notifications_enabled": True, "locale": DEFAULT_LOCALE}
