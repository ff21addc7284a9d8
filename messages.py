# messages.py
# Notification text keyed by (kind, locale). Callers may supply their own catalog.

from typing import Dict, Mapping, Optional, Tuple

from errors import InvalidBillData
from models import ReminderKind

Catalog = Mapping[Tuple[ReminderKind, str], Dict[str, str]]

MESSAGES: Dict[Tuple[ReminderKind, str], Dict[str, str]] = {
    (ReminderKind.ADVANCE_REMINDER, "en"): {
        "title": "Bill Reminder: {name}",
        "body": "Your {name} bill is due in {days} days.",
    },
    (ReminderKind.ADVANCE_REMINDER, "tr"): {
        "title": "Fatura Hatırlatması: {name}",
        "body": "{name} faturanızın son ödeme tarihi {days} gün sonra.",
    },
    (ReminderKind.DUE_TODAY, "en"): {
        "title": "Due Today: {name}",
        "body": "Your {name} bill is due today!",
    },
    (ReminderKind.DUE_TODAY, "tr"): {
        "title": "Son Ödeme Günü: {name}",
        "body": "Bugün {name} faturanızın son ödeme günü!",
    },
    (ReminderKind.OVERDUE_BILLS, "en"): {
        "title": "{count} Overdue Bill{plural}",
        "body": "You have overdue bills: {names}{more}",
    },
    (ReminderKind.OVERDUE_BILLS, "tr"): {
        "title": "{count} Gecikmiş Fatura",
        "body": "Gecikmiş faturalarınız var: {names}{more}",
    },
    (ReminderKind.BUDGET_OVERSPEND, "en"): {
        "title": "Budget Alert: {category}",
        "body": "You've used {percent}% of your {category} budget",
    },
    (ReminderKind.BUDGET_OVERSPEND, "tr"): {
        "title": "Bütçe Uyarısı: {category}",
        "body": "{category} bütçenizin %{percent}'ini kullandınız",
    },
}

# Appended to bill bodies when the amount is known
AMOUNT_SUFFIX = {
    "en": "Amount: ${amount}",
    "tr": "Tutar: ₺{amount}",
}

def format_amount(amount: float) -> str:
    return f"{amount:,.2f}"

def render(kind: ReminderKind, locale: str, catalog: Optional[Catalog] = None,
           amount: Optional[float] = None, **fields) -> Tuple[str, str]:
    """
    Render the (title, body) pair for a notification.
    Raises KeyError when the catalog has no entry for (kind, locale), and
    InvalidBillData when a template cannot be filled from the given fields.
    """
    templates = (catalog if catalog is not None else MESSAGES)[(kind, locale)]
    try:
        title = templates["title"].format(**fields)
        body = templates["body"].format(**fields)
    except (KeyError, IndexError, ValueError) as e:
        raise InvalidBillData(f"bad {kind.value} template for locale {locale!r}: {e!r}") from e
    if amount is not None:
        suffix = AMOUNT_SUFFIX.get(locale, AMOUNT_SUFFIX["en"])
        body = f"{body} {suffix.format(amount=format_amount(amount))}"
    return title, body
