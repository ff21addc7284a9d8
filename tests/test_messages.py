import pytest
from errors import InvalidBillData
from messages import MESSAGES, render, format_amount
from models import ReminderKind

def test_advance_reminder_en_with_amount():
    title, body = render(ReminderKind.ADVANCE_REMINDER, "en", amount=120, name="Internet", days=3)
    assert title == "Bill Reminder: Internet"
    assert body == "Your Internet bill is due in 3 days. Amount: $120.00"

def test_advance_reminder_tr_without_amount():
    title, body = render(ReminderKind.ADVANCE_REMINDER, "tr", name="Elektrik", days=5)
    assert title == "Fatura Hatırlatması: Elektrik"
    assert body == "Elektrik faturanızın son ödeme tarihi 5 gün sonra."

def test_due_today_tr_with_amount():
    _, body = render(ReminderKind.DUE_TODAY, "tr", amount=1250.5, name="Su")
    assert body == "Bugün Su faturanızın son ödeme günü! Tutar: ₺1,250.50"

def test_budget_tr_percent():
    title, body = render(ReminderKind.BUDGET_OVERSPEND, "tr", category="Market", percent=92)
    assert title == "Bütçe Uyarısı: Market"
    assert body == "Market bütçenizin %92'ini kullandınız"

def test_unknown_locale_raises_key_error():
    with pytest.raises(KeyError):
        render(ReminderKind.DUE_TODAY, "de", name="Gas")

def test_caller_supplied_catalog():
    catalog = {(ReminderKind.DUE_TODAY, "xx"): {"title": "T {name}", "body": "B {name}"}}
    assert render(ReminderKind.DUE_TODAY, "xx", catalog, name="Gas") == ("T Gas", "B Gas")
    # The default catalog is untouched
    assert (ReminderKind.DUE_TODAY, "xx") not in MESSAGES

@pytest.mark.parametrize("title", ["{0}", "{name:d}", "{missing}"])
def test_unfillable_caller_template_raises_invalid_bill_data(title):
    catalog = {(ReminderKind.DUE_TODAY, "xx"): {"title": title, "body": "B {name}"}}
    with pytest.raises(InvalidBillData):
        render(ReminderKind.DUE_TODAY, "xx", catalog, name="Gas")

def test_format_amount():
    assert format_amount(0) == "0.00"
    assert format_amount(1234567.891) == "1,234,567.89"
