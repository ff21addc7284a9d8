# app.py
# Bill Reminders: local control panel for the reminder scheduler
# (JSON bills/budgets, CSV transactions, JSON-file notification sink)

import asyncio
import streamlit as st

from config import BILLS_FILE, BUDGETS_FILE, TRANSACTIONS_CSV
from data import load_settings, save_settings
from notifications import LocalNotificationSink, configure_notification_handler
from scheduler import ReminderScheduler
from sources import CsvBudgetSource, LocalBillSource
from ui import reminder_settings_section, pending_reminders_section, alerts_section

st.set_page_config(page_title="Bill Reminders — Local", layout="wide")
st.title("🔔 Bill Reminders — Local JSON + CSV")

configure_notification_handler()

@st.cache_resource
def build_scheduler():
    sink = LocalNotificationSink()
    scheduler = ReminderScheduler(
        sink,
        bill_source=LocalBillSource(BILLS_FILE),
        budget_source=CsvBudgetSource(BUDGETS_FILE, TRANSACTIONS_CSV),
    )
    return sink, scheduler

sink, scheduler = build_scheduler()
settings = load_settings()
user_id = st.sidebar.text_input("User", value="local")

# App start: rebuild schedule + overdue/budget checks once per session
if "reminders_initialized" not in st.session_state:
    asyncio.run(scheduler.initialize(user_id, settings["locale"], enabled=settings["notifications_enabled"]))
    st.session_state["reminders_initialized"] = True

st.markdown("## ⚙️ Settings")
settings_updated = reminder_settings_section(scheduler, settings, user_id)
if settings_updated is not None:
    save_settings(settings_updated)
    settings = settings_updated

st.markdown("---")
st.markdown("## 📅 Scheduled Reminders")
pending_reminders_section(scheduler)

st.markdown("---")
st.markdown("## 🚨 Checks & Delivery")
alerts_section(scheduler, sink, settings["locale"])

st.markdown("---")
st.caption("Data is stored locally under ./data/*.json. Transactions CSV columns: Date, Amount, Category, type.")
