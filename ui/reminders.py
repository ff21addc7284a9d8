import asyncio
import streamlit as st
import pandas as pd
from datetime import datetime
from typing import Dict, Optional

from config import SUPPORTED_LOCALES
from notifications import LocalNotificationSink
from scheduler import ReminderScheduler

def reminder_settings_section(scheduler: ReminderScheduler, settings: Dict, user_id: str) -> Optional[Dict]:
    """Notification toggle + language. Returns updated settings when changed."""
    c1, c2 = st.columns([2, 1])
    with c1:
        enabled = st.toggle("Bill reminders", value=bool(settings.get("notifications_enabled", True)))
    with c2:
        current = settings.get("locale", SUPPORTED_LOCALES[0])
        locale = st.selectbox("Language", options=list(SUPPORTED_LOCALES),
                              index=list(SUPPORTED_LOCALES).index(current) if current in SUPPORTED_LOCALES else 0)

    if enabled == settings.get("notifications_enabled") and locale == settings.get("locale"):
        return None

    updated = {**settings, "notifications_enabled": enabled, "locale": locale}
    if enabled:
        ok = asyncio.run(scheduler.enable_reminders(user_id, locale))
        if ok:
            st.success("Reminders enabled.")
        else:
            st.error("Notification permission not granted.")
            updated["notifications_enabled"] = False
    else:
        asyncio.run(scheduler.disable_reminders())
        st.success("Reminders disabled.")
    return updated

def pending_reminders_section(scheduler: ReminderScheduler) -> None:
    pending = asyncio.run(scheduler.pending_reminders())
    if not pending:
        st.info("No reminders scheduled.")
        return
    rows = [{
        "Fires At": r.fires_at,
        "Kind": r.kind.value if r.kind else "",
        "Title": r.title,
        "Body": r.body,
        "ID": r.schedule_id,
    } for r in pending]
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    del_id = st.selectbox("Cancel reminder (select ID)", options=[""] + [r.schedule_id for r in pending])
    if del_id and st.button("Cancel selected reminder", type="primary"):
        asyncio.run(scheduler.cancel_reminder(del_id))
        st.success("Reminder canceled.")
        st.rerun()

def alerts_section(scheduler: ReminderScheduler, sink: LocalNotificationSink, locale: str) -> None:
    c1, c2, c3, c4 = st.columns(4)
    now = datetime.now()
    with c1:
        if st.button("🔁 Reschedule all"):
            bills = asyncio.run(scheduler.fetch_due_soon())
            count = asyncio.run(scheduler.reschedule_all(bills, now, locale))
            st.success(f"Scheduled notifications for {count} bills")
    with c2:
        if st.button("⏰ Check overdue"):
            bills = asyncio.run(scheduler.fetch_overdue())
            count = asyncio.run(scheduler.check_overdue_bills(bills, now, locale))
            st.info(f"{count} overdue bill(s)")
    with c3:
        if st.button("💸 Check budgets"):
            asyncio.run(scheduler.run_budget_check(now, locale))
            st.info("Budget check done.")
    with c4:
        if st.button("📬 Deliver due"):
            fired = asyncio.run(sink.fire_due(now))
            st.info(f"{fired} reminder(s) delivered")

    delivered = sink.delivered()
    if delivered:
        st.markdown("### Delivered")
        df = pd.DataFrame(delivered)[["delivered_at", "title", "body"]].iloc[::-1]
        st.dataframe(df.head(50), use_container_width=True, hide_index=True)

        open_ids = [d["schedule_id"] for d in delivered if not d.get("acknowledged_at")]
        ack_id = st.selectbox("Mark delivered reminder as read (select ID)", options=[""] + open_ids)
        if ack_id and st.button("Mark as read"):
            asyncio.run(sink.acknowledge(ack_id))
            st.rerun()
