# scheduler.py
# Bill reminder pass (cancel all, then reschedule) and immediate overdue / budget alerts

import inspect
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Union

from config import (
    ADVANCE_REMINDER_HOUR,
    BUDGET_ALERT_PERCENT,
    DUE_SOON_HORIZON_DAYS,
    DUE_TODAY_HOUR,
    OVERDUE_PREVIEW_COUNT,
)
from errors import InvalidBillData, PermissionDenied
from helpers import at_local_time, days_before, month_of, percent_used
from messages import Catalog, MESSAGES, render
from models import Bill, Budget, ReminderEvent, ReminderKind, ScheduledReminder
from notifications import NotificationSink
from sources import BillSource, BudgetSource

logger = logging.getLogger(__name__)

SpendLookup = Callable[[str, int, int], Union[float, Awaitable[float]]]

class ReminderScheduler:
    """
    Decides when bill reminders fire and which immediate alerts go out.
    Owns no storage: the schedule lives in the sink. Callers serialize passes.
    """
    def __init__(
        self,
        sink: NotificationSink,
        bill_source: Optional[BillSource] = None,
        budget_source: Optional[BudgetSource] = None,
        messages: Optional[Catalog] = None,
        horizon_days: int = DUE_SOON_HORIZON_DAYS,
    ) -> None:
        self.sink = sink
        self.bill_source = bill_source
        self.budget_source = budget_source
        self.messages = messages if messages is not None else MESSAGES
        self.horizon_days = horizon_days

    # ---------- Event computation ----------
    def _bill_event(self, kind: ReminderKind, bill: Bill, fire_at: datetime,
                    locale: str) -> ReminderEvent:
        title, body = render(
            kind, locale, self.messages,
            amount=bill.amount, name=bill.name, days=bill.reminder_days,
        )
        return ReminderEvent(
            kind=kind,
            fires_at=fire_at,
            title=title,
            body=body,
            bill_id=bill.id,
            data={"billId": bill.id, "type": kind.value},
        )

    def compute_advance_reminder(self, bill: Bill, now: datetime,
                                 locale: str) -> Optional[ReminderEvent]:
        """Reminder `reminder_days` before the due date at 09:00, or None if that moment has passed."""
        if bill.due_date is None:
            return None
        try:
            fire_day = days_before(bill.due_date, bill.reminder_days)
        except OverflowError as e:
            raise InvalidBillData(f"bill {bill.id}: lead time of {bill.reminder_days} days is out of range") from e
        fire_at = at_local_time(fire_day, ADVANCE_REMINDER_HOUR, now)
        if fire_at <= now:
            return None
        return self._bill_event(ReminderKind.ADVANCE_REMINDER, bill, fire_at, locale)

    def compute_due_today_reminder(self, bill: Bill, now: datetime,
                                   locale: str) -> Optional[ReminderEvent]:
        """Reminder on the due date at 08:00, or None if that moment has passed."""
        if bill.due_date is None:
            return None
        fire_at = at_local_time(bill.due_date, DUE_TODAY_HOUR, now)
        if fire_at <= now:
            return None
        return self._bill_event(ReminderKind.DUE_TODAY, bill, fire_at, locale)

    # ---------- Reminder pass ----------
    async def _submit(self, event: ReminderEvent) -> Optional[str]:
        schedule_id = await self.sink.schedule(event.fires_at, event.title, event.body, event.data)
        if not schedule_id:
            logger.error(f"Sink returned no schedule id for {event.kind.value} of bill {event.bill_id}")
            return None
        logger.debug(f"Scheduled {event.kind.value} for bill {event.bill_id} at {event.fires_at}")
        return schedule_id

    async def reschedule_all(self, bills: Sequence[Bill], now: datetime, locale: str) -> int:
        """
        Cancel every scheduled reminder, then schedule advance and due-today
        reminders for each bill. Returns the number of bills processed, which
        is not the number of notifications created.
        """
        try:
            await self.sink.cancel_all()
        except Exception as e:
            # Scheduling on top of a stale schedule would duplicate reminders
            logger.error(f"Error canceling all notifications, pass aborted: {e}")
            return 0

        for bill in bills:
            try:
                if bill.due_date is None:
                    raise InvalidBillData(f"bill {bill.id} has no due date")
                events = [
                    self.compute_advance_reminder(bill, now, locale),
                    self.compute_due_today_reminder(bill, now, locale),
                ]
            except Exception as e:
                # Per-bill scope: the pass continues
                logger.warning(f"Skipping bill {bill.id}: {e!r}")
                continue

            for event in events:
                if event is None:
                    continue
                try:
                    await self._submit(event)
                except PermissionDenied as e:
                    logger.error(f"Reminder pass stopped: {e}")
                    return 0
                except Exception as e:
                    logger.error(f"Error scheduling {event.kind.value} for bill {bill.id}: {e}")

        logger.info(f"Scheduled notifications for {len(bills)} bills")
        return len(bills)

    # ---------- Immediate alerts ----------
    async def check_budget_overspend(self, budgets: Sequence[Budget], spend_lookup: SpendLookup,
                                     now: datetime, locale: str) -> None:
        """
        Alert for every budget whose current-month spend is at or above the
        alert percentage. There is no memory between calls: a budget still
        over the line is alerted again on every call.
        """
        month, year = month_of(now)
        for budget in budgets:
            if budget.limit_amount <= 0:
                logger.warning(f"Skipping budget {budget.category_id}: non-positive limit {budget.limit_amount}")
                continue
            try:
                spend = spend_lookup(budget.category_id, month, year)
                if inspect.isawaitable(spend):
                    spend = await spend
                percent = percent_used(float(spend), budget.limit_amount)
            except Exception as e:
                logger.error(f"Error reading spending for category {budget.category_id}: {e}")
                continue

            if percent < BUDGET_ALERT_PERCENT:
                continue

            try:
                title, body = render(
                    ReminderKind.BUDGET_OVERSPEND, locale, self.messages,
                    category=budget.category_name, percent=percent,
                )
                await self.sink.send_immediate(title, body, {
                    "type": ReminderKind.BUDGET_OVERSPEND.value,
                    "categoryId": budget.category_id,
                })
            except PermissionDenied as e:
                logger.error(f"Budget check stopped: {e}")
                return
            except Exception as e:
                logger.error(f"Error sending budget alert for category {budget.category_id}: {e}")

    async def check_overdue_bills(self, bills: Sequence[Bill], now: datetime, locale: str) -> int:
        """Send one summary for the overdue snapshot. Returns the overdue count."""
        count = len(bills)
        if count == 0:
            return 0

        names = ", ".join(b.name for b in bills[:OVERDUE_PREVIEW_COUNT])
        more = "..." if count > OVERDUE_PREVIEW_COUNT else ""
        try:
            title, body = render(
                ReminderKind.OVERDUE_BILLS, locale, self.messages,
                count=count, plural="s" if count > 1 else "", names=names, more=more,
            )
            await self.sink.send_immediate(title, body, {
                "type": ReminderKind.OVERDUE_BILLS.value,
                "checkedAt": now.isoformat(),
            })
        except Exception as e:
            logger.error(f"Error sending overdue notification: {e}")
        return count

    # ---------- Collaborator reads ----------
    async def fetch_due_soon(self) -> List[Bill]:
        if self.bill_source is None:
            return []
        try:
            return list(await self.bill_source.due_soon(self.horizon_days))
        except Exception as e:
            logger.error(f"Error fetching bills due soon: {e}")
            return []

    async def fetch_overdue(self) -> List[Bill]:
        if self.bill_source is None:
            return []
        try:
            return list(await self.bill_source.overdue())
        except Exception as e:
            logger.error(f"Error fetching overdue bills: {e}")
            return []

    async def run_budget_check(self, now: datetime, locale: str) -> None:
        if self.budget_source is None:
            return
        month, year = month_of(now)
        try:
            budgets = await self.budget_source.budgets(month, year)
        except Exception as e:
            logger.error(f"Error fetching budgets: {e}")
            return
        await self.check_budget_overspend(budgets, self.budget_source.spend_for_category, now, locale)

    async def _request_permission(self) -> bool:
        try:
            granted = await self.sink.request_permissions()
        except Exception as e:
            logger.error(f"Error requesting notification permission: {e}")
            return False
        if not granted:
            logger.warning("Notification permission not granted; reminders stay off")
        return bool(granted)

    # ---------- Application entry points ----------
    async def enable_reminders(self, user_id: Any, locale: str,
                               now: Optional[datetime] = None) -> bool:
        """Ask for permission, then run a reminder pass and one budget check."""
        now = now or datetime.now()
        if not await self._request_permission():
            return False
        logger.info(f"Enabling reminders for user {user_id}")
        await self.reschedule_all(await self.fetch_due_soon(), now, locale)
        await self.run_budget_check(now, locale)
        return True

    async def disable_reminders(self) -> bool:
        try:
            await self.sink.cancel_all()
        except Exception as e:
            logger.error(f"Error canceling all notifications: {e}")
            return False
        return True

    async def initialize(self, user_id: Any, locale: str, enabled: bool = True,
                         now: Optional[datetime] = None) -> bool:
        """
        App-start path: when the user has reminders switched on and permission
        is granted, rebuild the schedule and run the overdue and budget checks.
        """
        if not enabled:
            return False
        now = now or datetime.now()
        if not await self._request_permission():
            return False
        await self.reschedule_all(await self.fetch_due_soon(), now, locale)
        await self.check_overdue_bills(await self.fetch_overdue(), now, locale)
        await self.run_budget_check(now, locale)
        logger.info(f"Reminders initialized for user {user_id}")
        return True

    async def pending_reminders(self) -> List[ScheduledReminder]:
        try:
            return list(await self.sink.list_pending())
        except Exception as e:
            logger.error(f"Error getting scheduled notifications: {e}")
            return []

    async def cancel_reminder(self, schedule_id: str) -> bool:
        try:
            await self.sink.cancel(schedule_id)
        except Exception as e:
            logger.error(f"Error canceling notification {schedule_id}: {e}")
            return False
        return True
