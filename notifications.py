# notifications.py
# Notification sink contract, handler configuration, and a JSON-file backed local sink

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol
from uuid import uuid4

from config import DELIVERED_FILE, PENDING_FILE
from data import load_notifications, save_notifications
from errors import CollaboratorUnavailable, PermissionDenied
from models import ScheduledReminder

logger = logging.getLogger(__name__)

class NotificationSink(Protocol):
    async def get_permission_status(self) -> bool: ...

    async def request_permissions(self) -> bool: ...

    async def schedule(self, fire_at: datetime, title: str, body: str,
                       metadata: Dict[str, Any]) -> str: ...

    async def cancel(self, schedule_id: str) -> None: ...

    async def cancel_all(self) -> None: ...

    async def list_pending(self) -> List[ScheduledReminder]: ...

    async def send_immediate(self, title: str, body: str,
                             metadata: Dict[str, Any]) -> None: ...

# ---------- Handler configuration ----------
@dataclass(frozen=True)
class NotificationHandlerConfig:
    """How a delivered notification is presented while the app is open."""
    show_alert: bool = True
    play_sound: bool = True
    set_badge: bool = True

_handler_config: Optional[NotificationHandlerConfig] = None

def configure_notification_handler(show_alert: bool = True, play_sound: bool = True,
                                   set_badge: bool = True) -> NotificationHandlerConfig:
    """
    Install the process-wide presentation settings. Call once at startup.
    The first call wins; later calls return the installed configuration unchanged.
    """
    global _handler_config
    if _handler_config is None:
        _handler_config = NotificationHandlerConfig(show_alert, play_sound, set_badge)
        logger.info(f"Notification handler configured: {_handler_config}")
    return _handler_config

def get_notification_handler() -> Optional[NotificationHandlerConfig]:
    return _handler_config

def reset_notification_handler() -> None:
    """Forget the installed configuration (tests)."""
    global _handler_config
    _handler_config = None

# ---------- Listeners ----------
Listener = Callable[[Dict[str, Any]], None]

class Subscription:
    def __init__(self, listeners: List[Listener], callback: Listener) -> None:
        self._listeners = listeners
        self._callback = callback

    def remove(self) -> None:
        if self._callback in self._listeners:
            self._listeners.remove(self._callback)

def _notify(listeners: List[Listener], record: Dict[str, Any]) -> None:
    for listener in list(listeners):
        try:
            listener(record)
        except Exception as e:
            logger.error(f"Notification listener failed: {e}")

# ---------- Local sink ----------
class LocalNotificationSink:
    """
    Notification sink persisting its schedule under the local data directory.

    Pending reminders live in one JSON file, delivered ones in another.
    Delivery is at-least-once: `fire_due` moves reminders whose time has come
    into the delivered log, `send_immediate` writes there directly.

    The methods are coroutines to satisfy NotificationSink, but the file I/O
    underneath is synchronous and blocks the event loop while it runs.
    """

    def __init__(
        self,
        pending_path: Path = PENDING_FILE,
        delivered_path: Path = DELIVERED_FILE,
        is_device: bool = True,
        grant_permission: bool = True,
    ) -> None:
        self.pending_path = Path(pending_path)
        self.delivered_path = Path(delivered_path)
        self.is_device = is_device
        # Answer given when the user is asked for permission
        self._grant_on_request = grant_permission
        self._granted = False
        self._received_listeners: List[Listener] = []
        self._response_listeners: List[Listener] = []

    # ---------- Permissions ----------
    async def get_permission_status(self) -> bool:
        return self._granted

    async def request_permissions(self) -> bool:
        if not self.is_device:
            logger.info("Notifications only work on physical devices")
            return False
        if not self._granted:
            self._granted = self._grant_on_request
        if not self._granted:
            logger.info("Notification permission not granted")
        return self._granted

    # ---------- Schedule store ----------
    def _load_pending(self) -> List[ScheduledReminder]:
        try:
            rows = load_notifications(self.pending_path)
        except OSError as e:
            raise CollaboratorUnavailable(f"cannot read {self.pending_path}: {e}") from e
        return [ScheduledReminder.model_validate(r) for r in rows]

    def _save_pending(self, items: List[ScheduledReminder]) -> None:
        try:
            save_notifications([r.model_dump(mode="json") for r in items], self.pending_path)
        except OSError as e:
            raise CollaboratorUnavailable(f"cannot write {self.pending_path}: {e}") from e

    def _write_delivered(self, records: List[Dict[str, Any]]) -> None:
        try:
            save_notifications(records, self.delivered_path)
        except OSError as e:
            raise CollaboratorUnavailable(f"cannot write {self.delivered_path}: {e}") from e

    def _deliver(self, reminders: List[ScheduledReminder], now: datetime) -> None:
        handler = get_notification_handler()
        records = []
        for r in reminders:
            record = r.model_dump(mode="json")
            record["delivered_at"] = now.isoformat()
            record["presented"] = bool(handler and handler.show_alert)
            record["acknowledged_at"] = None
            records.append(record)
        self._write_delivered(self.delivered() + records)
        for record in records:
            _notify(self._received_listeners, record)

    async def schedule(self, fire_at: datetime, title: str, body: str,
                       metadata: Dict[str, Any]) -> str:
        if not self._granted:
            raise PermissionDenied("notification permission not granted")
        metadata = dict(metadata or {})
        reminder = ScheduledReminder(
            schedule_id=str(uuid4()),
            kind=metadata.get("type"),
            fires_at=fire_at,
            bill_id=metadata.get("billId"),
            title=title,
            body=body,
            data=metadata,
        )
        pending = self._load_pending()
        pending.append(reminder)
        self._save_pending(pending)
        logger.info(f"Notification scheduled: {reminder.schedule_id}")
        return reminder.schedule_id

    async def cancel(self, schedule_id: str) -> None:
        pending = self._load_pending()
        self._save_pending([r for r in pending if r.schedule_id != schedule_id])

    async def cancel_all(self) -> None:
        self._save_pending([])

    async def list_pending(self) -> List[ScheduledReminder]:
        return sorted(self._load_pending(), key=lambda r: r.fires_at or datetime.min)

    async def send_immediate(self, title: str, body: str,
                             metadata: Dict[str, Any]) -> None:
        if not self._granted:
            raise PermissionDenied("notification permission not granted")
        metadata = dict(metadata or {})
        reminder = ScheduledReminder(
            schedule_id=str(uuid4()),
            kind=metadata.get("type"),
            title=title,
            body=body,
            data=metadata,
        )
        self._deliver([reminder], datetime.now())

    async def fire_due(self, now: datetime) -> int:
        """Deliver every pending reminder whose time has come. Returns how many fired."""
        pending = self._load_pending()
        due = [r for r in pending if r.fires_at is not None and r.fires_at <= now]
        if not due:
            return 0
        # Deliver before dropping from the schedule: a crash in between re-fires
        self._deliver(due, now)
        due_ids = {r.schedule_id for r in due}
        self._save_pending([r for r in pending if r.schedule_id not in due_ids])
        return len(due)

    def delivered(self) -> List[Dict[str, Any]]:
        return load_notifications(self.delivered_path)

    async def acknowledge(self, schedule_id: str, now: Optional[datetime] = None) -> bool:
        """
        Record that the user tapped a delivered notification and tell the
        response listeners. Returns False when no delivered record matches.
        """
        records = self.delivered()
        for record in records:
            if record.get("schedule_id") == schedule_id:
                record["acknowledged_at"] = (now or datetime.now()).isoformat()
                self._write_delivered(records)
                _notify(self._response_listeners, record)
                return True
        return False

    # ---------- Listeners ----------
    def add_received_listener(self, callback: Listener) -> Subscription:
        self._received_listeners.append(callback)
        return Subscription(self._received_listeners, callback)

    def add_response_listener(self, callback: Listener) -> Subscription:
        self._response_listeners.append(callback)
        return Subscription(self._response_listeners, callback)
