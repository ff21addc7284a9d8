from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4
from pydantic import BaseModel, Field, field_validator

from config import DEFAULT_REMINDER_DAYS

class ReminderKind(str, Enum):
    ADVANCE_REMINDER = "advance_reminder"
    DUE_TODAY = "due_today"
    OVERDUE_BILLS = "overdue_bills"
    BUDGET_OVERSPEND = "budget_overspend"

class Bill(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    amount: Optional[float] = Field(default=None, ge=0)
    due_date: Optional[date] = None
    reminder_days: int = Field(default=DEFAULT_REMINDER_DAYS, ge=0)
    is_paid: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v):
        return str(v)

class Budget(BaseModel):
    category_id: str
    category_name: str
    # Not validated as positive: a bad limit is skipped at check time
    limit_amount: float
    month: Optional[int] = None
    year: Optional[int] = None

    @field_validator("category_id", mode="before")
    @classmethod
    def _category_as_str(cls, v):
        return str(v)

class ReminderEvent(BaseModel):
    """A notification computed for a bill but not yet handed to a sink."""
    kind: ReminderKind
    fires_at: datetime
    title: str
    body: str
    bill_id: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)

class ScheduledReminder(BaseModel):
    schedule_id: str
    kind: Optional[ReminderKind] = None
    fires_at: Optional[datetime] = None
    bill_id: Optional[str] = None
    title: str
    body: str
    data: Dict[str, Any] = Field(default_factory=dict)
