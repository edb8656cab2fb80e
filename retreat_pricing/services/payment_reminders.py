"""Payment deadline status and reminder cadence for scheduled installments."""

from datetime import date
from typing import Literal

PaymentDeadlineStatus = Literal[
    "upcoming",     # > 14 days, or between reminder days
    "due_2_weeks",  # 14 days
    "due_1_week",   # 7 days
    "due_3_days",   # 3 days
    "due_1_day",    # 1 day
    "due_today",
    "overdue",
]

ReminderType = Literal["14_days", "7_days", "3_days", "1_day", "today", "overdue"]

DEADLINE_STATUS_BY_DAYS: dict[int, PaymentDeadlineStatus] = {
    0: "due_today",
    1: "due_1_day",
    3: "due_3_days",
    7: "due_1_week",
    14: "due_2_weeks",
}

REMINDER_BY_DAYS: dict[int, ReminderType] = {
    14: "14_days",
    7: "7_days",
    3: "3_days",
    1: "1_day",
    0: "today",
}


def days_until_due(due_date: date, today: date | None = None) -> int:
    """Days from today to the due date, negative when overdue."""
    today = today or date.today()
    return (due_date - today).days


def payment_deadline_status(
    due_date: date,
    today: date | None = None,
) -> PaymentDeadlineStatus:
    """Classify an installment by how close its due date is."""
    days = days_until_due(due_date, today)
    if days < 0:
        return "overdue"
    return DEADLINE_STATUS_BY_DAYS.get(days, "upcoming")


def reminder_due(
    due_date: date,
    last_reminder_sent: date | None,
    today: date | None = None,
) -> ReminderType | None:
    """
    Decide whether a payment reminder goes out today.

    Reminders go out 14, 7, 3 and 1 days before the due date, on the due
    date itself, and daily once overdue. At most one reminder per day.

    Args:
        due_date: Installment due date
        last_reminder_sent: Day the previous reminder went out, if any
        today: Reference day (defaults to the current date)

    Returns:
        Reminder type to send, or None
    """
    today = today or date.today()

    if last_reminder_sent is not None and last_reminder_sent >= today:
        return None

    days = days_until_due(due_date, today)
    if days < 0:
        return "overdue"
    return REMINDER_BY_DAYS.get(days)
