"""
app/engine/followup.py — Follow-up cadence and the reminder queue.

Cadence comes from the client's current status, not from its score:
  Active    → every 14 days, High priority
  Potential → every 7 days,  High priority
  Inactive  → every 60 days, Low priority
  other     → every 30 days, Medium priority
"""

import logging
from datetime import datetime
from typing import Iterable

from app.db.models import ClientStatus
from app.engine.models import (
    PRIORITY_RANK,
    ClientRecord,
    FollowUpQueue,
    Priority,
    ReminderEntry,
)
from app.engine.signals import days_since_last_interaction

logger = logging.getLogger(__name__)

FOLLOW_UP_CADENCE = {
    ClientStatus.ACTIVE: (14, Priority.HIGH),
    ClientStatus.POTENTIAL: (7, Priority.HIGH),
    ClientStatus.INACTIVE: (60, Priority.LOW),
}
DEFAULT_CADENCE = (30, Priority.MEDIUM)

# Checked top-down, first match wins. 10-12 overlaps 9-11, so the
# mid-morning hint only shows at 12:xx.
CONTACT_TIME_BUCKETS = [
    (range(9, 12), "Morning (9-11 AM): best for phone calls"),
    (range(14, 17), "Afternoon (2-4 PM): best for email"),
    (range(10, 13), "Mid-morning (10 AM-12 PM): best for follow-ups"),
]
DEFAULT_CONTACT_TIME = "During business hours (9 AM-5 PM)"


def best_time_to_contact(now: datetime) -> str:
    """
    Coarse hint keyed only on the hour of `now`.

    The hour is read as given. The service layer passes a UTC `now`, so the
    buckets are UTC hours, not the user's local wall-clock time.
    """
    for hours, hint in CONTACT_TIME_BUCKETS:
        if now.hour in hours:
            return hint
    return DEFAULT_CONTACT_TIME


def follow_up_entry(record: ClientRecord, now: datetime) -> ReminderEntry:
    """Build the reminder entry for one client, whether or not it is due."""
    frequency, priority = FOLLOW_UP_CADENCE.get(record.status, DEFAULT_CADENCE)
    days = days_since_last_interaction(record, now)

    return ReminderEntry(
        client_id=record.id,
        name=record.name,
        status=record.status,
        recommended_frequency=frequency,
        needs_follow_up=days >= frequency,
        days_overdue=max(0, days - frequency),
        priority=priority,
        best_time_to_contact=best_time_to_contact(now),
        days_since_last_interaction=days,
    )


def build_follow_up_queue(records: Iterable[ClientRecord], now: datetime) -> FollowUpQueue:
    """
    Due reminders, most overdue first.

    Ties on days overdue are broken by priority (High > Medium > Low); entries
    equal on both keys keep their input order.
    """
    due = [e for e in (follow_up_entry(r, now) for r in records) if e.needs_follow_up]
    reminders = sorted(
        due,
        key=lambda e: (e.days_overdue, PRIORITY_RANK[e.priority]),
        reverse=True,
    )
    logger.debug("Follow-up queue built: %d clients due.", len(reminders))
    return FollowUpQueue(reminders=tuple(reminders), total_needing_follow_up=len(reminders))
