"""
Reminder Scheduler
Keeps the scheduled reminders of an appointment in line with its current state

Reminder identity is derived from (appointment id, kind), so nothing about a
reminder is stored: cancelling only needs the appointment id. Every channel
failure is logged and swallowed here - a reminder that could not be scheduled
never fails the booking that asked for it.
"""

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from ..clock import Clock
from ..config import REMINDER_CHANNEL_DESCRIPTION, REMINDER_CHANNEL_NAME
from ..exceptions import NotificationSchedulingFailure
from ..utils.formatters import format_clock_time, format_time
from .notification_channel import NotificationChannel

logger = logging.getLogger(__name__)


class ReminderKind(str, Enum):
    ONE_DAY_BEFORE = "ONE_DAY_BEFORE"
    TWO_HOURS_BEFORE = "TWO_HOURS_BEFORE"
    CANCEL = "CANCEL"


REMINDER_OFFSETS = {
    ReminderKind.ONE_DAY_BEFORE: timedelta(days=1),
    ReminderKind.TWO_HOURS_BEFORE: timedelta(hours=2),
}

CANCEL_NOTICE_TITLE = "Appointment Cancelled"


def channel_key(appointment_id: int, kind: ReminderKind) -> str:
    """Channel id of one reminder: "{KIND}-{appointment_id}" """
    return f"{kind.value}-{appointment_id}"


def default_reminder_message(kind: ReminderKind, when: datetime) -> str:
    if kind == ReminderKind.ONE_DAY_BEFORE:
        return f"Reminder: Your appointment is scheduled for tomorrow at {format_clock_time(when)}."
    return f"Reminder: Your appointment is in 2 hours at {format_clock_time(when)}."


class ReminderScheduler:
    def __init__(self, channel: NotificationChannel, clock: Optional[Clock] = None):
        self.channel = channel
        self.clock = clock or Clock()

    def reminder_times(self, when: datetime) -> dict[ReminderKind, datetime]:
        """Fire times of the reminders that are still ahead of now"""
        now = self.clock.now()
        times = {}
        for kind, offset in REMINDER_OFFSETS.items():
            fire_time = when - offset
            if fire_time > now:
                times[kind] = fire_time
        return times

    async def schedule_reminders(
        self,
        appointment_id: int,
        when: datetime,
        title: str,
        message: Optional[str] = None,
    ) -> list[str]:
        """
        Schedule the one-day and two-hour reminders for an appointment.

        A reminder whose fire time is not strictly in the future is skipped.
        When no message is given each reminder gets its own default text.

        Returns:
            Channel ids that were scheduled
        """
        upcoming = self.reminder_times(when)
        scheduled = []
        for kind in REMINDER_OFFSETS:
            key = channel_key(appointment_id, kind)
            fire_time = upcoming.get(kind)
            if fire_time is None:
                logger.info(f"⏭️ Skipped {key}: fire time is in the past")
                continue
            body = message or default_reminder_message(kind, when)
            if await self._schedule(key, title, body, fire_time):
                scheduled.append(key)
        return scheduled

    async def cancel_reminders(self, appointment_id: int) -> None:
        """Cancel both reminders of an appointment. Safe if none were scheduled."""
        for kind in REMINDER_OFFSETS:
            await self._cancel(channel_key(appointment_id, kind))

    async def cancel_and_notify(self, appointment_id: int, time: str) -> None:
        """Cancel the reminders and tell the patient right away that the slot is gone"""
        await self.cancel_reminders(appointment_id)

        key = channel_key(appointment_id, ReminderKind.CANCEL)
        # A notice from an earlier cancellation would block the new one
        await self._cancel(key)
        message = (
            f"Your appointment scheduled for {format_time(time)} has been cancelled. "
            "Please reschedule as needed."
        )
        await self._schedule(key, CANCEL_NOTICE_TITLE, message, self.clock.now())

    async def _schedule(self, key: str, title: str, message: str, fire_time: datetime) -> bool:
        try:
            await self.channel.create_channel(
                key,
                REMINDER_CHANNEL_NAME,
                REMINDER_CHANNEL_DESCRIPTION,
                importance="high",
                vibrate=True,
            )
            await self.channel.schedule_at(key, title, message, fire_time)
        except NotificationSchedulingFailure as e:
            logger.error(f"❌ {e.message}")
            return False
        except Exception as e:
            logger.error(f"❌ Failed to schedule {key}: {e}")
            return False
        logger.info(f"📅 Scheduled {key} at {fire_time.isoformat()}")
        return True

    async def _cancel(self, key: str) -> None:
        try:
            await self.channel.cancel(key)
        except Exception as e:
            logger.error(f"❌ Failed to cancel {key}: {e}")
