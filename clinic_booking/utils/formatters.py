from datetime import date, datetime, time
from typing import Optional


def format_date(value: date) -> str:
    """Mon, Oct 19, 2026"""
    return f"{value:%a}, {value:%b} {value.day}, {value.year}"


def format_time(label: str) -> str:
    """Convert a 24h "HH:MM" label to "h:MM AM/PM" """
    hours, minutes = label.split(":")
    hours_num = int(hours)
    period = "PM" if hours_num >= 12 else "AM"
    hours12 = hours_num % 12 or 12
    return f"{hours12}:{minutes} {period}"


def format_clock_time(value: datetime) -> str:
    """Zero-padded 12h time used in reminder texts, e.g. 09:00 AM"""
    return value.strftime("%I:%M %p")


def format_appointment_datetime(value: date, label: str) -> str:
    return f"{format_date(value)} at {format_time(label)}"


def combine_date_and_time(value: date, label: str) -> datetime:
    """Build the local datetime an appointment starts at"""
    hours, minutes = label.split(":")
    return datetime.combine(value, time(int(hours), int(minutes)))


def relative_day_description(value: date, today: Optional[date] = None) -> str:
    today = today or date.today()
    diff_days = (value - today).days
    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Tomorrow"
    if 1 < diff_days < 7:
        return f"In {diff_days} days"
    return format_date(value)
