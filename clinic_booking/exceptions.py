"""Domain errors raised by the booking services.

Validation, conflict, lookup and transition errors are raised before any write.
``NotificationSchedulingFailure`` is only ever logged by the reminder scheduler.
"""

from typing import Optional


class BookingError(Exception):
    """Base class for every error the booking domain raises"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Bad input; ``fields`` maps each offending field to its message"""

    def __init__(self, fields: dict[str, str]):
        self.fields = dict(fields)
        super().__init__(f"Invalid input: {', '.join(sorted(self.fields))}")


class SlotTaken(BookingError):
    def __init__(self, date, time: str):
        self.date = date
        self.time = time
        super().__init__(f"Time slot {date} {time} is already booked")


class NotFound(BookingError):
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class InvalidTransition(BookingError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change status from {current} to {requested}")


class PersistenceFailure(BookingError):
    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Failed to {operation}")


class NotificationSchedulingFailure(BookingError):
    def __init__(self, channel_id: str, reason: str):
        self.channel_id = channel_id
        super().__init__(f"Could not schedule notification {channel_id}: {reason}")
