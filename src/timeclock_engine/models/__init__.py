"""ORM models."""

from timeclock_engine.models.base import Base, TimestampMixin, UpdatedAtMixin, UTCDateTime
from timeclock_engine.models.employee import Employee, WorkSchedule
from timeclock_engine.models.timeclock import TimeEntryEvent
from timeclock_engine.models.vacation import VacationAccrual, VacationRequest

__all__ = [
    "Base",
    "Employee",
    "TimeEntryEvent",
    "TimestampMixin",
    "UTCDateTime",
    "UpdatedAtMixin",
    "VacationAccrual",
    "VacationRequest",
    "WorkSchedule",
]
