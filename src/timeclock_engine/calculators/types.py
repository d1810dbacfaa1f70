"""Type definitions for the punch and hours pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Protocol


class EntryType(str, Enum):
    """Punch event types."""

    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"
    LUNCH_OUT = "lunch_out"
    LUNCH_IN = "lunch_in"
    UNPAID_OUT = "unpaid_out"
    UNPAID_IN = "unpaid_in"

    @property
    def resumes_paid_work(self) -> bool:
        """Punches that start or resume paid time round up."""
        return self in RESUME_TYPES


RESUME_TYPES = frozenset({EntryType.CLOCK_IN, EntryType.LUNCH_IN, EntryType.UNPAID_IN})


class ClockState(str, Enum):
    """Clock state derived from the last punch of the day."""

    OUT = "out"
    IN = "in"
    ON_LUNCH = "on_lunch"
    ON_UNPAID = "on_unpaid"


class VacationUnit(str, Enum):
    """Unit a vacation quantity is expressed in."""

    HOURS = "hours"
    DAYS = "days"


class Punch(Protocol):
    """Anything carrying an entry type and an effective timestamp."""

    entry_type: str
    timestamp: datetime


@dataclass(frozen=True)
class PunchRecord:
    """A plain punch, used by the pure calculators and in tests."""

    entry_type: EntryType
    timestamp: datetime


@dataclass(frozen=True)
class ShiftWindow:
    """Scheduled shift boundaries for one local date."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class VacationQuantity:
    """An amount of leave tagged with its unit."""

    amount: Decimal
    unit: VacationUnit = VacationUnit.HOURS

    def to_unit(self, unit: VacationUnit, hours_per_day: int) -> VacationQuantity:
        """Convert to another unit using a fixed hours-per-day ratio."""
        if unit == self.unit:
            return self
        if unit == VacationUnit.HOURS:
            return VacationQuantity(self.amount * hours_per_day, unit)
        return VacationQuantity(self.amount / Decimal(hours_per_day), unit)

    def to_hours(self, hours_per_day: int) -> Decimal:
        return self.to_unit(VacationUnit.HOURS, hours_per_day).amount


@dataclass
class HoursSummary:
    """Hours derived from replaying a punch sequence."""

    total_hours: Decimal = Decimal("0.00")
    lunch_hours: Decimal = Decimal("0.00")
    unpaid_hours: Decimal = Decimal("0.00")
    paid_hours: Decimal = Decimal("0.00")
    unmatched_events: int = 0


@dataclass
class DayBreakdown:
    """Hours and first/last markers for one local calendar day."""

    work_date: date
    first_clock_in: datetime | None = None
    last_clock_out: datetime | None = None
    first_lunch_out: datetime | None = None
    last_lunch_in: datetime | None = None
    first_unpaid_out: datetime | None = None
    last_unpaid_in: datetime | None = None
    event_count: int = 0
    hours: HoursSummary = field(default_factory=HoursSummary)
