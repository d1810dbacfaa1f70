"""Pure punch, hours and accrual calculators."""

from timeclock_engine.calculators.accrual import AccrualCalculator, AccrualFigures
from timeclock_engine.calculators.hours import HoursAggregator, round_hours
from timeclock_engine.calculators.rounding import RoundingEngine
from timeclock_engine.calculators.types import (
    ClockState,
    DayBreakdown,
    EntryType,
    HoursSummary,
    PunchRecord,
    ShiftWindow,
    VacationQuantity,
    VacationUnit,
)

__all__ = [
    "AccrualCalculator",
    "AccrualFigures",
    "ClockState",
    "DayBreakdown",
    "EntryType",
    "HoursAggregator",
    "HoursSummary",
    "PunchRecord",
    "RoundingEngine",
    "ShiftWindow",
    "VacationQuantity",
    "VacationUnit",
    "round_hours",
]
