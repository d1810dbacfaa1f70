"""Vacation accrual from paid hours worked."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal

from timeclock_engine.calculators.hours import SECONDS_PER_HOUR, round_hours
from timeclock_engine.calculators.local_time import as_utc
from timeclock_engine.calculators.types import EntryType, Punch
from timeclock_engine.config import TimeclockPolicy


@dataclass(frozen=True)
class AccrualFigures:
    """Year-to-date accrual numbers for one employee."""

    hours_worked: Decimal
    hours_accrued: Decimal
    cumulative_accrued: Decimal


class AccrualCalculator:
    """Computes accrued vacation hours at a fixed worked-hours ratio.

    Hours worked use a running total: closed clock sessions add, closed
    lunch and unpaid breaks subtract. That equals paid hours for well-formed
    logs. The result is floored at zero.

    ``cumulative_accrued`` is year-scoped: it is recomputed from January 1
    on every call and equals ``hours_accrued``.
    """

    def __init__(self, policy: TimeclockPolicy):
        self.policy = policy

    def hours_worked(self, events: Iterable[Punch]) -> Decimal:
        """Paid hours as an unrounded Decimal."""
        running = Decimal("0")
        clock_in = lunch_out = unpaid_out = None

        for event in events:
            at = as_utc(event.timestamp)
            entry_type = EntryType(event.entry_type)

            if entry_type == EntryType.CLOCK_IN:
                clock_in = at
            elif entry_type == EntryType.CLOCK_OUT and clock_in is not None:
                running += Decimal(str((at - clock_in).total_seconds()))
                clock_in = None
            elif entry_type == EntryType.LUNCH_OUT:
                lunch_out = at
            elif entry_type == EntryType.LUNCH_IN and lunch_out is not None:
                running -= Decimal(str((at - lunch_out).total_seconds()))
                lunch_out = None
            elif entry_type == EntryType.UNPAID_OUT:
                unpaid_out = at
            elif entry_type == EntryType.UNPAID_IN and unpaid_out is not None:
                running -= Decimal(str((at - unpaid_out).total_seconds()))
                unpaid_out = None

        return max(Decimal("0"), running / SECONDS_PER_HOUR)

    def hours_accrued(self, hours_worked: Decimal) -> Decimal:
        """One vacation hour per ``accrual_hours_per_hour`` worked, floored."""
        ratio = Decimal(self.policy.accrual_hours_per_hour)
        return (hours_worked / ratio).to_integral_value(rounding=ROUND_FLOOR)

    def compute(self, events: Iterable[Punch]) -> AccrualFigures:
        worked = self.hours_worked(events)
        accrued = round_hours(self.hours_accrued(worked))
        return AccrualFigures(
            hours_worked=round_hours(worked),
            hours_accrued=accrued,
            cumulative_accrued=accrued,
        )
