"""Hours aggregation from an ordered punch log."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from timeclock_engine.calculators.local_time import as_utc, local_date
from timeclock_engine.calculators.types import DayBreakdown, EntryType, HoursSummary, Punch
from timeclock_engine.config import TimeclockPolicy

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = Decimal("3600")
HOURS_PRECISION = Decimal("0.01")


def round_hours(value: Decimal) -> Decimal:
    """Round hours to 2 decimal places, half up."""
    return value.quantize(HOURS_PRECISION, rounding=ROUND_HALF_UP)


def _seconds(start: datetime, end: datetime) -> Decimal:
    return Decimal(str((end - start).total_seconds()))


class _Replay:
    """Single pass over punches with three independent open intervals.

    Closing punches without an open interval are counted and skipped.
    Intervals still open at the end contribute nothing.
    """

    def __init__(self) -> None:
        self.open_clock_in: datetime | None = None
        self.open_lunch_out: datetime | None = None
        self.open_unpaid_out: datetime | None = None
        self.total_seconds = Decimal("0")
        self.lunch_seconds = Decimal("0")
        self.unpaid_seconds = Decimal("0")
        self.unmatched = 0

    def feed(self, entry_type: EntryType, at: datetime) -> None:
        if entry_type == EntryType.CLOCK_IN:
            self.open_clock_in = at
        elif entry_type == EntryType.CLOCK_OUT:
            if self.open_clock_in is None:
                self._unmatched(entry_type, at)
            else:
                self.total_seconds += _seconds(self.open_clock_in, at)
                self.open_clock_in = None
        elif entry_type == EntryType.LUNCH_OUT:
            self.open_lunch_out = at
        elif entry_type == EntryType.LUNCH_IN:
            if self.open_lunch_out is None:
                self._unmatched(entry_type, at)
            else:
                self.lunch_seconds += _seconds(self.open_lunch_out, at)
                self.open_lunch_out = None
        elif entry_type == EntryType.UNPAID_OUT:
            self.open_unpaid_out = at
        elif entry_type == EntryType.UNPAID_IN:
            if self.open_unpaid_out is None:
                self._unmatched(entry_type, at)
            else:
                self.unpaid_seconds += _seconds(self.open_unpaid_out, at)
                self.open_unpaid_out = None

    def _unmatched(self, entry_type: EntryType, at: datetime) -> None:
        self.unmatched += 1
        logger.warning("Ignoring unmatched %s punch at %s", entry_type.value, at.isoformat())

    def summary(self) -> HoursSummary:
        paid = self.total_seconds - self.lunch_seconds - self.unpaid_seconds
        return HoursSummary(
            total_hours=round_hours(self.total_seconds / SECONDS_PER_HOUR),
            lunch_hours=round_hours(self.lunch_seconds / SECONDS_PER_HOUR),
            unpaid_hours=round_hours(self.unpaid_seconds / SECONDS_PER_HOUR),
            paid_hours=round_hours(paid / SECONDS_PER_HOUR),
            unmatched_events=self.unmatched,
        )


class HoursAggregator:
    """Derives total/lunch/unpaid/paid hours from punch events.

    Events must be ordered by effective timestamp ascending (ties in
    insertion order), which is how the event store returns them.
    """

    def __init__(self, policy: TimeclockPolicy):
        self.policy = policy

    def aggregate(
        self,
        events: Iterable[Punch],
        range_start: datetime | None = None,
        range_end: datetime | None = None,
    ) -> HoursSummary:
        """Aggregate events falling in [range_start, range_end)."""
        replay = _Replay()
        for event in self._in_range(events, range_start, range_end):
            replay.feed(EntryType(event.entry_type), as_utc(event.timestamp))
        return replay.summary()

    def daily_breakdown(
        self,
        events: Iterable[Punch],
        range_start: datetime | None = None,
        range_end: datetime | None = None,
    ) -> list[DayBreakdown]:
        """Per local calendar day hours plus first/last punch markers."""
        days: dict[date, tuple[DayBreakdown, _Replay]] = {}
        for event in self._in_range(events, range_start, range_end):
            at = as_utc(event.timestamp)
            day = local_date(at, self.policy.zone)
            if day not in days:
                days[day] = (DayBreakdown(work_date=day), _Replay())
            breakdown, replay = days[day]
            entry_type = EntryType(event.entry_type)
            replay.feed(entry_type, at)
            breakdown.event_count += 1
            self._mark(breakdown, entry_type, at)

        result = []
        for day in sorted(days):
            breakdown, replay = days[day]
            breakdown.hours = replay.summary()
            result.append(breakdown)
        return result

    @staticmethod
    def _mark(breakdown: DayBreakdown, entry_type: EntryType, at: datetime) -> None:
        # start markers keep the first punch, end markers keep the latest
        if entry_type == EntryType.CLOCK_IN and breakdown.first_clock_in is None:
            breakdown.first_clock_in = at
        elif entry_type == EntryType.LUNCH_OUT and breakdown.first_lunch_out is None:
            breakdown.first_lunch_out = at
        elif entry_type == EntryType.UNPAID_OUT and breakdown.first_unpaid_out is None:
            breakdown.first_unpaid_out = at
        elif entry_type == EntryType.CLOCK_OUT:
            breakdown.last_clock_out = at
        elif entry_type == EntryType.LUNCH_IN:
            breakdown.last_lunch_in = at
        elif entry_type == EntryType.UNPAID_IN:
            breakdown.last_unpaid_in = at

    @staticmethod
    def _in_range(
        events: Iterable[Punch],
        range_start: datetime | None,
        range_end: datetime | None,
    ) -> Sequence[Punch]:
        start = as_utc(range_start) if range_start is not None else None
        end = as_utc(range_end) if range_end is not None else None
        selected = []
        for event in events:
            at = as_utc(event.timestamp)
            if start is not None and at < start:
                continue
            if end is not None and at >= end:
                continue
            selected.append(event)
        return selected
