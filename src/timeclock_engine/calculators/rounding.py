"""Pay-increment rounding and break clamping for punch timestamps."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from timeclock_engine.calculators.local_time import as_utc, local_date, local_midnight
from timeclock_engine.calculators.types import EntryType, Punch, ShiftWindow
from timeclock_engine.config import TimeclockPolicy

logger = logging.getLogger(__name__)


class RoundingEngine:
    """Turns a raw punch time into the effective time that gets persisted.

    Order of adjustments (each one only ever moves time later than the
    previous event, never earlier):
    1. Increment rounding on a grid of elapsed time since local midnight.
       Punches that resume paid work (clock_in, lunch_in, unpaid_in) round
       up, the rest (clock_out, lunch_out, unpaid_out) round down.
    2. Minimum lunch: a lunch_in less than the default lunch duration after
       its lunch_out is moved to lunch_out + default.
    3. Shift limits (optional): clock_in no earlier than the scheduled shift
       start, clock_out no later than the scheduled shift end.
    4. Floor at the previous event's effective time. This covers the
       break-start floor (lunch_out/unpaid_out vs. the preceding clock_in)
       and the resume floor (clock_out vs. the last clock_in/lunch_in/unpaid_in).
    """

    def __init__(self, policy: TimeclockPolicy):
        self.policy = policy
        self.increment = timedelta(minutes=policy.pay_increment_minutes)
        self.default_lunch = timedelta(minutes=policy.default_lunch_minutes)

    def round_to_increment(self, raw: datetime, entry_type: EntryType) -> datetime:
        """Round to the increment grid anchored at local midnight.

        Steps are counted in elapsed UTC time, so the repeated hour of a DST
        fall-back keeps its order and rounding up never moves a punch earlier.
        """
        raw = as_utc(raw)
        midnight = as_utc(local_midnight(local_date(raw, self.policy.zone), self.policy.zone))
        steps, remainder = divmod(raw - midnight, self.increment)
        if remainder and entry_type.resumes_paid_work:
            steps += 1
        return midnight + steps * self.increment

    def effective_time(
        self,
        raw: datetime,
        entry_type: EntryType,
        previous: Punch | None = None,
        shift: ShiftWindow | None = None,
    ) -> datetime:
        """Compute the effective timestamp for a validated punch."""
        raw = as_utc(raw)
        effective = self.round_to_increment(raw, entry_type)

        previous_time = as_utc(previous.timestamp) if previous is not None else None
        previous_type = EntryType(previous.entry_type) if previous is not None else None

        if entry_type == EntryType.LUNCH_IN and previous_type == EntryType.LUNCH_OUT:
            if raw - previous_time < self.default_lunch:
                effective = previous_time + self.default_lunch
                logger.debug("lunch_in moved to minimum lunch end %s", effective)

        if shift is not None:
            if (
                self.policy.limit_start_to_shift
                and entry_type == EntryType.CLOCK_IN
                and effective < as_utc(shift.start)
            ):
                effective = as_utc(shift.start)
            elif (
                self.policy.limit_end_to_shift
                and entry_type == EntryType.CLOCK_OUT
                and effective > as_utc(shift.end)
            ):
                effective = as_utc(shift.end)

        if previous_time is not None and effective < previous_time:
            effective = previous_time

        return effective
