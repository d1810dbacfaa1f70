"""Event recorder: validate, round and persist one punch."""

from __future__ import annotations

import logging
from datetime import date, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from timeclock_engine.calculators.local_time import as_utc, local_date, local_midnight, utc_now
from timeclock_engine.calculators.rounding import RoundingEngine
from timeclock_engine.calculators.types import EntryType
from timeclock_engine.config import TimeclockPolicy
from timeclock_engine.database import acquire_employee_lock
from timeclock_engine.errors import TransitionRejectedError, ValidationError
from timeclock_engine.models import TimeEntryEvent
from timeclock_engine.services.event_store import EventStore
from timeclock_engine.services.state_machine import PunchStateMachine

logger = logging.getLogger(__name__)


class EventRecorder:
    """Appends validated, rounded punches to an employee's event log.

    The read-validate-write sequence runs under a per-employee lock (an
    advisory lock on Postgres plus a row lock on the employee), so two
    concurrent punches for the same employee are serialized. The caller
    owns the transaction and commits after ``record_event`` returns.
    """

    def __init__(self, session: AsyncSession, policy: TimeclockPolicy):
        self.session = session
        self.policy = policy
        self.store = EventStore(session, policy)
        self.rounding = RoundingEngine(policy)

    async def record_event(
        self,
        employee_id: UUID,
        entry_type: EntryType,
        raw_timestamp: datetime | None = None,
        notes: str | None = None,
    ) -> TimeEntryEvent:
        """Record one punch.

        Raises:
            TransitionRejectedError: If the punch is illegal from the
                employee's current clock state.
            ValidationError: If the raw time precedes the previous punch.
            NotFoundError: If the employee does not exist.
            StoreError: If the insert fails.
        """
        raw = as_utc(raw_timestamp) if raw_timestamp is not None else utc_now()
        day = local_date(raw, self.policy.zone)

        await acquire_employee_lock(self.session, employee_id)
        await self.store.lock_employee(employee_id)

        latest = await self.store.latest_event(employee_id)
        if latest is not None and raw < as_utc(latest.raw_timestamp):
            raise ValidationError(
                "Punch time cannot precede the previous punch.",
                {"previous_raw_timestamp": as_utc(latest.raw_timestamp).isoformat()},
            )

        previous = self._same_day(latest, day)
        last_type = previous.entry_type if previous is not None else None

        try:
            PunchStateMachine.validate(last_type, entry_type)
        except TransitionRejectedError as exc:
            logger.info(
                "Rejected %s for employee %s in state %s",
                entry_type.value,
                employee_id,
                exc.current_state,
            )
            raise

        shift = None
        if self.policy.limit_start_to_shift or self.policy.limit_end_to_shift:
            shift = await self.store.shift_for(employee_id, day)

        # Floor at the latest punch even when it belongs to an earlier day
        effective = self.rounding.effective_time(raw, entry_type, previous=latest, shift=shift)

        event = TimeEntryEvent(
            employee_id=employee_id,
            entry_type=entry_type.value,
            timestamp=effective,
            raw_timestamp=raw,
            sequence=await self.store.next_sequence(employee_id),
            notes=notes,
        )
        await self.store.insert_event(event)

        logger.info(
            "Recorded %s for employee %s at %s (raw %s)",
            entry_type.value,
            employee_id,
            effective.isoformat(),
            raw.isoformat(),
        )
        return event

    async def current_status(self, employee_id: UUID) -> tuple[str, TimeEntryEvent | None]:
        """Display status and last punch of today."""
        today = local_date(utc_now(), self.policy.zone)
        last = self._same_day(await self.store.latest_event(employee_id), today)
        label = PunchStateMachine.status_label(last.entry_type if last is not None else None)
        return label, last

    def _same_day(self, event: TimeEntryEvent | None, day: date) -> TimeEntryEvent | None:
        """The event if it counts toward ``day``'s clock state.

        Only the lower bound is checked: a punch rounded up past midnight
        still belongs to the day it was recorded on.
        """
        if event is None or as_utc(event.timestamp) < as_utc(local_midnight(day, self.policy.zone)):
            return None
        return event
