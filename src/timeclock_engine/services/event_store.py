"""Persistence adapter for punch events, schedules and accrual snapshots."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock_engine.calculators.local_time import as_utc, day_bounds, local_midnight
from timeclock_engine.calculators.types import ShiftWindow
from timeclock_engine.config import TimeclockPolicy
from timeclock_engine.errors import NotFoundError, StoreError, ValidationError
from timeclock_engine.models import (
    Employee,
    TimeEntryEvent,
    VacationAccrual,
    WorkSchedule,
)


class EventStore:
    """Row access for one request's session.

    Events always come back ordered by effective timestamp, ties broken by
    insertion sequence. Driver failures surface as StoreError; nothing here
    commits or retries.
    """

    def __init__(self, session: AsyncSession, policy: TimeclockPolicy):
        self.session = session
        self.policy = policy

    # ------------------------------------------------------------------
    # Employees
    # ------------------------------------------------------------------

    async def get_employee(self, employee_id: UUID) -> Employee:
        try:
            employee = await self.session.get(Employee, employee_id)
        except SQLAlchemyError as exc:
            raise StoreError("Failed to load employee") from exc
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def lock_employee(self, employee_id: UUID) -> Employee:
        """Load the employee row with SELECT ... FOR UPDATE."""
        try:
            result = await self.session.execute(
                select(Employee)
                .where(Employee.employee_id == employee_id)
                .with_for_update()
            )
            employee = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError("Failed to lock employee") from exc
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def active_employees(self) -> Sequence[Employee]:
        try:
            result = await self.session.execute(
                select(Employee)
                .where(Employee.is_active.is_(True))
                .order_by(Employee.last_name, Employee.first_name)
            )
        except SQLAlchemyError as exc:
            raise StoreError("Failed to list employees") from exc
        return result.scalars().all()

    # ------------------------------------------------------------------
    # Punch events
    # ------------------------------------------------------------------

    async def events_between(
        self,
        employee_id: UUID,
        start: datetime,
        end: datetime,
    ) -> Sequence[TimeEntryEvent]:
        """Events with effective timestamp in [start, end)."""
        try:
            result = await self.session.execute(
                select(TimeEntryEvent)
                .where(
                    TimeEntryEvent.employee_id == employee_id,
                    TimeEntryEvent.timestamp >= as_utc(start),
                    TimeEntryEvent.timestamp < as_utc(end),
                )
                .order_by(TimeEntryEvent.timestamp, TimeEntryEvent.sequence)
            )
        except SQLAlchemyError as exc:
            raise StoreError("Failed to load time entry events") from exc
        return result.scalars().all()

    async def events_for_day(self, employee_id: UUID, day: date) -> Sequence[TimeEntryEvent]:
        """Events of one local calendar day in the display zone."""
        start, end = day_bounds(day, self.policy.zone)
        return await self.events_between(employee_id, start, end)

    async def latest_event(self, employee_id: UUID) -> TimeEntryEvent | None:
        """Most recent event of the employee, whatever its day."""
        try:
            result = await self.session.execute(
                select(TimeEntryEvent)
                .where(TimeEntryEvent.employee_id == employee_id)
                .order_by(TimeEntryEvent.timestamp.desc(), TimeEntryEvent.sequence.desc())
                .limit(1)
            )
        except SQLAlchemyError as exc:
            raise StoreError("Failed to load latest time entry event") from exc
        return result.scalar_one_or_none()

    async def next_sequence(self, employee_id: UUID) -> int:
        try:
            current = await self.session.scalar(
                select(func.max(TimeEntryEvent.sequence)).where(
                    TimeEntryEvent.employee_id == employee_id
                )
            )
        except SQLAlchemyError as exc:
            raise StoreError("Failed to read event sequence") from exc
        return (current or 0) + 1

    async def insert_event(self, event: TimeEntryEvent) -> TimeEntryEvent:
        self.session.add(event)
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise StoreError("Failed to record time entry event") from exc
        return event

    # ------------------------------------------------------------------
    # Work schedules
    # ------------------------------------------------------------------

    async def schedules(self, employee_id: UUID) -> Sequence[WorkSchedule]:
        try:
            result = await self.session.execute(
                select(WorkSchedule)
                .where(WorkSchedule.employee_id == employee_id)
                .order_by(
                    WorkSchedule.schedule_date.is_not(None),
                    WorkSchedule.schedule_date,
                    WorkSchedule.day_of_week,
                )
            )
        except SQLAlchemyError as exc:
            raise StoreError("Failed to load work schedules") from exc
        return result.scalars().all()

    async def schedule_for(self, employee_id: UUID, day: date) -> WorkSchedule | None:
        """Schedule row for a local date; a date-specific row beats the weekly row."""
        try:
            result = await self.session.execute(
                select(WorkSchedule).where(
                    WorkSchedule.employee_id == employee_id,
                    WorkSchedule.schedule_date == day,
                )
            )
            specific = result.scalars().first()
            if specific is not None:
                return specific
            result = await self.session.execute(
                select(WorkSchedule).where(
                    WorkSchedule.employee_id == employee_id,
                    WorkSchedule.schedule_date.is_(None),
                    WorkSchedule.day_of_week == WorkSchedule.day_of_week_for(day),
                )
            )
        except SQLAlchemyError as exc:
            raise StoreError("Failed to load work schedule") from exc
        return result.scalars().first()

    async def shift_for(self, employee_id: UUID, day: date) -> ShiftWindow | None:
        """Scheduled shift boundaries for a local date, or None on a day off."""
        schedule = await self.schedule_for(employee_id, day)
        if schedule is None or not schedule.is_working_day:
            return None
        midnight = local_midnight(day, self.policy.zone)
        start = midnight.replace(hour=schedule.start_time.hour, minute=schedule.start_time.minute)
        end = midnight.replace(hour=schedule.end_time.hour, minute=schedule.end_time.minute)
        return ShiftWindow(start=as_utc(start), end=as_utc(end))

    async def replace_schedules(
        self,
        employee_id: UUID,
        schedules: Sequence[WorkSchedule],
    ) -> Sequence[WorkSchedule]:
        """Replace every schedule row of an employee."""
        keys = [(s.day_of_week, s.schedule_date) for s in schedules]
        if len(set(keys)) != len(keys):
            raise ValidationError("Duplicate schedule for the same day")
        try:
            for existing in await self.schedules(employee_id):
                await self.session.delete(existing)
            await self.session.flush()
            for schedule in schedules:
                schedule.employee_id = employee_id
                self.session.add(schedule)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise StoreError("Failed to save work schedules") from exc
        return await self.schedules(employee_id)

    # ------------------------------------------------------------------
    # Accrual snapshots
    # ------------------------------------------------------------------

    async def get_accrual(self, employee_id: UUID, accrual_date: date) -> VacationAccrual | None:
        try:
            result = await self.session.execute(
                select(VacationAccrual).where(
                    VacationAccrual.employee_id == employee_id,
                    VacationAccrual.accrual_date == accrual_date,
                )
            )
        except SQLAlchemyError as exc:
            raise StoreError("Failed to load vacation accrual") from exc
        return result.scalar_one_or_none()

    async def insert_accrual(self, accrual: VacationAccrual) -> VacationAccrual:
        """Insert a snapshot.

        IntegrityError (a concurrent insert of the same day) propagates
        unwrapped so the caller can resolve it.
        """
        self.session.add(accrual)
        try:
            await self.session.flush()
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            raise StoreError("Failed to save vacation accrual") from exc
        return accrual

    async def latest_accrual(self, employee_id: UUID) -> VacationAccrual | None:
        try:
            result = await self.session.execute(
                select(VacationAccrual)
                .where(VacationAccrual.employee_id == employee_id)
                .order_by(VacationAccrual.accrual_date.desc())
                .limit(1)
            )
        except SQLAlchemyError as exc:
            raise StoreError("Failed to load vacation accrual") from exc
        return result.scalar_one_or_none()

    async def accruals_for_year(self, employee_id: UUID, year: int) -> Sequence[VacationAccrual]:
        try:
            result = await self.session.execute(
                select(VacationAccrual)
                .where(
                    VacationAccrual.employee_id == employee_id,
                    VacationAccrual.accrual_date >= date(year, 1, 1),
                    VacationAccrual.accrual_date <= date(year, 12, 31),
                )
                .order_by(VacationAccrual.accrual_date.desc())
            )
        except SQLAlchemyError as exc:
            raise StoreError("Failed to list vacation accruals") from exc
        return result.scalars().all()
