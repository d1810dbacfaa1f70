"""Admin time reports and daily breakdowns."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from timeclock_engine.calculators.hours import HoursAggregator, round_hours
from timeclock_engine.calculators.local_time import range_bounds
from timeclock_engine.calculators.types import DayBreakdown, HoursSummary
from timeclock_engine.config import TimeclockPolicy
from timeclock_engine.errors import ValidationError
from timeclock_engine.models import Employee
from timeclock_engine.services.accrual_service import AccrualService
from timeclock_engine.services.event_store import EventStore
from timeclock_engine.services.vacation_service import VacationService


@dataclass
class EmployeeTimeReport:
    """One row of the fleet time report."""

    employee: Employee
    hours: HoursSummary
    vacation_accrued: Decimal
    approved_vacation_hours: Decimal


def check_range(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise ValidationError(
            "end_date must be on or after start_date",
            {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )


class ReportService:
    """Read-only reporting over the punch log. Never writes snapshots."""

    def __init__(self, session: AsyncSession, policy: TimeclockPolicy):
        self.session = session
        self.policy = policy
        self.store = EventStore(session, policy)
        self.aggregator = HoursAggregator(policy)
        self.accruals = AccrualService(session, policy)
        self.vacation = VacationService(session, policy)

    async def employee_report(
        self,
        employee: Employee,
        start_date: date,
        end_date: date,
    ) -> EmployeeTimeReport:
        start, end = range_bounds(start_date, end_date, self.policy.zone)
        events = await self.store.events_between(employee.employee_id, start, end)
        figures = await self.accruals.figures_through(employee.employee_id, end_date)
        approved = await self.vacation.approved_hours_between(
            employee.employee_id, start_date, end_date
        )
        return EmployeeTimeReport(
            employee=employee,
            hours=self.aggregator.aggregate(events, start, end),
            vacation_accrued=figures.hours_accrued,
            approved_vacation_hours=round_hours(approved),
        )

    async def time_report(self, start_date: date, end_date: date) -> list[EmployeeTimeReport]:
        """Hours per active employee for local days start_date..end_date."""
        check_range(start_date, end_date)
        return [
            await self.employee_report(employee, start_date, end_date)
            for employee in await self.store.active_employees()
        ]

    async def daily_breakdown(
        self,
        employee_id: UUID,
        start_date: date,
        end_date: date,
    ) -> list[DayBreakdown]:
        check_range(start_date, end_date)
        await self.store.get_employee(employee_id)
        start, end = range_bounds(start_date, end_date, self.policy.zone)
        events = await self.store.events_between(employee_id, start, end)
        return self.aggregator.daily_breakdown(events, start, end)
