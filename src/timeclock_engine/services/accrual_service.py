"""Vacation accrual snapshots."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock_engine.calculators.accrual import AccrualCalculator, AccrualFigures
from timeclock_engine.calculators.local_time import local_date, range_bounds, utc_now, year_start
from timeclock_engine.config import TimeclockPolicy
from timeclock_engine.errors import StoreError
from timeclock_engine.models import VacationAccrual
from timeclock_engine.services.event_store import EventStore

logger = logging.getLogger(__name__)


class AccrualService:
    """Computes and stores one year-to-date accrual snapshot per day.

    A snapshot, once written for a date, is returned unchanged by every
    later call for that date.
    """

    def __init__(self, session: AsyncSession, policy: TimeclockPolicy):
        self.session = session
        self.policy = policy
        self.store = EventStore(session, policy)
        self.calculator = AccrualCalculator(policy)

    def today(self) -> date:
        return local_date(utc_now(), self.policy.zone)

    async def figures_through(self, employee_id: UUID, as_of: date) -> AccrualFigures:
        """Year-to-date figures through the end of ``as_of``. Writes nothing."""
        start, end = range_bounds(year_start(as_of), as_of, self.policy.zone)
        events = await self.store.events_between(employee_id, start, end)
        return self.calculator.compute(events)

    async def compute_accrual(
        self,
        employee_id: UUID,
        as_of_date: date | None = None,
    ) -> VacationAccrual:
        as_of = as_of_date or self.today()

        existing = await self.store.get_accrual(employee_id, as_of)
        if existing is not None:
            return existing

        await self.store.get_employee(employee_id)
        figures = await self.figures_through(employee_id, as_of)
        accrual = VacationAccrual(
            employee_id=employee_id,
            accrual_date=as_of,
            hours_worked=figures.hours_worked,
            hours_accrued=figures.hours_accrued,
            cumulative_accrued=figures.cumulative_accrued,
        )

        try:
            await self.store.insert_accrual(accrual)
        except IntegrityError:
            # Another request stored the same day first; theirs wins.
            await self.session.rollback()
            existing = await self.store.get_accrual(employee_id, as_of)
            if existing is None:
                raise StoreError(
                    "Accrual snapshot conflict could not be resolved",
                    {"employee_id": str(employee_id), "accrual_date": as_of.isoformat()},
                ) from None
            return existing

        logger.info(
            "Accrual snapshot for employee %s on %s: worked=%s accrued=%s",
            employee_id,
            as_of.isoformat(),
            figures.hours_worked,
            figures.hours_accrued,
        )
        return accrual

    async def latest_accrual(self, employee_id: UUID) -> VacationAccrual | None:
        return await self.store.latest_accrual(employee_id)

    async def all_accruals(
        self,
        employee_id: UUID,
        year: int | None = None,
    ) -> Sequence[VacationAccrual]:
        """Snapshots of one calendar year, newest first."""
        return await self.store.accruals_for_year(employee_id, year or self.today().year)
