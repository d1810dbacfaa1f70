"""Tests for accrual snapshots."""

from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from timeclock_engine.errors import NotFoundError
from timeclock_engine.models import VacationAccrual
from timeclock_engine.services.accrual_service import AccrualService

from tests.conftest import add_events, local

MONDAY = date(2025, 6, 2)


def week_of_work(days: int):
    """Eight paid hours per day starting MONDAY."""
    punches = []
    for offset in range(days):
        day = MONDAY + timedelta(days=offset)
        punches += [
            ("clock_in", local(day, 8)),
            ("lunch_out", local(day, 12)),
            ("lunch_in", local(day, 13)),
            ("clock_out", local(day, 17)),
        ]
    return punches


@pytest.fixture
def service(session, policy):
    return AccrualService(session, policy)


async def snapshot_count(session) -> int:
    return await session.scalar(select(func.count()).select_from(VacationAccrual))


class TestComputeAccrual:
    """Test year-to-date snapshot creation and idempotence."""

    async def test_creates_snapshot(self, service, session, test_employee):
        await add_events(session, test_employee, week_of_work(4))

        accrual = await service.compute_accrual(test_employee.employee_id, date(2025, 6, 30))

        assert accrual.accrual_date == date(2025, 6, 30)
        assert accrual.hours_worked == Decimal("32.00")
        assert accrual.hours_accrued == Decimal("1.00")
        assert accrual.cumulative_accrued == accrual.hours_accrued
        assert await snapshot_count(session) == 1

    async def test_second_call_same_day_is_idempotent(self, service, session, test_employee):
        """Later punches do not change a snapshot already taken for the day."""
        await add_events(session, test_employee, week_of_work(4))
        first = await service.compute_accrual(test_employee.employee_id, date(2025, 6, 30))
        first_values = first.to_dict()

        more = [("clock_in", local(date(2025, 6, 20), 8)), ("clock_out", local(date(2025, 6, 20), 18))]
        await add_events(session, test_employee, more)
        second = await service.compute_accrual(test_employee.employee_id, date(2025, 6, 30))

        assert second.to_dict() == first_values
        assert await snapshot_count(session) == 1

    async def test_year_scoped(self, service, session, test_employee):
        """Hours from the previous year do not count."""
        last_year = [
            ("clock_in", local(date(2024, 12, 30), 0)),
            ("clock_out", local(date(2024, 12, 31), 0)),
        ]
        await add_events(session, test_employee, last_year)

        accrual = await service.compute_accrual(test_employee.employee_id, date(2025, 1, 15))

        assert accrual.hours_worked == Decimal("0.00")
        assert accrual.hours_accrued == Decimal("0.00")

    async def test_events_after_as_of_date_excluded(self, service, session, test_employee):
        await add_events(session, test_employee, week_of_work(4))

        accrual = await service.compute_accrual(test_employee.employee_id, MONDAY + timedelta(days=1))

        assert accrual.hours_worked == Decimal("16.00")
        assert accrual.hours_accrued == Decimal("0.00")

    async def test_unknown_employee(self, service):
        with pytest.raises(NotFoundError):
            await service.compute_accrual(uuid4(), date(2025, 6, 30))


class TestAccrualQueries:
    async def test_latest_and_all(self, service, session, test_employee):
        await add_events(session, test_employee, week_of_work(4))
        for day in (date(2025, 6, 1), date(2025, 6, 3), date(2025, 6, 30)):
            await service.compute_accrual(test_employee.employee_id, day)

        latest = await service.latest_accrual(test_employee.employee_id)
        assert latest is not None
        assert latest.accrual_date == date(2025, 6, 30)

        snapshots = await service.all_accruals(test_employee.employee_id, 2025)
        assert [s.accrual_date for s in snapshots] == [
            date(2025, 6, 30),
            date(2025, 6, 3),
            date(2025, 6, 1),
        ]
        assert await service.all_accruals(test_employee.employee_id, 2024) == []

    async def test_latest_none_without_snapshots(self, service, test_employee):
        assert await service.latest_accrual(test_employee.employee_id) is None
