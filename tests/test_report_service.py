"""Tests for admin time reports and daily breakdowns."""

from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from timeclock_engine.errors import NotFoundError, ValidationError
from timeclock_engine.models import Employee, VacationAccrual
from timeclock_engine.services.report_service import ReportService
from timeclock_engine.services.vacation_service import VacationService

from tests.conftest import add_events, local

MONDAY = date(2025, 6, 2)


def workweek():
    punches = []
    for offset in range(5):
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
    return ReportService(session, policy)


class TestTimeReport:
    """Test the fleet time report."""

    async def test_report_rows(self, service, session, policy, test_employee, test_admin):
        await add_events(session, test_employee, workweek())
        vacation = VacationService(session, policy)
        request = await vacation.create_request(
            test_employee.employee_id,
            start_date=MONDAY + timedelta(days=4),
            end_date=MONDAY + timedelta(days=4),
            days_requested=Decimal("8"),
        )
        await vacation.approve_request(request.vacation_request_id, test_admin.employee_id)

        rows = await service.time_report(MONDAY, MONDAY + timedelta(days=6))
        by_id = {row.employee.employee_id: row for row in rows}

        row = by_id[test_employee.employee_id]
        assert row.hours.total_hours == Decimal("45.00")
        assert row.hours.lunch_hours == Decimal("5.00")
        assert row.hours.paid_hours == Decimal("40.00")
        assert row.vacation_accrued == Decimal("1.00")
        assert row.approved_vacation_hours == Decimal("8.00")

        admin_row = by_id[test_admin.employee_id]
        assert admin_row.hours.total_hours == Decimal("0.00")

    async def test_report_is_read_only(self, service, session, test_employee):
        await add_events(session, test_employee, workweek())

        await service.time_report(MONDAY, MONDAY + timedelta(days=6))

        count = await session.scalar(select(func.count()).select_from(VacationAccrual))
        assert count == 0

    async def test_range_limits_hours(self, service, session, test_employee):
        await add_events(session, test_employee, workweek())

        rows = await service.time_report(MONDAY, MONDAY)
        row = next(r for r in rows if r.employee.employee_id == test_employee.employee_id)

        assert row.hours.paid_hours == Decimal("8.00")

    async def test_inactive_employees_excluded(self, service, session, test_employee):
        retired = Employee(
            employee_id=uuid4(),
            email="former@example.com",
            first_name="Lee",
            last_name="Former",
            is_active=False,
        )
        session.add(retired)
        await session.flush()

        rows = await service.time_report(MONDAY, MONDAY)

        assert retired.employee_id not in {r.employee.employee_id for r in rows}
        assert test_employee.employee_id in {r.employee.employee_id for r in rows}

    async def test_inverted_range(self, service):
        with pytest.raises(ValidationError):
            await service.time_report(MONDAY, MONDAY - timedelta(days=1))


class TestDailyBreakdown:
    async def test_one_row_per_worked_day(self, service, session, test_employee):
        await add_events(session, test_employee, workweek())

        days = await service.daily_breakdown(
            test_employee.employee_id, MONDAY, MONDAY + timedelta(days=6)
        )

        assert [d.work_date for d in days] == [MONDAY + timedelta(days=i) for i in range(5)]
        assert all(d.hours.paid_hours == Decimal("8.00") for d in days)
        assert days[0].first_clock_in == local(MONDAY, 8)
        assert days[0].last_clock_out == local(MONDAY, 17)

    async def test_unknown_employee(self, service):
        with pytest.raises(NotFoundError):
            await service.daily_breakdown(uuid4(), MONDAY, MONDAY)
