"""Tests for work schedule storage rules."""

from datetime import date, time

import pytest
from sqlalchemy.exc import IntegrityError

from timeclock_engine.errors import ValidationError
from timeclock_engine.models import WorkSchedule
from timeclock_engine.services.event_store import EventStore

TUESDAY = 2


def weekly_row(employee, **overrides):
    values = {
        "employee_id": employee.employee_id,
        "day_of_week": TUESDAY,
        "start_time": time(9, 0),
        "end_time": time(17, 0),
    }
    values.update(overrides)
    return WorkSchedule(**values)


class TestScheduleUniqueness:
    """One weekly row per weekday, one dated row per date."""

    async def test_duplicate_weekly_rows_rejected(self, session, test_employee):
        session.add_all([weekly_row(test_employee), weekly_row(test_employee, start_time=time(8, 0))])

        with pytest.raises(IntegrityError):
            await session.flush()

    async def test_dated_row_beside_weekly_row(self, session, policy, test_employee):
        session.add_all(
            [
                weekly_row(test_employee),
                weekly_row(test_employee, schedule_date=date(2025, 6, 10)),
                weekly_row(test_employee, schedule_date=date(2025, 6, 17)),
            ]
        )
        await session.flush()

        rows = await EventStore(session, policy).schedules(test_employee.employee_id)
        assert [r.schedule_date for r in rows] == [None, date(2025, 6, 10), date(2025, 6, 17)]

    async def test_replace_rejects_duplicate_weekdays(self, session, policy, test_employee):
        store = EventStore(session, policy)

        with pytest.raises(ValidationError, match="Duplicate schedule"):
            await store.replace_schedules(
                test_employee.employee_id,
                [weekly_row(test_employee), weekly_row(test_employee)],
            )

    async def test_replace_swaps_weekly_rows(self, session, policy, test_employee):
        store = EventStore(session, policy)
        await store.replace_schedules(test_employee.employee_id, [weekly_row(test_employee)])

        rows = await store.replace_schedules(
            test_employee.employee_id,
            [weekly_row(test_employee, start_time=time(7, 0))],
        )

        assert len(rows) == 1
        assert rows[0].start_time == time(7, 0)
