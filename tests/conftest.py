"""Pytest fixtures for timeclock engine tests."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import AsyncGenerator
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from timeclock_engine.config import TimeclockPolicy
from timeclock_engine.database import make_session_factory
from timeclock_engine.models import Base, Employee, TimeEntryEvent

# Use in-memory SQLite for tests (with async support).
# StaticPool keeps the single in-memory database alive across sessions.
TEST_DATABASE_URL = "sqlite+aiosqlite://"

CHICAGO = ZoneInfo("America/Chicago")


def local(day: date, hour: int, minute: int = 0, second: int = 0) -> datetime:
    """Wall-clock time in the display zone used by the default policy."""
    return datetime(day.year, day.month, day.day, hour, minute, second, tzinfo=CHICAGO)


@pytest.fixture
def policy() -> TimeclockPolicy:
    """Default punch/accrual rules: 15 minute increment, 60 minute lunch."""
    return TimeclockPolicy()


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    session_factory = make_session_factory(engine)

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def test_employee(session: AsyncSession) -> Employee:
    """Create an hourly employee with an 80 hour vacation allotment."""
    employee = Employee(
        employee_id=uuid4(),
        email="dana.reyes@example.com",
        first_name="Dana",
        last_name="Reyes",
        employee_number="E-1001",
        role="employee",
        vacation_days_total=Decimal("80.00"),
        vacation_days_used=Decimal("0.00"),
        vacation_unit="hours",
    )
    session.add(employee)
    await session.flush()
    return employee


@pytest_asyncio.fixture
async def test_admin(session: AsyncSession) -> Employee:
    """Create an admin who approves requests."""
    admin = Employee(
        employee_id=uuid4(),
        email="sam.okafor@example.com",
        first_name="Sam",
        last_name="Okafor",
        employee_number="A-0001",
        role="admin",
    )
    session.add(admin)
    await session.flush()
    return admin


async def add_events(
    session: AsyncSession,
    employee: Employee,
    punches: list[tuple[str, datetime]],
) -> list[TimeEntryEvent]:
    """Insert already-effective punches directly, bypassing the recorder."""
    events = [
        TimeEntryEvent(
            employee_id=employee.employee_id,
            entry_type=entry_type,
            timestamp=at,
            raw_timestamp=at,
            sequence=index,
        )
        for index, (entry_type, at) in enumerate(punches, start=1)
    ]
    session.add_all(events)
    await session.flush()
    return events
