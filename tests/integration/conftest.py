"""Integration test fixtures: the FastAPI app over an in-memory database."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from uuid import UUID, uuid4

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from timeclock_engine.api.app import create_app
from timeclock_engine.api.dependencies import get_db_session, get_policy
from timeclock_engine.config import TimeclockPolicy
from timeclock_engine.database import make_session_factory
from timeclock_engine.models import Employee

# One-minute increments keep "now" punches on the current local day.
API_POLICY = TimeclockPolicy(pay_increment_minutes=1)

ALICE_EMPLOYEE_ID = UUID("e5a4c9d3-4567-89ab-cdef-012345678901")
BOB_EMPLOYEE_ID = UUID("f6b5dae4-5678-9abc-def0-123456789012")
ADMIN_EMPLOYEE_ID = UUID("a1b2c3d4-1111-2222-3333-444455556666")
INACTIVE_EMPLOYEE_ID = UUID("b2c3d4e5-2222-3333-4444-555566667777")


def auth(employee_id: UUID) -> dict[str, str]:
    return {"X-Employee-ID": str(employee_id)}


@pytest_asyncio.fixture
async def seeded_db(session: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """Two employees, one admin and one inactive account."""
    session.add_all(
        [
            Employee(
                employee_id=ALICE_EMPLOYEE_ID,
                email="alice@example.com",
                first_name="Alice",
                last_name="Nguyen",
                employee_number="E-2001",
                vacation_days_total=Decimal("80.00"),
            ),
            Employee(
                employee_id=BOB_EMPLOYEE_ID,
                email="bob@example.com",
                first_name="Bob",
                last_name="Martin",
                employee_number="E-2002",
                vacation_days_total=Decimal("40.00"),
            ),
            Employee(
                employee_id=ADMIN_EMPLOYEE_ID,
                email="admin@example.com",
                first_name="Pat",
                last_name="Admin",
                role="admin",
            ),
            Employee(
                employee_id=INACTIVE_EMPLOYEE_ID,
                email="gone@example.com",
                first_name="Gone",
                last_name="Away",
                is_active=False,
            ),
        ]
    )
    await session.commit()
    yield session


@pytest_asyncio.fixture
async def client(engine: AsyncEngine, seeded_db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = create_app()
    factory = make_session_factory(engine)

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_policy] = lambda: API_POLICY

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def new_id() -> str:
    return str(uuid4())
