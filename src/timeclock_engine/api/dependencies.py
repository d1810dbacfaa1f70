"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock_engine.config import TimeclockPolicy, get_settings
from timeclock_engine.database import init_db
from timeclock_engine.models import Employee


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_policy() -> TimeclockPolicy:
    """Punch and accrual rules for this process."""
    return get_settings().policy()


DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Policy = Annotated[TimeclockPolicy, Depends(get_policy)]


async def get_current_employee(
    db: DbSession,
    x_employee_id: Annotated[str | None, Header()] = None,
) -> Employee:
    """Resolve the authenticated employee from the X-Employee-ID header."""
    if not x_employee_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Employee-ID header is required",
        )
    try:
        employee_id = UUID(x_employee_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-Employee-ID format",
        ) from None

    employee = await db.get(Employee, employee_id)
    if employee is None or not employee.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown or inactive employee",
        )
    return employee


async def get_admin_employee(
    employee: Annotated[Employee, Depends(get_current_employee)],
) -> Employee:
    if not employee.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return employee


# Type aliases for cleaner dependency injection
CurrentEmployee = Annotated[Employee, Depends(get_current_employee)]
AdminEmployee = Annotated[Employee, Depends(get_admin_employee)]
