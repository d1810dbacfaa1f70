"""Seed a demo roster into the database.

Usage:
    python -m scripts.seed_demo [--database-url URL]

Creates the tables if needed, then adds one admin and two employees with a
Monday to Friday 08:00-17:00 schedule. Employees that already exist (by
email) are left untouched.
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import time
from decimal import Decimal

from sqlalchemy import select

from timeclock_engine.config import get_settings
from timeclock_engine.database import create_tables, get_engine, make_session_factory
from timeclock_engine.models import Employee, WorkSchedule

DEMO_EMPLOYEES = [
    {
        "email": "admin@example.com",
        "first_name": "Avery",
        "last_name": "Admin",
        "employee_number": "A-0001",
        "role": "admin",
    },
    {
        "email": "jordan@example.com",
        "first_name": "Jordan",
        "last_name": "Ellis",
        "employee_number": "E-1001",
        "vacation_days_total": Decimal("80.00"),
    },
    {
        "email": "casey@example.com",
        "first_name": "Casey",
        "last_name": "Brooks",
        "employee_number": "E-1002",
        "vacation_days_total": Decimal("10.00"),
        "vacation_unit": "days",
    },
]

WEEKDAYS = range(1, 6)


async def seed_demo(database_url: str) -> None:
    """Create tables and insert the demo roster."""
    print(f"Target database: {database_url.split('@')[1] if '@' in database_url else database_url}")

    engine = get_engine(database_url)
    try:
        await create_tables(engine)
        factory = make_session_factory(engine)

        async with factory() as session:
            created = 0
            for fields in DEMO_EMPLOYEES:
                existing = await session.scalar(
                    select(Employee).where(Employee.email == fields["email"])
                )
                if existing is not None:
                    print(f"  Skipping {fields['email']} (already present)")
                    continue

                employee = Employee(**fields)
                session.add(employee)
                await session.flush()

                if employee.role != "admin":
                    session.add_all(
                        WorkSchedule(
                            employee_id=employee.employee_id,
                            day_of_week=day,
                            start_time=time(8, 0),
                            end_time=time(17, 0),
                        )
                        for day in WEEKDAYS
                    )
                created += 1
                print(f"  Added {employee.full_name} <{employee.email}> id={employee.employee_id}")

            await session.commit()

        print(f"\nSeeded {created} employee(s).")
    finally:
        await engine.dispose()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed a demo roster")
    parser.add_argument(
        "--database-url",
        type=str,
        default=get_settings().database_url,
        help="Database URL (default: from settings)",
    )

    args = parser.parse_args()

    asyncio.run(seed_demo(args.database_url))


if __name__ == "__main__":
    main()
