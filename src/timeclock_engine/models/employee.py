"""Employee and work schedule models."""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Numeric,
    SmallInteger,
    String,
    Time,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeclock_engine.models.base import Base, UpdatedAtMixin

if TYPE_CHECKING:
    from timeclock_engine.models.timeclock import TimeEntryEvent
    from timeclock_engine.models.vacation import VacationAccrual, VacationRequest


class Employee(Base, UpdatedAtMixin):
    """Employee identity and vacation ledger.

    ``vacation_days_total``/``vacation_days_used`` keep their legacy column
    names; the unit they hold is recorded in ``vacation_unit``.
    """

    __tablename__ = "employee"

    employee_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    employee_number: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(String, nullable=False, default="employee")
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    vacation_days_total: Mapped[Decimal] = mapped_column(
        Numeric(8, 2), nullable=False, default=Decimal("0")
    )
    vacation_days_used: Mapped[Decimal] = mapped_column(
        Numeric(8, 2), nullable=False, default=Decimal("0")
    )
    vacation_unit: Mapped[str] = mapped_column(String, nullable=False, default="hours")

    __table_args__ = (
        CheckConstraint("role IN ('employee', 'admin')", name="employee_role_check"),
        CheckConstraint(
            "vacation_unit IN ('hours', 'days')",
            name="employee_vacation_unit_check",
        ),
    )

    # Relationships
    events: Mapped[list[TimeEntryEvent]] = relationship(back_populates="employee")
    schedules: Mapped[list[WorkSchedule]] = relationship(back_populates="employee")
    vacation_requests: Mapped[list[VacationRequest]] = relationship(
        back_populates="employee",
        foreign_keys="VacationRequest.employee_id",
    )
    accruals: Mapped[list[VacationAccrual]] = relationship(back_populates="employee")

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def vacation_remaining(self) -> Decimal:
        return self.vacation_days_total - self.vacation_days_used


class WorkSchedule(Base, UpdatedAtMixin):
    """Scheduled shift for an employee.

    Weekly rows set ``day_of_week`` (0=Sunday .. 6=Saturday) and leave
    ``schedule_date`` empty; date-specific rows set ``schedule_date`` and
    override the weekly row for that date.
    """

    __tablename__ = "work_schedule"

    work_schedule_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    day_of_week: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    schedule_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    is_working_day: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint(
            "employee_id",
            "day_of_week",
            "schedule_date",
            name="work_schedule_employee_day_unique",
        ),
        # NULL schedule_date never collides in the constraint above
        Index(
            "work_schedule_employee_weekly_unique",
            "employee_id",
            "day_of_week",
            unique=True,
            postgresql_where=text("schedule_date IS NULL"),
            sqlite_where=text("schedule_date IS NULL"),
        ),
        CheckConstraint(
            "day_of_week BETWEEN 0 AND 6",
            name="work_schedule_day_of_week_check",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="schedules")

    @staticmethod
    def day_of_week_for(day: date) -> int:
        """Sunday-based weekday index used by the schedule table."""
        return (day.weekday() + 1) % 7
