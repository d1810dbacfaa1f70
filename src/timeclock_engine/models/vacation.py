"""Vacation request and accrual snapshot models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeclock_engine.calculators.types import VacationQuantity, VacationUnit
from timeclock_engine.models.base import Base, UpdatedAtMixin
from timeclock_engine.models.employee import Employee


class VacationRequest(Base, UpdatedAtMixin):
    """Leave request and its approval trail."""

    __tablename__ = "vacation_request"

    vacation_request_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    days_requested: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    unit: Mapped[str] = mapped_column(String, nullable=False, default="hours")
    request_type: Mapped[str] = mapped_column(String, nullable=False, default="vacation")
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    approver_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("employee.employee_id"),
        nullable=True,
    )
    approved_at: Mapped[datetime | None] = mapped_column(nullable=True)
    denial_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'denied', 'cancelled')",
            name="vacation_request_status_check",
        ),
        CheckConstraint("unit IN ('hours', 'days')", name="vacation_request_unit_check"),
        CheckConstraint("end_date >= start_date", name="vacation_request_dates_check"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(
        back_populates="vacation_requests",
        foreign_keys=[employee_id],
    )
    approver: Mapped[Employee | None] = relationship(foreign_keys=[approver_id])

    @property
    def quantity(self) -> VacationQuantity:
        return VacationQuantity(self.days_requested, VacationUnit(self.unit))


class VacationAccrual(Base, UpdatedAtMixin):
    """Year-to-date accrual snapshot, one row per employee per day."""

    __tablename__ = "vacation_accrual"

    vacation_accrual_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    accrual_date: Mapped[date] = mapped_column(Date, nullable=False)
    hours_worked: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    hours_accrued: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    cumulative_accrued: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "employee_id",
            "accrual_date",
            name="vacation_accrual_employee_date_unique",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="accruals")
