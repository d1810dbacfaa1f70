"""Punch event model."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeclock_engine.models.base import Base, TimestampMixin
from timeclock_engine.models.employee import Employee


class TimeEntryEvent(Base, TimestampMixin):
    """Immutable punch record.

    ``timestamp`` is the effective (rounded and clamped) time used for all
    calculations; ``raw_timestamp`` is the wall-clock time of the request.
    ``sequence`` orders events sharing the same effective timestamp.
    """

    __tablename__ = "time_entry_event"

    time_entry_event_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    entry_type: Mapped[str] = mapped_column(String, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(nullable=False)
    raw_timestamp: Mapped[datetime] = mapped_column(nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "entry_type IN ('clock_in', 'clock_out', 'lunch_out', 'lunch_in', "
            "'unpaid_out', 'unpaid_in')",
            name="time_entry_event_type_check",
        ),
        Index("ix_time_entry_event_employee_timestamp", "employee_id", "timestamp"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="events")
