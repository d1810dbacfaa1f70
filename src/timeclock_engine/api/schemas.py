"""Pydantic schemas for API request/response models."""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
)

from timeclock_engine.calculators.local_time import as_utc
from timeclock_engine.calculators.types import VacationUnit
from timeclock_engine.config import TimeclockPolicy


def in_display_zone(value: datetime, info: ValidationInfo) -> datetime:
    """Convert to the zone passed as ``context={"zone": ...}``.

    Without a context (FastAPI re-validating a dumped response) the value
    is already converted and is returned as is.
    """
    zone = (info.context or {}).get("zone")
    if zone is None:
        return value
    return as_utc(value).astimezone(zone)


def zone_context(policy: TimeclockPolicy) -> dict[str, Any]:
    """Validation context that renders timestamps in the policy's zone."""
    return {"zone": policy.zone}


LocalDateTime = Annotated[datetime, AfterValidator(in_display_zone)]


# ============================================================================
# Time clock schemas
# ============================================================================


class PunchCreate(BaseModel):
    """Schema for recording a punch.

    ``entry_type`` is validated by the recorder so that a missing or unknown
    value produces the same error shape as an illegal transition.
    """

    entry_type: str | None = None
    notes: str | None = Field(default=None, max_length=1000)


class TimeEntryEventResponse(BaseModel):
    """Schema for a persisted punch."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(validation_alias=AliasChoices("id", "time_entry_event_id"))
    employee_id: UUID
    entry_type: str
    timestamp: LocalDateTime
    raw_timestamp: LocalDateTime
    notes: str | None = None
    created_at: LocalDateTime


class ClockStatusResponse(BaseModel):
    """Schema for the current clock status."""

    current_status: str
    is_on_lunch: bool
    is_on_unpaid_break: bool
    last_entry: TimeEntryEventResponse | None = None


# ============================================================================
# Vacation schemas
# ============================================================================


class VacationBalanceResponse(BaseModel):
    """Schema for an employee's vacation ledger."""

    vacation_days_total: Decimal
    vacation_days_used: Decimal
    vacation_days_remaining: Decimal
    unit: VacationUnit


class VacationRequestCreate(BaseModel):
    """Schema for creating a vacation request."""

    start_date: date
    end_date: date
    days_requested: Decimal = Field(gt=0)
    request_type: str = "vacation"
    unit: VacationUnit = VacationUnit.HOURS
    notes: str | None = None


class VacationRequestUpdate(BaseModel):
    """Schema for editing a pending vacation request."""

    start_date: date | None = None
    end_date: date | None = None
    days_requested: Decimal | None = Field(default=None, gt=0)
    request_type: str | None = None
    unit: VacationUnit | None = None
    notes: str | None = None


class VacationRequestResponse(BaseModel):
    """Schema for vacation request response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(validation_alias=AliasChoices("id", "vacation_request_id"))
    employee_id: UUID
    start_date: date
    end_date: date
    days_requested: Decimal
    unit: VacationUnit
    request_type: str
    status: str
    notes: str | None = None
    approver_id: UUID | None = None
    approved_at: LocalDateTime | None = None
    denial_reason: str | None = None
    created_at: LocalDateTime
    updated_at: LocalDateTime


class DenyRequest(BaseModel):
    """Schema for denying a vacation request."""

    denial_reason: str | None = None


class VacationAccrualResponse(BaseModel):
    """Schema for an accrual snapshot."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(validation_alias=AliasChoices("id", "vacation_accrual_id"))
    employee_id: UUID
    accrual_date: date
    hours_worked: Decimal
    hours_accrued: Decimal
    cumulative_accrued: Decimal
    created_at: LocalDateTime


# ============================================================================
# Admin report schemas
# ============================================================================


class HoursSummaryResponse(BaseModel):
    """Hours derived from a punch sequence."""

    model_config = ConfigDict(from_attributes=True)

    total_hours: Decimal
    lunch_hours: Decimal
    unpaid_hours: Decimal
    paid_hours: Decimal
    unmatched_events: int


class EmployeeTimeReportResponse(BaseModel):
    """One employee row of the time report."""

    employee_id: UUID
    employee_name: str
    employee_number: str | None = None
    email: str
    hours: HoursSummaryResponse
    vacation_accrued: Decimal
    approved_vacation_hours: Decimal


class TimeReportResponse(BaseModel):
    """Schema for the fleet time report."""

    start_date: date
    end_date: date
    employees: list[EmployeeTimeReportResponse]


class DayBreakdownResponse(BaseModel):
    """Schema for one local day of an employee's breakdown."""

    model_config = ConfigDict(from_attributes=True)

    work_date: date
    first_clock_in: LocalDateTime | None = None
    last_clock_out: LocalDateTime | None = None
    first_lunch_out: LocalDateTime | None = None
    last_lunch_in: LocalDateTime | None = None
    first_unpaid_out: LocalDateTime | None = None
    last_unpaid_in: LocalDateTime | None = None
    event_count: int
    hours: HoursSummaryResponse


class WorkScheduleItem(BaseModel):
    """Schema for one schedule row in a replace request."""

    day_of_week: int = Field(ge=0, le=6)
    schedule_date: date | None = None
    start_time: time
    end_time: time
    is_working_day: bool = True


class WorkScheduleResponse(BaseModel):
    """Schema for a stored schedule row."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(validation_alias=AliasChoices("id", "work_schedule_id"))
    employee_id: UUID
    day_of_week: int
    schedule_date: date | None = None
    start_time: time
    end_time: time
    is_working_day: bool


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
