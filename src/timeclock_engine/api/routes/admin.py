"""Admin endpoints: reports, employee punch history, schedules and approvals."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query

from timeclock_engine.api.dependencies import AdminEmployee, DbSession, Policy
from timeclock_engine.api.schemas import (
    DayBreakdownResponse,
    DenyRequest,
    EmployeeTimeReportResponse,
    ErrorResponse,
    HoursSummaryResponse,
    TimeEntryEventResponse,
    TimeReportResponse,
    VacationRequestResponse,
    WorkScheduleItem,
    WorkScheduleResponse,
    zone_context,
)
from timeclock_engine.calculators.local_time import range_bounds
from timeclock_engine.models import WorkSchedule
from timeclock_engine.services.event_store import EventStore
from timeclock_engine.services.report_service import ReportService, check_range
from timeclock_engine.services.vacation_service import VacationService

router = APIRouter(prefix="/admin", tags=["admin"])


# ============================================================================
# Reports
# ============================================================================


@router.get(
    "/time-reports",
    response_model=TimeReportResponse,
    responses={400: {"model": ErrorResponse}},
)
async def time_report(
    db: DbSession,
    policy: Policy,
    admin: AdminEmployee,
    start_date: Annotated[date, Query()],
    end_date: Annotated[date, Query()],
) -> TimeReportResponse:
    """Hours per active employee for a local date range."""
    rows = await ReportService(db, policy).time_report(start_date, end_date)
    return TimeReportResponse(
        start_date=start_date,
        end_date=end_date,
        employees=[
            EmployeeTimeReportResponse(
                employee_id=row.employee.employee_id,
                employee_name=row.employee.full_name,
                employee_number=row.employee.employee_number,
                email=row.employee.email,
                hours=HoursSummaryResponse.model_validate(row.hours),
                vacation_accrued=row.vacation_accrued,
                approved_vacation_hours=row.approved_vacation_hours,
            )
            for row in rows
        ],
    )


@router.get(
    "/employees/{employee_id}/daily-breakdown",
    response_model=list[DayBreakdownResponse],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def daily_breakdown(
    db: DbSession,
    policy: Policy,
    admin: AdminEmployee,
    employee_id: Annotated[UUID, Path()],
    start_date: Annotated[date, Query()],
    end_date: Annotated[date, Query()],
) -> list[DayBreakdownResponse]:
    days = await ReportService(db, policy).daily_breakdown(employee_id, start_date, end_date)
    return [
        DayBreakdownResponse.model_validate(day, context=zone_context(policy)) for day in days
    ]


@router.get(
    "/employees/{employee_id}/events",
    response_model=list[TimeEntryEventResponse],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def employee_events(
    db: DbSession,
    policy: Policy,
    admin: AdminEmployee,
    employee_id: Annotated[UUID, Path()],
    start_date: Annotated[date, Query()],
    end_date: Annotated[date, Query()],
) -> list[TimeEntryEventResponse]:
    check_range(start_date, end_date)
    store = EventStore(db, policy)
    await store.get_employee(employee_id)
    start, end = range_bounds(start_date, end_date, policy.zone)
    events = await store.events_between(employee_id, start, end)
    return [
        TimeEntryEventResponse.model_validate(e, context=zone_context(policy)) for e in events
    ]


# ============================================================================
# Work schedules
# ============================================================================


@router.get(
    "/employees/{employee_id}/work-schedules",
    response_model=list[WorkScheduleResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_work_schedules(
    db: DbSession,
    policy: Policy,
    admin: AdminEmployee,
    employee_id: Annotated[UUID, Path()],
) -> list[WorkScheduleResponse]:
    store = EventStore(db, policy)
    await store.get_employee(employee_id)
    schedules = await store.schedules(employee_id)
    return [WorkScheduleResponse.model_validate(s) for s in schedules]


@router.put(
    "/employees/{employee_id}/work-schedules",
    response_model=list[WorkScheduleResponse],
    responses={404: {"model": ErrorResponse}},
)
async def replace_work_schedules(
    db: DbSession,
    policy: Policy,
    admin: AdminEmployee,
    employee_id: Annotated[UUID, Path()],
    payload: list[WorkScheduleItem],
) -> list[WorkScheduleResponse]:
    """Replace every schedule row of an employee."""
    store = EventStore(db, policy)
    await store.get_employee(employee_id)
    schedules = await store.replace_schedules(
        employee_id,
        [WorkSchedule(**item.model_dump()) for item in payload],
    )
    await db.commit()
    return [WorkScheduleResponse.model_validate(s) for s in schedules]


# ============================================================================
# Vacation approvals
# ============================================================================


@router.get(
    "/vacation-requests",
    response_model=list[VacationRequestResponse],
    responses={400: {"model": ErrorResponse}},
)
async def list_vacation_requests(
    db: DbSession,
    policy: Policy,
    admin: AdminEmployee,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
) -> list[VacationRequestResponse]:
    requests = await VacationService(db, policy).list_all_requests(status_filter)
    return [
        VacationRequestResponse.model_validate(r, context=zone_context(policy)) for r in requests
    ]


@router.post(
    "/vacation-requests/{request_id}/approve",
    response_model=VacationRequestResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def approve_vacation_request(
    db: DbSession,
    policy: Policy,
    admin: AdminEmployee,
    request_id: Annotated[UUID, Path()],
) -> VacationRequestResponse:
    """Approve a pending request and debit the employee's ledger."""
    request = await VacationService(db, policy).approve_request(request_id, admin.employee_id)
    await db.commit()
    return VacationRequestResponse.model_validate(request, context=zone_context(policy))


@router.post(
    "/vacation-requests/{request_id}/deny",
    response_model=VacationRequestResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def deny_vacation_request(
    db: DbSession,
    policy: Policy,
    admin: AdminEmployee,
    request_id: Annotated[UUID, Path()],
    payload: DenyRequest | None = None,
) -> VacationRequestResponse:
    denial_reason = payload.denial_reason if payload is not None else None
    request = await VacationService(db, policy).deny_request(
        request_id, admin.employee_id, denial_reason
    )
    await db.commit()
    return VacationRequestResponse.model_validate(request, context=zone_context(policy))
