"""Time clock API endpoints for the authenticated employee."""

from datetime import date, timedelta
from typing import Annotated

from fastapi import APIRouter, Query, status

from timeclock_engine.api.dependencies import CurrentEmployee, DbSession, Policy
from timeclock_engine.api.schemas import (
    ClockStatusResponse,
    ErrorResponse,
    PunchCreate,
    TimeEntryEventResponse,
    zone_context,
)
from timeclock_engine.calculators.local_time import local_date, range_bounds, utc_now
from timeclock_engine.calculators.types import ClockState
from timeclock_engine.services.event_recorder import EventRecorder
from timeclock_engine.services.event_store import EventStore
from timeclock_engine.services.report_service import check_range
from timeclock_engine.services.state_machine import PunchStateMachine, parse_entry_type

router = APIRouter(prefix="/timeclock", tags=["timeclock"])

DEFAULT_HISTORY_DAYS = 30


@router.post(
    "/events",
    response_model=TimeEntryEventResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_event(
    db: DbSession,
    policy: Policy,
    employee: CurrentEmployee,
    payload: PunchCreate,
) -> TimeEntryEventResponse:
    """Record a punch at the current time."""
    entry_type = parse_entry_type(payload.entry_type)
    recorder = EventRecorder(db, policy)
    event = await recorder.record_event(employee.employee_id, entry_type, notes=payload.notes)
    await db.commit()
    return TimeEntryEventResponse.model_validate(event, context=zone_context(policy))


@router.get(
    "/events/today",
    response_model=list[TimeEntryEventResponse],
)
async def list_today_events(
    db: DbSession,
    policy: Policy,
    employee: CurrentEmployee,
) -> list[TimeEntryEventResponse]:
    """Today's punches, oldest first."""
    store = EventStore(db, policy)
    today = local_date(utc_now(), policy.zone)
    events = await store.events_for_day(employee.employee_id, today)
    return [
        TimeEntryEventResponse.model_validate(e, context=zone_context(policy)) for e in events
    ]


@router.get(
    "/events",
    response_model=list[TimeEntryEventResponse],
    responses={400: {"model": ErrorResponse}},
)
async def list_events(
    db: DbSession,
    policy: Policy,
    employee: CurrentEmployee,
    start_date: Annotated[date | None, Query()] = None,
    end_date: Annotated[date | None, Query()] = None,
) -> list[TimeEntryEventResponse]:
    """Punches in a local date range, oldest first. Defaults to the last 30 days."""
    end_day = end_date or local_date(utc_now(), policy.zone)
    start_day = start_date or end_day - timedelta(days=DEFAULT_HISTORY_DAYS)
    check_range(start_day, end_day)

    store = EventStore(db, policy)
    start, end = range_bounds(start_day, end_day, policy.zone)
    events = await store.events_between(employee.employee_id, start, end)
    return [
        TimeEntryEventResponse.model_validate(e, context=zone_context(policy)) for e in events
    ]


@router.get(
    "/status",
    response_model=ClockStatusResponse,
)
async def get_status(
    db: DbSession,
    policy: Policy,
    employee: CurrentEmployee,
) -> ClockStatusResponse:
    """Current clock status derived from today's last punch."""
    recorder = EventRecorder(db, policy)
    label, last = await recorder.current_status(employee.employee_id)
    state = PunchStateMachine.state_for(last.entry_type if last is not None else None)
    return ClockStatusResponse(
        current_status=label,
        is_on_lunch=state == ClockState.ON_LUNCH,
        is_on_unpaid_break=state == ClockState.ON_UNPAID,
        last_entry=(
            TimeEntryEventResponse.model_validate(last, context=zone_context(policy))
            if last is not None
            else None
        ),
    )
