"""Vacation balance, request and accrual endpoints for the authenticated employee."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from timeclock_engine.api.dependencies import CurrentEmployee, DbSession, Policy
from timeclock_engine.api.schemas import (
    ErrorResponse,
    VacationAccrualResponse,
    VacationBalanceResponse,
    VacationRequestCreate,
    VacationRequestResponse,
    VacationRequestUpdate,
    zone_context,
)
from timeclock_engine.services.accrual_service import AccrualService
from timeclock_engine.services.vacation_service import VacationService

router = APIRouter(prefix="/vacation", tags=["vacation"])


# ============================================================================
# Balance and requests
# ============================================================================


@router.get("/balance", response_model=VacationBalanceResponse)
async def get_balance(
    db: DbSession,
    policy: Policy,
    employee: CurrentEmployee,
) -> VacationBalanceResponse:
    balance = await VacationService(db, policy).get_balance(employee.employee_id)
    return VacationBalanceResponse(
        vacation_days_total=balance.vacation_days_total,
        vacation_days_used=balance.vacation_days_used,
        vacation_days_remaining=balance.vacation_days_remaining,
        unit=balance.unit,
    )


@router.get("/requests", response_model=list[VacationRequestResponse])
async def list_requests(
    db: DbSession,
    policy: Policy,
    employee: CurrentEmployee,
) -> list[VacationRequestResponse]:
    """The employee's requests, newest first."""
    requests = await VacationService(db, policy).list_requests(employee.employee_id)
    return [
        VacationRequestResponse.model_validate(r, context=zone_context(policy)) for r in requests
    ]


@router.post(
    "/requests",
    response_model=VacationRequestResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_request(
    db: DbSession,
    policy: Policy,
    employee: CurrentEmployee,
    payload: VacationRequestCreate,
) -> VacationRequestResponse:
    request = await VacationService(db, policy).create_request(
        employee.employee_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        days_requested=payload.days_requested,
        request_type=payload.request_type,
        unit=payload.unit,
        notes=payload.notes,
    )
    await db.commit()
    return VacationRequestResponse.model_validate(request, context=zone_context(policy))


@router.put(
    "/requests/{request_id}",
    response_model=VacationRequestResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_request(
    db: DbSession,
    policy: Policy,
    employee: CurrentEmployee,
    request_id: Annotated[UUID, Path()],
    payload: VacationRequestUpdate,
) -> VacationRequestResponse:
    """Edit a pending request."""
    request = await VacationService(db, policy).update_request(
        employee.employee_id,
        request_id,
        **payload.model_dump(exclude_unset=True),
    )
    await db.commit()
    return VacationRequestResponse.model_validate(request, context=zone_context(policy))


@router.post(
    "/requests/{request_id}/cancel",
    response_model=VacationRequestResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def cancel_request(
    db: DbSession,
    policy: Policy,
    employee: CurrentEmployee,
    request_id: Annotated[UUID, Path()],
) -> VacationRequestResponse:
    """Cancel a pending or approved request."""
    request = await VacationService(db, policy).cancel_request(employee.employee_id, request_id)
    await db.commit()
    return VacationRequestResponse.model_validate(request, context=zone_context(policy))


# ============================================================================
# Accrual
# ============================================================================


@router.post("/accrual/calculate", response_model=VacationAccrualResponse)
async def calculate_accrual(
    db: DbSession,
    policy: Policy,
    employee: CurrentEmployee,
) -> VacationAccrualResponse:
    """Compute (or return) today's accrual snapshot."""
    accrual = await AccrualService(db, policy).compute_accrual(employee.employee_id)
    await db.commit()
    return VacationAccrualResponse.model_validate(accrual, context=zone_context(policy))


@router.get("/accrual/latest", response_model=VacationAccrualResponse | None)
async def latest_accrual(
    db: DbSession,
    policy: Policy,
    employee: CurrentEmployee,
) -> VacationAccrualResponse | None:
    accrual = await AccrualService(db, policy).latest_accrual(employee.employee_id)
    if accrual is None:
        return None
    return VacationAccrualResponse.model_validate(accrual, context=zone_context(policy))


@router.get("/accrual/all", response_model=list[VacationAccrualResponse])
async def all_accruals(
    db: DbSession,
    policy: Policy,
    employee: CurrentEmployee,
    year: Annotated[int | None, Query(ge=1970, le=9999)] = None,
) -> list[VacationAccrualResponse]:
    """Snapshots of one calendar year, newest first. Defaults to this year."""
    accruals = await AccrualService(db, policy).all_accruals(employee.employee_id, year)
    return [
        VacationAccrualResponse.model_validate(a, context=zone_context(policy)) for a in accruals
    ]
