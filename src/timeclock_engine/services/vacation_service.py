"""Vacation request workflow and balance ledger."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock_engine.calculators.local_time import utc_now
from timeclock_engine.calculators.types import VacationQuantity, VacationUnit
from timeclock_engine.config import TimeclockPolicy
from timeclock_engine.database import acquire_employee_lock
from timeclock_engine.errors import ConflictError, NotFoundError, StoreError, ValidationError
from timeclock_engine.models import Employee, VacationRequest
from timeclock_engine.services.event_store import EventStore
from timeclock_engine.services.state_machine import (
    VacationRequestStateMachine,
    VacationRequestStatus,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VacationBalance:
    """Ledger view of one employee."""

    vacation_days_total: Decimal
    vacation_days_used: Decimal
    vacation_days_remaining: Decimal
    unit: VacationUnit


def parse_unit(value: str | VacationUnit | None) -> VacationUnit:
    if value is None:
        return VacationUnit.HOURS
    try:
        return VacationUnit(value)
    except ValueError:
        raise ValidationError("Invalid vacation unit", {"unit": str(value)}) from None


class VacationService:
    """Service for vacation requests and the employee vacation ledger.

    Approving a request debits ``vacation_days_used``; cancelling an
    approved request credits the same amount back. Request quantities are
    converted into the employee's ledger unit before touching the ledger.
    """

    def __init__(self, session: AsyncSession, policy: TimeclockPolicy):
        self.session = session
        self.policy = policy
        self.store = EventStore(session, policy)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_balance(self, employee_id: UUID) -> VacationBalance:
        employee = await self.store.get_employee(employee_id)
        return VacationBalance(
            vacation_days_total=employee.vacation_days_total,
            vacation_days_used=employee.vacation_days_used,
            vacation_days_remaining=employee.vacation_remaining,
            unit=VacationUnit(employee.vacation_unit),
        )

    async def get_request(self, request_id: UUID) -> VacationRequest:
        try:
            request = await self.session.get(VacationRequest, request_id)
        except SQLAlchemyError as exc:
            raise StoreError("Failed to load vacation request") from exc
        if request is None:
            raise NotFoundError("Vacation request", request_id)
        return request

    async def list_requests(self, employee_id: UUID) -> Sequence[VacationRequest]:
        """Requests of one employee, newest first."""
        return await self._list(VacationRequest.employee_id == employee_id)

    async def list_all_requests(self, status: str | None = None) -> Sequence[VacationRequest]:
        if status is None:
            return await self._list()
        try:
            status_value = VacationRequestStatus(status)
        except ValueError:
            raise ValidationError("Invalid request status", {"status": status}) from None
        return await self._list(VacationRequest.status == status_value.value)

    async def _list(self, *criteria) -> Sequence[VacationRequest]:
        try:
            result = await self.session.execute(
                select(VacationRequest)
                .where(*criteria)
                .order_by(VacationRequest.created_at.desc(), VacationRequest.start_date.desc())
            )
        except SQLAlchemyError as exc:
            raise StoreError("Failed to list vacation requests") from exc
        return result.scalars().all()

    async def approved_hours_between(
        self,
        employee_id: UUID,
        start_date: date,
        end_date: date,
    ) -> Decimal:
        """Hours of approved requests whose date span overlaps the range."""
        try:
            result = await self.session.execute(
                select(VacationRequest).where(
                    VacationRequest.employee_id == employee_id,
                    VacationRequest.status == VacationRequestStatus.APPROVED.value,
                    VacationRequest.start_date <= end_date,
                    VacationRequest.end_date >= start_date,
                )
            )
        except SQLAlchemyError as exc:
            raise StoreError("Failed to load approved vacation requests") from exc
        hours_per_day = self.policy.hours_per_vacation_day
        return sum(
            (request.quantity.to_hours(hours_per_day) for request in result.scalars()),
            Decimal("0"),
        )

    # ------------------------------------------------------------------
    # Employee workflow
    # ------------------------------------------------------------------

    async def create_request(
        self,
        employee_id: UUID,
        start_date: date,
        end_date: date,
        days_requested: Decimal,
        request_type: str = "vacation",
        unit: str | VacationUnit | None = None,
        notes: str | None = None,
    ) -> VacationRequest:
        employee = await self.store.get_employee(employee_id)
        quantity = VacationQuantity(Decimal(days_requested), parse_unit(unit))
        self._validate_dates(start_date, end_date)
        self._check_balance(employee, quantity)

        request = VacationRequest(
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            days_requested=quantity.amount,
            unit=quantity.unit.value,
            request_type=request_type,
            status=VacationRequestStatus.PENDING.value,
            notes=notes,
        )
        self.session.add(request)
        await self._flush("Failed to create vacation request")
        return request

    async def update_request(
        self,
        employee_id: UUID,
        request_id: UUID,
        start_date: date | None = None,
        end_date: date | None = None,
        days_requested: Decimal | None = None,
        request_type: str | None = None,
        unit: str | VacationUnit | None = None,
        notes: str | None = None,
    ) -> VacationRequest:
        """Edit a pending request owned by the employee."""
        request = await self._owned_request(employee_id, request_id)
        if not VacationRequestStateMachine.can_edit(request.status):
            raise ValidationError("Can only update pending requests", {"status": request.status})

        new_start = start_date or request.start_date
        new_end = end_date or request.end_date
        self._validate_dates(new_start, new_end)
        quantity = VacationQuantity(
            Decimal(days_requested) if days_requested is not None else request.days_requested,
            parse_unit(unit) if unit is not None else VacationUnit(request.unit),
        )
        employee = await self.store.get_employee(employee_id)
        self._check_balance(employee, quantity)

        request.start_date = new_start
        request.end_date = new_end
        request.days_requested = quantity.amount
        request.unit = quantity.unit.value
        if request_type is not None:
            request.request_type = request_type
        if notes is not None:
            request.notes = notes
        await self._flush("Failed to update vacation request")
        return request

    async def cancel_request(self, employee_id: UUID, request_id: UUID) -> VacationRequest:
        """Cancel a pending or approved request; approved ones are credited back."""
        request = await self._owned_request(employee_id, request_id)
        VacationRequestStateMachine.validate_transition(
            request.status, VacationRequestStatus.CANCELLED
        )

        if request.status == VacationRequestStatus.APPROVED:
            employee = await self._lock_employee(request.employee_id)
            amount = self._ledger_amount(employee, request)
            employee.vacation_days_used -= amount
            logger.info(
                "Credited %s %s to employee %s for cancelled request %s",
                amount,
                employee.vacation_unit,
                employee.employee_id,
                request.vacation_request_id,
            )

        request.status = VacationRequestStatus.CANCELLED.value
        await self._flush("Failed to cancel vacation request")
        return request

    # ------------------------------------------------------------------
    # Admin workflow
    # ------------------------------------------------------------------

    async def approve_request(self, request_id: UUID, approver_id: UUID) -> VacationRequest:
        request = await self.get_request(request_id)
        VacationRequestStateMachine.validate_transition(
            request.status, VacationRequestStatus.APPROVED
        )

        employee = await self._lock_employee(request.employee_id)
        amount = self._ledger_amount(employee, request)
        employee.vacation_days_used += amount

        request.status = VacationRequestStatus.APPROVED.value
        request.approver_id = approver_id
        request.approved_at = utc_now()
        await self._flush("Failed to approve vacation request")

        logger.info(
            "Debited %s %s from employee %s for approved request %s",
            amount,
            employee.vacation_unit,
            employee.employee_id,
            request.vacation_request_id,
        )
        return request

    async def deny_request(
        self,
        request_id: UUID,
        approver_id: UUID,
        denial_reason: str | None = None,
    ) -> VacationRequest:
        request = await self.get_request(request_id)
        VacationRequestStateMachine.validate_transition(
            request.status, VacationRequestStatus.DENIED
        )

        request.status = VacationRequestStatus.DENIED.value
        request.approver_id = approver_id
        request.approved_at = utc_now()
        request.denial_reason = denial_reason
        await self._flush("Failed to deny vacation request")
        return request

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _owned_request(self, employee_id: UUID, request_id: UUID) -> VacationRequest:
        request = await self.get_request(request_id)
        if request.employee_id != employee_id:
            raise NotFoundError("Vacation request", request_id)
        return request

    async def _lock_employee(self, employee_id: UUID) -> Employee:
        await acquire_employee_lock(self.session, employee_id)
        return await self.store.lock_employee(employee_id)

    def _ledger_amount(self, employee: Employee, request: VacationRequest) -> Decimal:
        ledger_unit = VacationUnit(employee.vacation_unit)
        return request.quantity.to_unit(ledger_unit, self.policy.hours_per_vacation_day).amount

    def _check_balance(self, employee: Employee, quantity: VacationQuantity) -> None:
        if quantity.amount <= 0:
            raise ValidationError("Requested amount must be positive")
        ledger_unit = VacationUnit(employee.vacation_unit)
        needed = quantity.to_unit(ledger_unit, self.policy.hours_per_vacation_day).amount
        if needed > employee.vacation_remaining:
            raise ConflictError(
                "Insufficient vacation days available",
                {
                    "requested": str(needed),
                    "remaining": str(employee.vacation_remaining),
                    "unit": ledger_unit.value,
                },
            )

    @staticmethod
    def _validate_dates(start_date: date, end_date: date) -> None:
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")

    async def _flush(self, message: str) -> None:
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise StoreError(message) from exc
