"""Tests for the vacation request workflow and ledger."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from timeclock_engine.calculators.types import VacationQuantity, VacationUnit
from timeclock_engine.errors import ConflictError, NotFoundError, ValidationError
from timeclock_engine.services.vacation_service import VacationService

START = date(2025, 7, 14)
END = date(2025, 7, 14)


@pytest.fixture
def service(session, policy):
    return VacationService(session, policy)


async def new_request(service, employee, amount="8", unit="hours", start=START, end=END):
    return await service.create_request(
        employee.employee_id,
        start_date=start,
        end_date=end,
        days_requested=Decimal(amount),
        unit=unit,
    )


class TestLedger:
    """Test debit on approval and credit on cancellation."""

    async def test_approve_then_cancel_is_symmetric(self, service, test_employee, test_admin):
        before = test_employee.vacation_days_used
        request = await new_request(service, test_employee, "8")

        approved = await service.approve_request(
            request.vacation_request_id, test_admin.employee_id
        )
        assert approved.status == "approved"
        assert approved.approver_id == test_admin.employee_id
        assert approved.approved_at is not None
        assert test_employee.vacation_days_used == before + Decimal("8")

        cancelled = await service.cancel_request(
            test_employee.employee_id, request.vacation_request_id
        )
        assert cancelled.status == "cancelled"
        assert test_employee.vacation_days_used == before

    async def test_cancel_pending_does_not_touch_ledger(self, service, test_employee):
        request = await new_request(service, test_employee, "8")

        await service.cancel_request(test_employee.employee_id, request.vacation_request_id)

        assert test_employee.vacation_days_used == Decimal("0.00")

    async def test_deny_does_not_touch_ledger(self, service, test_employee, test_admin):
        request = await new_request(service, test_employee, "8")

        denied = await service.deny_request(
            request.vacation_request_id, test_admin.employee_id, "Coverage gap"
        )

        assert denied.status == "denied"
        assert denied.denial_reason == "Coverage gap"
        assert test_employee.vacation_days_used == Decimal("0.00")

    async def test_days_converted_to_hour_ledger(self, service, test_employee, test_admin):
        """One day requested debits eight hours from an hours ledger."""
        request = await new_request(service, test_employee, "1", unit="days")
        assert request.unit == "days"

        await service.approve_request(request.vacation_request_id, test_admin.employee_id)

        assert test_employee.vacation_days_used == Decimal("8")

    async def test_balance(self, service, test_employee, test_admin):
        request = await new_request(service, test_employee, "16")
        await service.approve_request(request.vacation_request_id, test_admin.employee_id)

        balance = await service.get_balance(test_employee.employee_id)

        assert balance.vacation_days_total == Decimal("80.00")
        assert balance.vacation_days_used == Decimal("16")
        assert balance.vacation_days_remaining == Decimal("64")
        assert balance.unit == VacationUnit.HOURS


class TestRequestRules:
    """Test request validation and status rules."""

    async def test_insufficient_balance(self, service, test_employee):
        with pytest.raises(ConflictError, match="Insufficient vacation days available"):
            await new_request(service, test_employee, "81")

    async def test_insufficient_balance_in_days(self, service, test_employee):
        """Eleven days is 88 hours, more than the 80 remaining."""
        with pytest.raises(ConflictError):
            await new_request(service, test_employee, "11", unit="days")

    async def test_inverted_dates(self, service, test_employee):
        with pytest.raises(ValidationError, match="End date"):
            await new_request(service, test_employee, start=date(2025, 7, 15), end=date(2025, 7, 14))

    async def test_non_positive_amount(self, service, test_employee):
        with pytest.raises(ValidationError, match="must be positive"):
            await new_request(service, test_employee, "0")

    async def test_invalid_unit(self, service, test_employee):
        with pytest.raises(ValidationError, match="Invalid vacation unit"):
            await new_request(service, test_employee, unit="weeks")

    async def test_approve_twice(self, service, test_employee, test_admin):
        request = await new_request(service, test_employee)
        await service.approve_request(request.vacation_request_id, test_admin.employee_id)

        with pytest.raises(ValidationError, match="Can only approve pending requests"):
            await service.approve_request(request.vacation_request_id, test_admin.employee_id)

    async def test_deny_approved(self, service, test_employee, test_admin):
        request = await new_request(service, test_employee)
        await service.approve_request(request.vacation_request_id, test_admin.employee_id)

        with pytest.raises(ValidationError, match="Can only deny pending requests"):
            await service.deny_request(request.vacation_request_id, test_admin.employee_id)

    async def test_cancel_twice(self, service, test_employee):
        request = await new_request(service, test_employee)
        await service.cancel_request(test_employee.employee_id, request.vacation_request_id)

        with pytest.raises(ValidationError, match="Request already cancelled"):
            await service.cancel_request(test_employee.employee_id, request.vacation_request_id)

    async def test_cancel_someone_elses_request(self, service, test_employee, test_admin):
        request = await new_request(service, test_employee)

        with pytest.raises(NotFoundError):
            await service.cancel_request(test_admin.employee_id, request.vacation_request_id)

    async def test_update_pending(self, service, test_employee):
        request = await new_request(service, test_employee, "8")

        updated = await service.update_request(
            test_employee.employee_id,
            request.vacation_request_id,
            end_date=date(2025, 7, 15),
            days_requested=Decimal("16"),
            notes="Two days",
        )

        assert updated.end_date == date(2025, 7, 15)
        assert updated.days_requested == Decimal("16")
        assert updated.notes == "Two days"

    async def test_update_non_pending(self, service, test_employee, test_admin):
        request = await new_request(service, test_employee)
        await service.approve_request(request.vacation_request_id, test_admin.employee_id)

        with pytest.raises(ValidationError, match="Can only update pending requests"):
            await service.update_request(
                test_employee.employee_id, request.vacation_request_id, notes="late edit"
            )

    async def test_unknown_request(self, service, test_admin):
        with pytest.raises(NotFoundError):
            await service.approve_request(uuid4(), test_admin.employee_id)


class TestListing:
    async def test_list_and_filter(self, service, test_employee, test_admin):
        first = await new_request(service, test_employee, "8")
        second = await new_request(service, test_employee, "4", start=date(2025, 8, 1), end=date(2025, 8, 1))
        await service.approve_request(first.vacation_request_id, test_admin.employee_id)

        mine = await service.list_requests(test_employee.employee_id)
        assert {r.vacation_request_id for r in mine} == {
            first.vacation_request_id,
            second.vacation_request_id,
        }

        approved = await service.list_all_requests("approved")
        assert [r.vacation_request_id for r in approved] == [first.vacation_request_id]

        with pytest.raises(ValidationError):
            await service.list_all_requests("archived")

    async def test_approved_hours_overlapping_range(self, service, test_employee, test_admin):
        request = await new_request(
            service, test_employee, "2", unit="days", start=date(2025, 7, 14), end=date(2025, 7, 15)
        )
        await service.approve_request(request.vacation_request_id, test_admin.employee_id)
        await new_request(service, test_employee, "8", start=date(2025, 7, 15), end=date(2025, 7, 15))

        hours = await service.approved_hours_between(
            test_employee.employee_id, date(2025, 7, 15), date(2025, 7, 31)
        )
        assert hours == Decimal("16")

        outside = await service.approved_hours_between(
            test_employee.employee_id, date(2025, 8, 1), date(2025, 8, 31)
        )
        assert outside == Decimal("0")


class TestVacationQuantity:
    def test_conversions(self):
        assert VacationQuantity(Decimal("2"), VacationUnit.DAYS).to_hours(8) == Decimal("16")
        hours = VacationQuantity(Decimal("12"), VacationUnit.HOURS)
        assert hours.to_unit(VacationUnit.DAYS, 8).amount == Decimal("1.5")
        assert hours.to_unit(VacationUnit.HOURS, 8) is hours
