"""Business logic services."""

from timeclock_engine.services.accrual_service import AccrualService
from timeclock_engine.services.event_recorder import EventRecorder
from timeclock_engine.services.event_store import EventStore
from timeclock_engine.services.report_service import EmployeeTimeReport, ReportService
from timeclock_engine.services.state_machine import (
    PunchStateMachine,
    VacationRequestStateMachine,
    VacationRequestStatus,
)
from timeclock_engine.services.vacation_service import VacationBalance, VacationService

__all__ = [
    "AccrualService",
    "EmployeeTimeReport",
    "EventRecorder",
    "EventStore",
    "PunchStateMachine",
    "ReportService",
    "VacationBalance",
    "VacationRequestStateMachine",
    "VacationRequestStatus",
    "VacationService",
]
