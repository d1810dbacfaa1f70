"""Punch and vacation request state machines with transition validation."""

from __future__ import annotations

from enum import Enum

from timeclock_engine.calculators.types import ClockState, EntryType
from timeclock_engine.errors import TransitionRejectedError, ValidationError


def parse_entry_type(value: str | None) -> EntryType:
    """Parse a client-supplied entry type."""
    if not value:
        raise ValidationError("Entry type is required")
    try:
        return EntryType(value)
    except ValueError:
        raise ValidationError("Invalid entry type", {"entry_type": value}) from None


class PunchStateMachine:
    """Clock state machine for one employee's day.

    Allowed transitions:
    - out → clock_in
    - in → clock_out, lunch_out, unpaid_out
    - on_lunch → lunch_in
    - on_unpaid → unpaid_in

    There is no terminal state; out is re-enterable.
    """

    # State reached after each punch type. No punch today means out.
    STATE_AFTER: dict[EntryType | None, ClockState] = {
        None: ClockState.OUT,
        EntryType.CLOCK_IN: ClockState.IN,
        EntryType.CLOCK_OUT: ClockState.OUT,
        EntryType.LUNCH_OUT: ClockState.ON_LUNCH,
        EntryType.LUNCH_IN: ClockState.IN,
        EntryType.UNPAID_OUT: ClockState.ON_UNPAID,
        EntryType.UNPAID_IN: ClockState.IN,
    }

    VALID_TRANSITIONS: dict[ClockState, list[EntryType]] = {
        ClockState.OUT: [EntryType.CLOCK_IN],
        ClockState.IN: [EntryType.CLOCK_OUT, EntryType.LUNCH_OUT, EntryType.UNPAID_OUT],
        ClockState.ON_LUNCH: [EntryType.LUNCH_IN],
        ClockState.ON_UNPAID: [EntryType.UNPAID_IN],
    }

    # Display status reported by the status endpoint
    STATUS_LABELS: dict[ClockState, str] = {
        ClockState.OUT: "clocked_out",
        ClockState.IN: "clocked_in",
        ClockState.ON_LUNCH: "on_lunch",
        ClockState.ON_UNPAID: "on_unpaid_break",
    }

    BREAK_STATES = {ClockState.ON_LUNCH, ClockState.ON_UNPAID}

    @classmethod
    def state_for(cls, last_type: str | EntryType | None) -> ClockState:
        """Derive the clock state from the last punch type of the day."""
        if last_type is None:
            return ClockState.OUT
        return cls.STATE_AFTER[EntryType(last_type)]

    @classmethod
    def can_transition(cls, state: ClockState, proposed: EntryType) -> bool:
        return proposed in cls.VALID_TRANSITIONS[state]

    @classmethod
    def rejection_reason(cls, state: ClockState, proposed: EntryType) -> str | None:
        """Human-readable reason a punch is illegal, or None if it is legal."""
        if cls.can_transition(state, proposed):
            return None

        if proposed == EntryType.CLOCK_IN:
            return "Cannot clock in. You must clock out first."

        if proposed == EntryType.CLOCK_OUT:
            if state in cls.BREAK_STATES:
                return "Cannot clock out. You must end your current break first."
            return "Cannot clock out. You must be clocked in first."

        if proposed in (EntryType.LUNCH_OUT, EntryType.UNPAID_OUT):
            label = "lunch" if proposed == EntryType.LUNCH_OUT else "unpaid break"
            if state in cls.BREAK_STATES:
                return f"Cannot start {label}. You must end your current break first."
            return f"Cannot start {label}. You must be clocked in first."

        if proposed == EntryType.LUNCH_IN:
            return "Cannot end lunch. You must start lunch first."

        return "Cannot end unpaid break. You must start unpaid break first."

    @classmethod
    def validate(cls, last_type: str | EntryType | None, proposed: EntryType) -> ClockState:
        """Validate a proposed punch, returning the state it leads to.

        Raises TransitionRejectedError if the punch is not allowed.
        """
        state = cls.state_for(last_type)
        reason = cls.rejection_reason(state, proposed)
        if reason is not None:
            raise TransitionRejectedError(state.value, proposed.value, reason)
        return cls.STATE_AFTER[proposed]

    @classmethod
    def status_label(cls, last_type: str | EntryType | None) -> str:
        return cls.STATUS_LABELS[cls.state_for(last_type)]


class VacationRequestStatus(str, Enum):
    """Vacation request status values."""

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
    CANCELLED = "cancelled"


class VacationRequestStateMachine:
    """State machine for vacation request status transitions.

    Allowed transitions:
    - pending → approved, denied, cancelled
    - approved → cancelled (credits the balance back)
    - denied, cancelled are terminal
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        VacationRequestStatus.PENDING: [
            VacationRequestStatus.APPROVED,
            VacationRequestStatus.DENIED,
            VacationRequestStatus.CANCELLED,
        ],
        VacationRequestStatus.APPROVED: [VacationRequestStatus.CANCELLED],
        VacationRequestStatus.DENIED: [],  # Terminal state
        VacationRequestStatus.CANCELLED: [],  # Terminal state
    }

    # Statuses where the requester may still edit the request
    EDITABLE = {VacationRequestStatus.PENDING}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def can_edit(cls, status: str) -> bool:
        return status in cls.EDITABLE

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising ValidationError if invalid."""
        if cls.can_transition(from_status, to_status):
            return

        if to_status == VacationRequestStatus.CANCELLED:
            if from_status == VacationRequestStatus.CANCELLED:
                raise ValidationError("Request already cancelled")
            raise ValidationError(f"Cannot cancel a {from_status} request")
        if to_status == VacationRequestStatus.APPROVED:
            raise ValidationError("Can only approve pending requests")
        if to_status == VacationRequestStatus.DENIED:
            raise ValidationError("Can only deny pending requests")
        raise ValidationError(f"Invalid transition from '{from_status}' to '{to_status}'")
