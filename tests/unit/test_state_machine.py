# tests/unit/test_state_machine.py

import pytest

from travel_ledger.domain.state_machine import (
    BookingStateMachine,
    BookingStatus,
    SeatStateMachine,
    SeatStatus,
)
from travel_ledger.domain.exceptions import InvalidStateTransitionError


# ---------------------
# VALID TRANSITIONS
# ---------------------

def test_valid_booking_paths():
    assert BookingStateMachine.can_transition(
        BookingStatus.PENDING,
        BookingStatus.CONFIRMED,
    )

    assert BookingStateMachine.can_transition(
        BookingStatus.PENDING,
        BookingStatus.CANCELLED,
    )

    assert BookingStateMachine.can_transition(
        BookingStatus.CONFIRMED,
        BookingStatus.CANCELLED,
    )


def test_valid_seat_paths():
    assert SeatStateMachine.can_transition(SeatStatus.VACANT, SeatStatus.BOOKED)
    assert SeatStateMachine.can_transition(SeatStatus.BOOKED, SeatStatus.VACANT)
    assert SeatStateMachine.can_transition(SeatStatus.VACANT, SeatStatus.BLOCKED)
    assert SeatStateMachine.can_transition(SeatStatus.BLOCKED, SeatStatus.VACANT)


# ---------------------
# INVALID TRANSITIONS
# ---------------------

def test_cannot_confirm_twice():
    with pytest.raises(InvalidStateTransitionError):
        BookingStateMachine.validate_transition(
            BookingStatus.CONFIRMED,
            BookingStatus.CONFIRMED,
        )


def test_terminal_state_cancelled():
    assert BookingStateMachine.is_terminal(BookingStatus.CANCELLED)

    with pytest.raises(InvalidStateTransitionError):
        BookingStateMachine.validate_transition(
            BookingStatus.CANCELLED,
            BookingStatus.CANCELLED,
        )

    with pytest.raises(InvalidStateTransitionError):
        BookingStateMachine.validate_transition(
            BookingStatus.CANCELLED,
            BookingStatus.CONFIRMED,
        )


def test_booked_seat_cannot_be_blocked():
    with pytest.raises(InvalidStateTransitionError):
        SeatStateMachine.validate_transition(SeatStatus.BOOKED, SeatStatus.BLOCKED)


def test_error_names_both_states():
    with pytest.raises(InvalidStateTransitionError) as excinfo:
        BookingStateMachine.validate_transition(
            BookingStatus.CANCELLED,
            BookingStatus.CONFIRMED,
        )

    assert excinfo.value.from_state == "Cancelled"
    assert excinfo.value.to_state == "Confirmed"


def test_invalid_type_guard():
    with pytest.raises(TypeError):
        BookingStateMachine.validate_transition(
            "Pending",  # invalid type
            BookingStatus.CONFIRMED,
        )

    with pytest.raises(TypeError):
        SeatStateMachine.can_transition(BookingStatus.PENDING, SeatStatus.BOOKED)
