# travel_ledger/domain/state_machine.py

from enum import Enum
from typing import Dict, Set, Type

from travel_ledger.domain.exceptions import InvalidStateTransitionError


class BookingStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"


class SeatStatus(str, Enum):
    VACANT = "Vacant"
    BOOKED = "Booked"
    BLOCKED = "Blocked"


class StateMachine:
    """
    Lifecycle controller shared by bookings and seats.
    Subclasses declare the status enum and the legal transitions.
    """

    _STATUS_TYPE: Type[Enum] = Enum
    _ALLOWED_TRANSITIONS: Dict[Enum, Set[Enum]] = {}

    @classmethod
    def can_transition(cls, from_status: Enum, to_status: Enum) -> bool:
        cls._ensure_valid_status(from_status)
        cls._ensure_valid_status(to_status)

        return to_status in cls._ALLOWED_TRANSITIONS.get(from_status, set())

    @classmethod
    def validate_transition(cls, from_status: Enum, to_status: Enum) -> None:
        """Raises InvalidStateTransitionError unless from_status may move to to_status."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidStateTransitionError(
                from_state=from_status.value,
                to_state=to_status.value,
            )

    @classmethod
    def is_terminal(cls, status: Enum) -> bool:
        cls._ensure_valid_status(status)
        return not cls._ALLOWED_TRANSITIONS.get(status)

    @classmethod
    def get_allowed_transitions(cls, status: Enum) -> Set[Enum]:
        cls._ensure_valid_status(status)
        return set(cls._ALLOWED_TRANSITIONS.get(status, set()))

    @classmethod
    def _ensure_valid_status(cls, status: Enum) -> None:
        if not isinstance(status, cls._STATUS_TYPE):
            raise TypeError(
                f"{cls.__name__} expects {cls._STATUS_TYPE.__name__}, got {type(status).__name__}"
            )


class BookingStateMachine(StateMachine):
    """
    Pending bookings are confirmed by payment or cancelled.
    Confirmed bookings can still be cancelled (refund path).
    Cancelled is terminal, so a booking is never released twice.
    """

    _STATUS_TYPE = BookingStatus
    _ALLOWED_TRANSITIONS: Dict[BookingStatus, Set[BookingStatus]] = {
        BookingStatus.PENDING: {
            BookingStatus.CONFIRMED,
            BookingStatus.CANCELLED,
        },
        BookingStatus.CONFIRMED: {
            BookingStatus.CANCELLED,
        },
        BookingStatus.CANCELLED: set(),
    }


class SeatStateMachine(StateMachine):
    _STATUS_TYPE = SeatStatus
    _ALLOWED_TRANSITIONS: Dict[SeatStatus, Set[SeatStatus]] = {
        SeatStatus.VACANT: {
            SeatStatus.BOOKED,
            SeatStatus.BLOCKED,
        },
        SeatStatus.BOOKED: {
            SeatStatus.VACANT,
        },
        SeatStatus.BLOCKED: {
            SeatStatus.VACANT,
        },
    }
