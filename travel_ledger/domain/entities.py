# travel_ledger/domain/entities.py

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from travel_ledger.domain.exceptions import (
    NotFoundError,
    SeatUnavailableError,
    ValidationError,
)
from travel_ledger.domain.state_machine import (
    BookingStatus,
    SeatStateMachine,
    SeatStatus,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TransportMode(str, Enum):
    AIR = "air"
    LAND = "land"
    WATER = "water"


class ProfileVisibility(str, Enum):
    PUBLIC = "public"
    ANONYMOUS = "anonymous"


class TicketStatus(str, Enum):
    AVAILABLE = "Available"
    BOOKED = "Booked"


class PaymentStatus(str, Enum):
    CONFIRMED = "Confirmed"


class Entity(BaseModel):
    """
    Structured ledger record.
    Stored field names are camelCase; unknown stored fields are ignored
    so older readers accept newer records.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str


class Provider(Entity):
    name: str
    email: str = ""
    phone: str = ""
    transport_mode: TransportMode
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    total_ratings: int = Field(default=0, ge=0)
    registered_date: datetime = Field(default_factory=utc_now)
    is_active: bool = True
    ticket_ids: List[str] = Field(default_factory=list)
    extensions: Dict[str, Any] = Field(default_factory=dict)

    def add_rating(self, rating: float) -> None:
        """Folds one rating into the running average."""
        self.total_ratings += 1
        self.rating = (
            self.rating * (self.total_ratings - 1) + rating
        ) / self.total_ratings


class Customer(Entity):
    name: str
    email: str = ""
    phone: str = ""
    visibility: ProfileVisibility = ProfileVisibility.PUBLIC
    registered_date: datetime = Field(default_factory=utc_now)
    is_active: bool = True
    booking_history: List[str] = Field(default_factory=list)
    extensions: Dict[str, Any] = Field(default_factory=dict)

    def remove_booking(self, booking_id: str) -> bool:
        # first occurrence only
        try:
            self.booking_history.remove(booking_id)
        except ValueError:
            return False
        return True


class Seat(Entity):
    number: str
    status: SeatStatus = SeatStatus.VACANT
    booked_by: str = ""

    def transition(self, to_status: SeatStatus, holder: str = "") -> None:
        SeatStateMachine.validate_transition(self.status, to_status)
        self.status = to_status
        self.booked_by = holder if to_status == SeatStatus.BOOKED else ""


class Ticket(Entity):
    origin: str
    destination: str
    departure_time: datetime
    arrival_time: datetime
    base_price: float
    dynamic_price: float
    total_seats: int = Field(gt=0)
    available_seats: int = Field(ge=0)
    seats: List[Seat] = Field(default_factory=list)
    provider_id: str
    transport_mode: TransportMode
    status: TicketStatus = TicketStatus.AVAILABLE
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def create(
        cls,
        ticket_id: str,
        origin: str,
        destination: str,
        departure_time: datetime,
        arrival_time: datetime,
        base_price: float,
        total_seats: int,
        provider_id: str,
        transport_mode: TransportMode,
    ) -> "Ticket":
        now = utc_now()
        seats = [
            Seat(id=f"{ticket_id}-seat-{n}", number=str(n))
            for n in range(1, total_seats + 1)
        ]
        return cls(
            id=ticket_id,
            origin=origin,
            destination=destination,
            departure_time=departure_time,
            arrival_time=arrival_time,
            base_price=base_price,
            dynamic_price=base_price,
            total_seats=total_seats,
            available_seats=total_seats,
            seats=seats,
            provider_id=provider_id,
            transport_mode=transport_mode,
            status=TicketStatus.AVAILABLE,
            created_at=now,
            updated_at=now,
        )

    def find_seat(self, seat_number: str) -> Optional[Seat]:
        for seat in self.seats:
            if seat.number == seat_number:
                return seat
        return None

    def vacant_seats(self) -> List[Seat]:
        return [seat for seat in self.seats if seat.status == SeatStatus.VACANT]

    def reserve_seats(self, seat_numbers: List[str], customer_id: str) -> List[str]:
        """
        Books every requested seat for customer_id and returns their seat ids.

        All seats are checked before any of them changes, so a failing
        request leaves the ticket untouched.
        """
        if self.status != TicketStatus.AVAILABLE:
            raise SeatUnavailableError(
                f"ticket {self.id} is not available for booking"
            )
        if not seat_numbers:
            raise ValidationError("at least one seat number is required")
        if len(set(seat_numbers)) != len(seat_numbers):
            raise ValidationError("seat numbers must not repeat")

        selected = []
        for seat_number in seat_numbers:
            seat = self.find_seat(seat_number)
            if seat is None:
                raise NotFoundError("seat", f"{self.id}-seat-{seat_number}")
            if seat.status != SeatStatus.VACANT:
                raise SeatUnavailableError(f"seat {seat_number} is not available")
            selected.append(seat)

        for seat in selected:
            seat.transition(SeatStatus.BOOKED, holder=customer_id)
        self._sync_availability()
        return [seat.id for seat in selected]

    def release_seats(self, seat_ids: List[str]) -> int:
        """Returns booked seats to Vacant and the number released."""
        wanted = set(seat_ids)
        released = 0
        for seat in self.seats:
            if seat.id in wanted and seat.status == SeatStatus.BOOKED:
                seat.transition(SeatStatus.VACANT)
                released += 1
        self._sync_availability()
        return released

    def block_seat(self, seat_number: str) -> Seat:
        seat = self._require_seat(seat_number)
        if seat.status != SeatStatus.VACANT:
            raise SeatUnavailableError(f"seat {seat_number} is not vacant")
        seat.transition(SeatStatus.BLOCKED)
        self._sync_availability()
        return seat

    def unblock_seat(self, seat_number: str) -> Seat:
        seat = self._require_seat(seat_number)
        if seat.status != SeatStatus.BLOCKED:
            raise SeatUnavailableError(f"seat {seat_number} is not blocked")
        seat.transition(SeatStatus.VACANT)
        self._sync_availability()
        return seat

    def occupancy_rate(self) -> float:
        return (self.total_seats - self.available_seats) / self.total_seats

    def touch(self) -> None:
        self.updated_at = utc_now()

    def _require_seat(self, seat_number: str) -> Seat:
        seat = self.find_seat(seat_number)
        if seat is None:
            raise NotFoundError("seat", f"{self.id}-seat-{seat_number}")
        return seat

    def _sync_availability(self) -> None:
        self.available_seats = len(self.vacant_seats())
        if self.available_seats == 0:
            self.status = TicketStatus.BOOKED
        else:
            self.status = TicketStatus.AVAILABLE
        self.touch()


class Booking(Entity):
    ticket_id: str
    customer_id: str
    seat_ids: List[str] = Field(default_factory=list)
    seat_count: int = Field(ge=0)
    total_price: float
    original_price: Optional[float] = None
    refund_amount: Optional[float] = None
    status: BookingStatus = BookingStatus.PENDING
    is_payment_confirmed: bool = False
    payment_id: Optional[str] = None
    transaction_ref: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Payment(Entity):
    booking_id: str
    amount: float
    status: PaymentStatus = PaymentStatus.CONFIRMED
    transaction_ref: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @staticmethod
    def id_for(booking_id: str) -> str:
        return f"payment-{booking_id}"


class TravelRecord(Entity):
    destination: str
    date: str
    status: str = "Planned"
    owner: str
