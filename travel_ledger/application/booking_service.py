import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from travel_ledger.domain.entities import (
    Booking,
    Payment,
    Seat,
    Ticket,
    TicketStatus,
    TransportMode,
    utc_now,
)
from travel_ledger.domain.exceptions import (
    DuplicateEntityError,
    InactiveEntityError,
    PriceMismatchError,
    SeatUnavailableError,
    ValidationError,
)
from travel_ledger.domain.pricing import (
    is_whole_cents,
    price_ticket,
    refund_for,
    total_for_seats,
)
from travel_ledger.domain.state_machine import BookingStateMachine, BookingStatus
from travel_ledger.domain.validation import (
    parse_count,
    parse_enum,
    parse_number,
    parse_timestamp,
    require_fields,
)
from travel_ledger.infrastructure.ledger.ledger import Ledger
from travel_ledger.infrastructure.repositories.booking_repository import (
    BookingRepository,
    PaymentRepository,
)
from travel_ledger.infrastructure.repositories.directory_repository import (
    CustomerRepository,
    ProviderRepository,
)
from travel_ledger.infrastructure.repositories.ticket_repository import TicketRepository

logger = logging.getLogger(__name__)


class BookingService:
    """
    Application service coordinating tickets, bookings and payments.

    Every operation validates and reads first, mutates in-memory copies,
    and only then writes all touched entities through the ledger.
    """

    def __init__(
        self,
        db: Session,
        owner: Optional[str] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.clock = clock
        self.ledger = Ledger(db, owner=owner)
        self.tickets = TicketRepository(self.ledger)
        self.bookings = BookingRepository(self.ledger)
        self.payments = PaymentRepository(self.ledger)
        self.providers = ProviderRepository(self.ledger)
        self.customers = CustomerRepository(self.ledger)

    def create_ticket(
        self,
        ticket_id: str,
        origin: str,
        destination: str,
        departure_time: str,
        arrival_time: str,
        base_price,
        total_seats,
        provider_id: str,
        transport_mode: str,
    ) -> Ticket:
        self.ledger.begin("create_ticket")

        require_fields(
            "all fields are required for ticket creation",
            ticket_id, origin, destination, departure_time, arrival_time,
            base_price, total_seats, provider_id, transport_mode,
        )
        mode = parse_enum(TransportMode, transport_mode, "transport mode")
        price = parse_number(base_price, "price")
        if price <= 0:
            raise ValidationError("price must be greater than 0")
        if not is_whole_cents(price):
            raise ValidationError(f"price must have at most 2 decimal places: {price}")
        seat_count = parse_count(total_seats, "total seats")
        if seat_count <= 0:
            raise ValidationError("total seats must be greater than 0")
        departure = parse_timestamp(departure_time, "departure time")
        arrival = parse_timestamp(arrival_time, "arrival time")
        if departure >= arrival:
            raise ValidationError("departure time must be before arrival time")

        if self.tickets.exists(ticket_id):
            raise DuplicateEntityError("ticket", ticket_id)
        provider = self.providers.get(provider_id)
        if not provider.is_active:
            raise InactiveEntityError("provider", provider_id)

        ticket = Ticket.create(
            ticket_id=ticket_id,
            origin=origin,
            destination=destination,
            departure_time=departure,
            arrival_time=arrival,
            base_price=price,
            total_seats=seat_count,
            provider_id=provider_id,
            transport_mode=mode,
        )
        provider.ticket_ids.append(ticket_id)

        self.tickets.save(ticket)
        self.providers.save(provider)
        logger.info(
            "Ticket %s created by provider %s with %d seats at %.2f",
            ticket_id, provider_id, seat_count, price,
        )
        return ticket

    def update_dynamic_price(
        self,
        ticket_id: str,
        now: Optional[datetime] = None,
    ) -> Ticket:
        self.ledger.begin("update_dynamic_price")

        ticket = self.tickets.get(ticket_id)
        ticket.dynamic_price = price_ticket(ticket, now or self.clock())
        ticket.touch()

        self.tickets.save(ticket)
        logger.info("Ticket %s repriced to %.2f", ticket_id, ticket.dynamic_price)
        return ticket

    def book_ticket(
        self,
        booking_id: str,
        ticket_id: str,
        customer_id: str,
        seat_numbers: List[str],
    ) -> Booking:
        self.ledger.begin("book_ticket")

        require_fields(
            "booking id, ticket id and customer id are required",
            booking_id, ticket_id, customer_id,
        )
        if isinstance(seat_numbers, str):
            raise ValidationError("seat numbers must be a list, not a single string")
        if not seat_numbers:
            raise ValidationError("at least one seat number is required")

        if self.bookings.exists(booking_id):
            raise DuplicateEntityError("booking", booking_id)

        ticket = self.tickets.get(ticket_id)
        if ticket.status != TicketStatus.AVAILABLE:
            raise SeatUnavailableError(f"ticket {ticket_id} is not available for booking")

        customer = self.customers.get(customer_id)
        if not customer.is_active:
            raise InactiveEntityError("customer", customer_id)

        seat_ids = ticket.reserve_seats([str(n) for n in seat_numbers], customer_id)

        now = utc_now()
        booking = Booking(
            id=booking_id,
            ticket_id=ticket_id,
            customer_id=customer_id,
            seat_ids=seat_ids,
            seat_count=len(seat_ids),
            total_price=total_for_seats(ticket.dynamic_price, len(seat_ids)),
            status=BookingStatus.PENDING,
            is_payment_confirmed=False,
            transaction_ref=self.ledger.current_transaction_ref(),
            created_at=now,
            updated_at=now,
        )
        customer.booking_history.append(booking_id)

        self.bookings.save(booking)
        self.tickets.save(ticket)
        self.customers.save(customer)
        logger.info(
            "Booking %s created for customer %s on ticket %s (%d seats, total %.2f)",
            booking_id, customer_id, ticket_id, booking.seat_count, booking.total_price,
        )
        return booking

    def confirm_payment(self, booking_id: str, transaction_ref: str) -> Payment:
        self.ledger.begin("confirm_payment")

        require_fields("booking id is required", booking_id)
        require_fields("invalid transaction ID", transaction_ref)

        booking = self.bookings.get(booking_id)
        BookingStateMachine.validate_transition(booking.status, BookingStatus.CONFIRMED)

        ticket = self.tickets.get(booking.ticket_id)
        expected = total_for_seats(ticket.dynamic_price, booking.seat_count)
        if expected != booking.total_price:
            raise PriceMismatchError(expected=expected, actual=booking.total_price)

        payment_id = Payment.id_for(booking_id)
        if self.payments.exists(payment_id):
            raise DuplicateEntityError("payment", payment_id)

        now = utc_now()
        payment = Payment(
            id=payment_id,
            booking_id=booking_id,
            amount=booking.total_price,
            transaction_ref=transaction_ref,
            created_at=now,
            updated_at=now,
        )

        booking.is_payment_confirmed = True
        booking.status = BookingStatus.CONFIRMED
        booking.payment_id = payment_id
        booking.transaction_ref = self.ledger.current_transaction_ref()
        booking.updated_at = now

        self.payments.save(payment)
        self.bookings.save(booking)
        logger.info(
            "Payment %s confirmed for booking %s (amount %.2f, ref %s)",
            payment_id, booking_id, payment.amount, transaction_ref,
        )
        return payment

    def cancel_booking(self, booking_id: str) -> Booking:
        self.ledger.begin("cancel_booking")

        require_fields("booking id is required", booking_id)

        booking = self.bookings.get(booking_id)
        ticket = self.tickets.get(booking.ticket_id)
        customer = self.customers.get(booking.customer_id)
        BookingStateMachine.validate_transition(booking.status, BookingStatus.CANCELLED)

        released = ticket.release_seats(booking.seat_ids)

        refund = refund_for(booking.total_price)
        booking.original_price = booking.total_price
        booking.refund_amount = refund
        booking.total_price = refund
        booking.status = BookingStatus.CANCELLED
        booking.is_payment_confirmed = True
        booking.transaction_ref = self.ledger.current_transaction_ref()
        booking.updated_at = utc_now()

        customer.remove_booking(booking_id)

        self.tickets.save(ticket)
        self.bookings.save(booking)
        self.customers.save(customer)
        logger.info(
            "Booking %s cancelled: %d seats released on ticket %s, refund %.2f",
            booking_id, released, ticket.id, refund,
        )
        return booking

    def block_seat(self, ticket_id: str, seat_number: str) -> Seat:
        self.ledger.begin("block_seat")

        require_fields("ticket id and seat number are required", ticket_id, seat_number)
        ticket = self.tickets.get(ticket_id)
        seat = ticket.block_seat(seat_number)

        self.tickets.save(ticket)
        logger.info("Seat %s blocked on ticket %s", seat_number, ticket_id)
        return seat

    def unblock_seat(self, ticket_id: str, seat_number: str) -> Seat:
        self.ledger.begin("unblock_seat")

        require_fields("ticket id and seat number are required", ticket_id, seat_number)
        ticket = self.tickets.get(ticket_id)
        seat = ticket.unblock_seat(seat_number)

        self.tickets.save(ticket)
        logger.info("Seat %s released from block on ticket %s", seat_number, ticket_id)
        return seat

    def get_ticket(self, ticket_id: str) -> Ticket:
        return self.tickets.get(ticket_id)

    def ticket_exists(self, ticket_id: str) -> bool:
        return self.tickets.exists(ticket_id)

    def get_booking(self, booking_id: str) -> Booking:
        return self.bookings.get(booking_id)

    def get_payment(self, payment_id: str) -> Payment:
        return self.payments.get(payment_id)
