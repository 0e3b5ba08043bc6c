import logging

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from travel_ledger.application.booking_service import BookingService
from travel_ledger.application.directory_service import DirectoryService
from travel_ledger.application.query_service import QueryService
from travel_ledger.application.travel_record_service import TravelRecordService
from travel_ledger.api.schemas.schemas import (
    BookingRequest,
    CustomerCreate,
    PaymentRequest,
    ProviderCreate,
    RatingRequest,
    TicketCreate,
    TravelRecordCreate,
    TravelRecordUpdate,
    VisibilityRequest,
)
from travel_ledger.domain.entities import (
    Booking,
    Customer,
    Payment,
    Provider,
    Seat,
    Ticket,
    TravelRecord,
)
from travel_ledger.domain.exceptions import (
    NotFoundError,
    SerializationError,
    StateConflictError,
    TravelLedgerError,
)
from travel_ledger.infrastructure.db.session import SessionLocal


router = APIRouter()
logger = logging.getLogger(__name__)


def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_owner(x_owner: str = Header(default="", alias="X-Owner")) -> str:
    return x_owner


def _http_error(exc: TravelLedgerError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, StateConflictError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, SerializationError):
        logger.error("Corrupt ledger record: %s", exc)
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(exc))


@router.get("/health")
def health():
    return {"message": "Travel ledger is running"}


# -----------------------------
# Providers
# -----------------------------
@router.post("/providers", response_model=Provider)
def register_provider(
    request: ProviderCreate,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return DirectoryService(db, owner=owner).register_provider(
            provider_id=request.id,
            name=request.name,
            email=request.email,
            phone=request.phone,
            transport_mode=request.transport_mode,
            extensions=request.extensions,
        )
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.get("/providers", response_model=list[Provider])
def list_providers(db: Session = Depends(get_db)):
    return DirectoryService(db).list_providers()


@router.get("/providers/{provider_id}", response_model=Provider)
def get_provider(provider_id: str, db: Session = Depends(get_db)):
    try:
        return DirectoryService(db).get_provider(provider_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.post("/providers/{provider_id}/deregister", response_model=Provider)
def deregister_provider(
    provider_id: str,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return DirectoryService(db, owner=owner).deregister_provider(provider_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.post("/providers/{provider_id}/ratings", response_model=Provider)
def rate_provider(
    provider_id: str,
    request: RatingRequest,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return DirectoryService(db, owner=owner).update_provider_rating(
            provider_id, request.rating
        )
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


# -----------------------------
# Customers
# -----------------------------
@router.post("/customers", response_model=Customer)
def register_customer(
    request: CustomerCreate,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return DirectoryService(db, owner=owner).register_customer(
            customer_id=request.id,
            name=request.name,
            email=request.email,
            phone=request.phone,
            visibility=request.visibility,
            extensions=request.extensions,
        )
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.get("/customers", response_model=list[Customer])
def list_customers(db: Session = Depends(get_db)):
    return DirectoryService(db).list_customers()


@router.get("/customers/{customer_id}", response_model=Customer)
def get_customer(customer_id: str, db: Session = Depends(get_db)):
    try:
        return DirectoryService(db).get_customer(customer_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.post("/customers/{customer_id}/deregister", response_model=Customer)
def deregister_customer(
    customer_id: str,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return DirectoryService(db, owner=owner).deregister_customer(customer_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.put("/customers/{customer_id}/visibility", response_model=Customer)
def update_customer_visibility(
    customer_id: str,
    request: VisibilityRequest,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return DirectoryService(db, owner=owner).update_customer_visibility(
            customer_id, request.visibility
        )
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.get("/customers/{customer_id}/bookings", response_model=list[Booking])
def customer_bookings(customer_id: str, db: Session = Depends(get_db)):
    try:
        return QueryService(db).customer_bookings(customer_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


# -----------------------------
# Ticket discovery
# -----------------------------
@router.get("/tickets", response_model=list[Ticket])
def list_tickets(db: Session = Depends(get_db)):
    return QueryService(db).all_tickets()


@router.get("/tickets/by-route", response_model=list[Ticket])
def tickets_by_route(
    origin: str,
    destination: str,
    date: str,
    db: Session = Depends(get_db),
):
    try:
        return QueryService(db).tickets_by_route(origin, destination, date)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.get("/tickets/by-provider/{provider_id}", response_model=list[Ticket])
def tickets_by_provider(provider_id: str, db: Session = Depends(get_db)):
    try:
        return QueryService(db).tickets_by_provider(provider_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.get("/tickets/by-mode/{mode}", response_model=list[Ticket])
def tickets_by_mode(mode: str, db: Session = Depends(get_db)):
    try:
        return QueryService(db).tickets_by_transport_mode(mode)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.get("/tickets/by-price", response_model=list[Ticket])
def tickets_by_price(
    min_price: float,
    max_price: float,
    db: Session = Depends(get_db),
):
    try:
        return QueryService(db).tickets_by_price_range(min_price, max_price)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.get("/tickets/by-rating", response_model=list[Ticket])
def tickets_by_rating(min_rating: float, db: Session = Depends(get_db)):
    try:
        return QueryService(db).tickets_by_provider_rating(min_rating)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


# -----------------------------
# Tickets and seats
# -----------------------------
@router.post("/tickets", response_model=Ticket)
def create_ticket(
    request: TicketCreate,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return BookingService(db, owner=owner).create_ticket(
            ticket_id=request.id,
            origin=request.origin,
            destination=request.destination,
            departure_time=request.departure_time,
            arrival_time=request.arrival_time,
            base_price=request.base_price,
            total_seats=request.total_seats,
            provider_id=request.provider_id,
            transport_mode=request.transport_mode,
        )
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.get("/tickets/{ticket_id}", response_model=Ticket)
def get_ticket(ticket_id: str, db: Session = Depends(get_db)):
    try:
        return BookingService(db).get_ticket(ticket_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.post("/tickets/{ticket_id}/price", response_model=Ticket)
def update_dynamic_price(
    ticket_id: str,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return BookingService(db, owner=owner).update_dynamic_price(ticket_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.get("/tickets/{ticket_id}/seats", response_model=list[Seat])
def available_seats(ticket_id: str, db: Session = Depends(get_db)):
    try:
        return QueryService(db).available_seats(ticket_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.post("/tickets/{ticket_id}/seats/{seat_number}/block", response_model=Seat)
def block_seat(
    ticket_id: str,
    seat_number: str,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return BookingService(db, owner=owner).block_seat(ticket_id, seat_number)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.post("/tickets/{ticket_id}/seats/{seat_number}/unblock", response_model=Seat)
def unblock_seat(
    ticket_id: str,
    seat_number: str,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return BookingService(db, owner=owner).unblock_seat(ticket_id, seat_number)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


# -----------------------------
# Bookings and payments
# -----------------------------
@router.post("/bookings", response_model=Booking)
def book_ticket(
    request: BookingRequest,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return BookingService(db, owner=owner).book_ticket(
            booking_id=request.id,
            ticket_id=request.ticket_id,
            customer_id=request.customer_id,
            seat_numbers=request.seat_numbers,
        )
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.get("/bookings/{booking_id}", response_model=Booking)
def get_booking(booking_id: str, db: Session = Depends(get_db)):
    try:
        return BookingService(db).get_booking(booking_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.post("/bookings/{booking_id}/pay", response_model=Payment)
def confirm_payment(
    booking_id: str,
    request: PaymentRequest,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return BookingService(db, owner=owner).confirm_payment(
            booking_id=booking_id,
            transaction_ref=request.transaction_ref,
        )
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.post("/bookings/{booking_id}/cancel", response_model=Booking)
def cancel_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return BookingService(db, owner=owner).cancel_booking(booking_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.get("/payments/{payment_id}", response_model=Payment)
def get_payment(payment_id: str, db: Session = Depends(get_db)):
    try:
        return BookingService(db).get_payment(payment_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


# -----------------------------
# Travel records
# -----------------------------
@router.post("/travel-records", response_model=TravelRecord)
def create_travel_record(
    request: TravelRecordCreate,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return TravelRecordService(db, owner=owner).create_record(
            request.id, request.destination, request.date
        )
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.get("/travel-records", response_model=list[TravelRecord])
def list_travel_records(
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    return TravelRecordService(db, owner=owner).list_records()


@router.get("/travel-records/{record_id}", response_model=TravelRecord)
def read_travel_record(
    record_id: str,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return TravelRecordService(db, owner=owner).read_record(record_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.put("/travel-records/{record_id}", response_model=TravelRecord)
def update_travel_record(
    record_id: str,
    request: TravelRecordUpdate,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        return TravelRecordService(db, owner=owner).update_record(
            record_id, request.destination, request.date, request.status
        )
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc


@router.delete("/travel-records/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_travel_record(
    record_id: str,
    db: Session = Depends(get_db),
    owner: str = Depends(get_owner),
):
    try:
        TravelRecordService(db, owner=owner).delete_record(record_id)
    except TravelLedgerError as exc:
        raise _http_error(exc) from exc
