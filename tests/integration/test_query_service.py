from datetime import timedelta

import pytest

from tests.conftest import NOW, iso
from travel_ledger.application.query_service import QueryService
from travel_ledger.domain.exceptions import (
    NotFoundError,
    SerializationError,
    ValidationError,
)
from travel_ledger.infrastructure.ledger.ledger import Ledger


@pytest.fixture
def queries(db):
    return QueryService(db)


@pytest.fixture
def catalogue(booking_service, directory, provider, customer, two_seat_ticket):
    """T1 Delhi-Mumbai by air from P1, T2 Bengaluru-Mysuru by land from P2."""
    directory.register_provider("P2", "Deccan Coaches", "", "", "land")
    booking_service.create_ticket(
        ticket_id="T2",
        origin="Bengaluru",
        destination="Mysuru",
        departure_time=iso(NOW + timedelta(days=20)),
        arrival_time=iso(NOW + timedelta(days=20, hours=3)),
        base_price=40,
        total_seats=3,
        provider_id="P2",
        transport_mode="land",
    )
    for rating in (3, 4, 5):
        directory.update_provider_rating("P1", rating)
    directory.update_provider_rating("P2", 2)


def ids(tickets):
    return sorted(ticket.id for ticket in tickets)


def test_route_matches_departure_date(queries, catalogue):
    assert ids(queries.tickets_by_route("Delhi", "Mumbai", "2025-03-20")) == ["T1"]
    assert queries.tickets_by_route("Delhi", "Mumbai", "2025-03-21") == []
    assert queries.tickets_by_route("Mumbai", "Delhi", "2025-03-20") == []


def test_route_input_cannot_alter_query(queries, catalogue):
    assert queries.tickets_by_route('Delhi", "origin": {"$gt": ""}, "x": "', "Mumbai", "2025") == []
    assert queries.tickets_by_route("Delhi", "Mumbai", ".*") == []


def test_route_requires_all_parameters(queries):
    with pytest.raises(ValidationError):
        queries.tickets_by_route("Delhi", "", "2025-03-20")


def test_tickets_by_provider(queries, catalogue):
    assert ids(queries.tickets_by_provider("P1")) == ["T1"]
    assert queries.tickets_by_provider("P404") == []
    with pytest.raises(ValidationError):
        queries.tickets_by_provider("")


def test_tickets_by_transport_mode(queries, catalogue):
    assert ids(queries.tickets_by_transport_mode("land")) == ["T2"]
    assert queries.tickets_by_transport_mode("water") == []
    with pytest.raises(ValidationError):
        queries.tickets_by_transport_mode("rail")


def test_tickets_by_price_range(queries, catalogue):
    assert ids(queries.tickets_by_price_range(0, 1000)) == ["T1", "T2"]
    assert ids(queries.tickets_by_price_range(50, 100)) == ["T1"]
    assert ids(queries.tickets_by_price_range("40", "40")) == ["T2"]
    assert queries.tickets_by_price_range(101, 200) == []


@pytest.mark.parametrize("low, high", [(-1, 50), (10, 5), (0, -1), ("cheap", 10)])
def test_invalid_price_range(queries, low, high):
    with pytest.raises(ValidationError):
        queries.tickets_by_price_range(low, high)


def test_tickets_by_provider_rating(queries, catalogue):
    assert ids(queries.tickets_by_provider_rating(4.0)) == ["T1"]
    assert ids(queries.tickets_by_provider_rating(0)) == ["T1", "T2"]
    assert queries.tickets_by_provider_rating(5.0) == []


@pytest.mark.parametrize("threshold", [-1, 5.5])
def test_invalid_rating_threshold(queries, threshold):
    with pytest.raises(ValidationError):
        queries.tickets_by_provider_rating(threshold)


def test_available_seats(queries, booking_service, catalogue):
    booking_service.book_ticket("B1", "T1", "C1", ["2"])

    assert [seat.number for seat in queries.available_seats("T1")] == ["1"]
    with pytest.raises(NotFoundError):
        queries.available_seats("T404")


def test_customer_bookings(queries, booking_service, directory, catalogue):
    directory.register_customer("C2", "Vikram Sen", "", "", "anonymous")
    booking_service.book_ticket("B1", "T1", "C1", ["1"])
    booking_service.book_ticket("B2", "T2", "C2", ["1"])
    booking_service.book_ticket("B3", "T2", "C1", ["2", "3"])
    booking_service.cancel_booking("B3")

    assert sorted(b.id for b in queries.customer_bookings("C1")) == ["B1", "B3"]
    assert queries.customer_bookings("C9") == []


def test_malformed_records_are_skipped_by_bulk_reads(db, queries, booking_service, catalogue):
    ledger = Ledger(db, operation="corrupt")
    ledger.put("ticket:BAD", b"{broken")
    ledger.put("ticket:HALF", b'{"docType": "ticket", "transportMode": "air"}')

    assert ids(queries.all_tickets()) == ["T1", "T2"]
    assert ids(queries.tickets_by_transport_mode("air")) == ["T1"]

    with pytest.raises(SerializationError):
        booking_service.get_ticket("BAD")
    with pytest.raises(SerializationError):
        booking_service.get_ticket("HALF")
