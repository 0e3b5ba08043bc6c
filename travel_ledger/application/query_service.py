import logging
import re
from typing import List

from sqlalchemy.orm import Session

from travel_ledger.domain.entities import Booking, Seat, Ticket, TransportMode
from travel_ledger.domain.exceptions import ValidationError
from travel_ledger.domain.validation import parse_enum, parse_number, require_fields
from travel_ledger.infrastructure.ledger.ledger import Ledger
from travel_ledger.infrastructure.repositories.booking_repository import BookingRepository
from travel_ledger.infrastructure.repositories.directory_repository import ProviderRepository
from travel_ledger.infrastructure.repositories.ticket_repository import TicketRepository

logger = logging.getLogger(__name__)


class QueryService:
    """
    Read-only discovery queries over the ledger.
    Inputs are validated before any query runs; nothing is written.
    """

    def __init__(self, db: Session):
        self.db = db
        self.ledger = Ledger(db)
        self.tickets = TicketRepository(self.ledger)
        self.bookings = BookingRepository(self.ledger)
        self.providers = ProviderRepository(self.ledger)

    def tickets_by_route(self, origin: str, destination: str, date: str) -> List[Ticket]:
        require_fields(
            "source, destination, and date are required parameters",
            origin, destination, date,
        )
        query = self.tickets.selector_query(
            {
                "origin": origin,
                "destination": destination,
                "departureTime": {"$regex": "^" + re.escape(date)},
            },
            index="route_index",
        )
        return list(self.tickets.query(query))

    def tickets_by_provider(self, provider_id: str) -> List[Ticket]:
        require_fields("provider ID is required", provider_id)
        query = self.tickets.selector_query(
            {"providerId": provider_id},
            index="provider_index",
        )
        return list(self.tickets.query(query))

    def tickets_by_transport_mode(self, mode: str) -> List[Ticket]:
        transport_mode = parse_enum(TransportMode, mode, "transport mode")
        query = self.tickets.selector_query(
            {"transportMode": transport_mode.value},
            index="mode_index",
        )
        return list(self.tickets.query(query))

    def tickets_by_price_range(self, min_price, max_price) -> List[Ticket]:
        low = parse_number(min_price, "min price")
        high = parse_number(max_price, "max price")
        if low < 0 or high < 0 or low > high:
            raise ValidationError(f"invalid price range: min={low}, max={high}")

        query = self.tickets.selector_query(
            {"dynamicPrice": {"$gte": low, "$lte": high}},
            index="price_index",
        )
        return list(self.tickets.query(query))

    def tickets_by_provider_rating(self, min_rating) -> List[Ticket]:
        threshold = parse_number(min_rating, "min rating")
        if threshold < 0 or threshold > 5:
            raise ValidationError(f"invalid rating: {threshold} (must be between 0 and 5)")

        provider_query = self.providers.selector_query({"rating": {"$gte": threshold}})
        provider_ids = [provider.id for provider in self.providers.query(provider_query)]
        if not provider_ids:
            logger.info("No provider rated %.1f or above", threshold)
            return []

        query = self.tickets.selector_query(
            {"$or": [{"providerId": provider_id} for provider_id in provider_ids]}
        )
        return list(self.tickets.query(query))

    def available_seats(self, ticket_id: str) -> List[Seat]:
        require_fields("ticket ID is required", ticket_id)
        return self.tickets.get(ticket_id).vacant_seats()

    def customer_bookings(self, customer_id: str) -> List[Booking]:
        require_fields("customer ID is required", customer_id)
        query = self.bookings.selector_query({"customerId": customer_id})
        return list(self.bookings.query(query))

    def all_tickets(self) -> List[Ticket]:
        return list(self.tickets.iter_all())
