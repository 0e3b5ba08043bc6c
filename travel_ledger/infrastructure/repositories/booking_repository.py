# travel_ledger/infrastructure/repositories/booking_repository.py

from travel_ledger.domain.entities import Booking, Payment
from travel_ledger.infrastructure.repositories.base import LedgerRepository


class BookingRepository(LedgerRepository[Booking]):
    model = Booking
    label = "booking"


class PaymentRepository(LedgerRepository[Payment]):
    model = Payment
    label = "payment"
