# travel_ledger/infrastructure/repositories/travel_record_repository.py

from travel_ledger.domain.entities import TravelRecord
from travel_ledger.infrastructure.repositories.base import LedgerRepository


class TravelRecordRepository(LedgerRepository[TravelRecord]):
    model = TravelRecord
    label = "travel record"
