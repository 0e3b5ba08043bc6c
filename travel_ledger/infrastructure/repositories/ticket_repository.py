# travel_ledger/infrastructure/repositories/ticket_repository.py

from travel_ledger.domain.entities import Ticket
from travel_ledger.infrastructure.repositories.base import LedgerRepository


class TicketRepository(LedgerRepository[Ticket]):
    model = Ticket
    label = "ticket"
