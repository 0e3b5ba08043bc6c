# travel_ledger/infrastructure/repositories/directory_repository.py

from travel_ledger.domain.entities import Customer, Provider
from travel_ledger.infrastructure.repositories.base import LedgerRepository


class ProviderRepository(LedgerRepository[Provider]):
    model = Provider
    label = "provider"


class CustomerRepository(LedgerRepository[Customer]):
    model = Customer
    label = "customer"
