import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from travel_ledger.domain.entities import (
    Customer,
    ProfileVisibility,
    Provider,
    TransportMode,
)
from travel_ledger.domain.exceptions import DuplicateEntityError, ValidationError
from travel_ledger.domain.validation import parse_enum, parse_number, require_fields
from travel_ledger.infrastructure.ledger.ledger import Ledger
from travel_ledger.infrastructure.repositories.directory_repository import (
    CustomerRepository,
    ProviderRepository,
)

logger = logging.getLogger(__name__)


class DirectoryService:
    """Registration and soft deletion of providers and customers."""

    def __init__(self, db: Session, owner: Optional[str] = None):
        self.db = db
        self.ledger = Ledger(db, owner=owner)
        self.providers = ProviderRepository(self.ledger)
        self.customers = CustomerRepository(self.ledger)

    # -----------------------------
    # Providers
    # -----------------------------
    def register_provider(
        self,
        provider_id: str,
        name: str,
        email: str,
        phone: str,
        transport_mode: str,
        extensions: Optional[Dict[str, Any]] = None,
    ) -> Provider:
        self.ledger.begin("register_provider")

        require_fields("provider id and name are required", provider_id, name)
        mode = parse_enum(TransportMode, transport_mode, "transport mode")

        if self.providers.exists(provider_id):
            raise DuplicateEntityError("provider", provider_id)

        provider = Provider(
            id=provider_id,
            name=name,
            email=email or "",
            phone=phone or "",
            transport_mode=mode,
            extensions=dict(extensions or {}),
        )
        self.providers.save(provider)
        logger.info("Provider %s registered (%s)", provider_id, mode.value)
        return provider

    def deregister_provider(self, provider_id: str) -> Provider:
        self.ledger.begin("deregister_provider")

        provider = self.providers.get(provider_id)
        provider.is_active = False
        self.providers.save(provider)
        logger.info("Provider %s deregistered", provider_id)
        return provider

    def update_provider_rating(self, provider_id: str, rating) -> Provider:
        self.ledger.begin("update_provider_rating")

        value = parse_number(rating, "rating")
        if value < 0 or value > 5:
            raise ValidationError(f"invalid rating: {value} (must be between 0 and 5)")

        provider = self.providers.get(provider_id)
        provider.add_rating(value)
        self.providers.save(provider)
        logger.info(
            "Provider %s rated %.1f, average now %.2f over %d ratings",
            provider_id, value, provider.rating, provider.total_ratings,
        )
        return provider

    def get_provider(self, provider_id: str) -> Provider:
        return self.providers.get(provider_id)

    def provider_exists(self, provider_id: str) -> bool:
        return self.providers.exists(provider_id)

    def list_providers(self) -> List[Provider]:
        return list(self.providers.iter_all())

    # -----------------------------
    # Customers
    # -----------------------------
    def register_customer(
        self,
        customer_id: str,
        name: str,
        email: str,
        phone: str,
        visibility: str,
        extensions: Optional[Dict[str, Any]] = None,
    ) -> Customer:
        self.ledger.begin("register_customer")

        require_fields("customer id and name are required", customer_id, name)
        profile_visibility = parse_enum(ProfileVisibility, visibility, "visibility")

        if self.customers.exists(customer_id):
            raise DuplicateEntityError("customer", customer_id)

        customer = Customer(
            id=customer_id,
            name=name,
            email=email or "",
            phone=phone or "",
            visibility=profile_visibility,
            extensions=dict(extensions or {}),
        )
        self.customers.save(customer)
        logger.info("Customer %s registered", customer_id)
        return customer

    def deregister_customer(self, customer_id: str) -> Customer:
        self.ledger.begin("deregister_customer")

        customer = self.customers.get(customer_id)
        customer.is_active = False
        self.customers.save(customer)
        logger.info("Customer %s deregistered", customer_id)
        return customer

    def update_customer_visibility(self, customer_id: str, visibility: str) -> Customer:
        self.ledger.begin("update_customer_visibility")

        profile_visibility = parse_enum(ProfileVisibility, visibility, "visibility")

        customer = self.customers.get(customer_id)
        customer.visibility = profile_visibility
        self.customers.save(customer)
        logger.info("Customer %s visibility set to %s", customer_id, profile_visibility.value)
        return customer

    def get_customer(self, customer_id: str) -> Customer:
        return self.customers.get(customer_id)

    def customer_exists(self, customer_id: str) -> bool:
        return self.customers.exists(customer_id)

    def list_customers(self) -> List[Customer]:
        return list(self.customers.iter_all())
