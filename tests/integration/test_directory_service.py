import pytest

from travel_ledger.domain.entities import ProfileVisibility, TransportMode
from travel_ledger.domain.exceptions import (
    DuplicateEntityError,
    NotFoundError,
    ValidationError,
)


def test_register_provider(directory):
    provider = directory.register_provider(
        provider_id="P1",
        name="Skyline Airways",
        email="ops@skyline.example",
        phone="555-0101",
        transport_mode="air",
        extensions={"iataCode": "SK", "fleet": 12},
    )

    stored = directory.get_provider("P1")
    assert stored == provider
    assert stored.transport_mode == TransportMode.AIR
    assert stored.rating == 0.0
    assert stored.total_ratings == 0
    assert stored.is_active is True
    assert stored.ticket_ids == []
    assert stored.extensions == {"iataCode": "SK", "fleet": 12}


def test_sequential_ratings_average(directory, provider):
    for rating in (3, 4, 5):
        directory.update_provider_rating("P1", rating)

    stored = directory.get_provider("P1")
    assert stored.rating == 4.0
    assert stored.total_ratings == 3


@pytest.mark.parametrize("rating", [-0.5, 5.1, "excellent", None])
def test_rating_out_of_range_is_rejected(directory, provider, rating):
    with pytest.raises(ValidationError):
        directory.update_provider_rating("P1", rating)

    assert directory.get_provider("P1").total_ratings == 0


def test_rating_unknown_provider(directory):
    with pytest.raises(NotFoundError):
        directory.update_provider_rating("P404", 4)


def test_provider_id_is_unique(directory, provider):
    with pytest.raises(DuplicateEntityError):
        directory.register_provider("P1", "Other", "", "", "land")


@pytest.mark.parametrize(
    "provider_id, name, mode",
    [("", "Skyline", "air"), ("P2", "", "air"), ("P2", "Skyline", "rocket")],
)
def test_provider_input_is_validated(directory, provider_id, name, mode):
    with pytest.raises(ValidationError):
        directory.register_provider(provider_id, name, "", "", mode)


def test_deregister_provider_keeps_record(directory, provider):
    directory.deregister_provider("P1")

    assert directory.provider_exists("P1")
    assert directory.get_provider("P1").is_active is False


def test_deregister_unknown_provider(directory):
    with pytest.raises(NotFoundError):
        directory.deregister_provider("P404")


def test_register_customer(directory, customer):
    stored = directory.get_customer("C1")

    assert stored.name == "Asha Rao"
    assert stored.visibility == ProfileVisibility.PUBLIC
    assert stored.booking_history == []
    assert stored.is_active is True


def test_customer_id_is_unique(directory, customer):
    with pytest.raises(DuplicateEntityError):
        directory.register_customer("C1", "Someone", "", "", "public")


def test_customer_visibility_is_validated(directory):
    with pytest.raises(ValidationError):
        directory.register_customer("C2", "Vikram", "", "", "hidden")


def test_update_customer_visibility(directory, customer):
    directory.update_customer_visibility("C1", "anonymous")

    assert directory.get_customer("C1").visibility == ProfileVisibility.ANONYMOUS

    with pytest.raises(ValidationError):
        directory.update_customer_visibility("C1", "private")


def test_deregister_customer(directory, customer):
    directory.deregister_customer("C1")

    assert directory.get_customer("C1").is_active is False


def test_missing_customer(directory):
    assert not directory.customer_exists("C404")
    with pytest.raises(NotFoundError, match="customer C404 does not exist"):
        directory.get_customer("C404")


def test_listing_is_per_kind(directory, provider, customer):
    directory.register_provider("P2", "Deccan Coaches", "", "", "land")

    assert [p.id for p in directory.list_providers()] == ["P1", "P2"]
    assert [c.id for c in directory.list_customers()] == ["C1"]


def test_provider_and_customer_ids_do_not_collide(directory, provider):
    customer = directory.register_customer("P1", "Same Id", "", "", "public")

    assert directory.get_customer("P1") == customer
    assert directory.get_provider("P1").name == "Skyline Airways"
