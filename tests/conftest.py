from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from travel_ledger.api.routes.routes import get_db
from travel_ledger.application.booking_service import BookingService
from travel_ledger.application.directory_service import DirectoryService
from travel_ledger.infrastructure.db.models import Base
from travel_ledger.main import app

# A fixed, non-peak instant so pricing tests do not depend on the calendar.
NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def iso(moment: datetime) -> str:
    return moment.isoformat()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def directory(db):
    return DirectoryService(db, owner="Org1MSP")


@pytest.fixture
def booking_service(db):
    return BookingService(db, owner="Org1MSP", clock=lambda: NOW)


@pytest.fixture
def provider(directory):
    return directory.register_provider(
        provider_id="P1",
        name="Skyline Airways",
        email="ops@skyline.example",
        phone="555-0101",
        transport_mode="air",
    )


@pytest.fixture
def customer(directory):
    return directory.register_customer(
        customer_id="C1",
        name="Asha Rao",
        email="asha@example.com",
        phone="555-0202",
        visibility="public",
    )


@pytest.fixture
def two_seat_ticket(booking_service, provider):
    return booking_service.create_ticket(
        ticket_id="T1",
        origin="Delhi",
        destination="Mumbai",
        departure_time=iso(NOW + timedelta(days=10)),
        arrival_time=iso(NOW + timedelta(days=10, hours=2)),
        base_price=100,
        total_seats=2,
        provider_id=provider.id,
        transport_mode="air",
    )


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
