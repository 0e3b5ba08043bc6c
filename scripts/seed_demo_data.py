from datetime import datetime, timedelta, timezone

from travel_ledger.application.booking_service import BookingService
from travel_ledger.application.directory_service import DirectoryService
from travel_ledger.application.travel_record_service import TravelRecordService
from travel_ledger.infrastructure.db.models import Base
from travel_ledger.infrastructure.db.session import engine, get_db_session


def _ts(days_from_now: int, hour: int, minute: int) -> str:
    ist = timezone(timedelta(hours=5, minutes=30))
    now_ist = datetime.now(ist)
    target = now_ist + timedelta(days=days_from_now)
    return target.replace(hour=hour, minute=minute, second=0, microsecond=0).isoformat()


def seed_directory(db) -> None:
    directory = DirectoryService(db, owner="seed")

    provider_defs = [
        {"provider_id": "PRV-AIR-1", "name": "Skyline Airways", "email": "ops@skyline.example",
         "phone": "+91-11-5550-0101", "transport_mode": "air"},
        {"provider_id": "PRV-LAND-1", "name": "Deccan Coaches", "email": "desk@deccan.example",
         "phone": "+91-80-5550-0202", "transport_mode": "land"},
        {"provider_id": "PRV-WATER-1", "name": "Konkan Ferries", "email": "hello@konkan.example",
         "phone": "+91-22-5550-0303", "transport_mode": "water"},
    ]
    for item in provider_defs:
        if not directory.provider_exists(item["provider_id"]):
            directory.register_provider(**item)

    customer_defs = [
        {"customer_id": "CUS-1", "name": "Asha Rao", "email": "asha@example.com",
         "phone": "+91-98450-00001", "visibility": "public"},
        {"customer_id": "CUS-2", "name": "Vikram Sen", "email": "vikram@example.com",
         "phone": "+91-98450-00002", "visibility": "anonymous"},
    ]
    for item in customer_defs:
        if not directory.customer_exists(item["customer_id"]):
            directory.register_customer(**item)


def seed_tickets(db) -> None:
    bookings = BookingService(db, owner="seed")

    ticket_defs = [
        {
            "ticket_id": "TKT-DEL-BOM-1",
            "origin": "Delhi",
            "destination": "Mumbai",
            "departure_time": _ts(days_from_now=10, hour=6, minute=15),
            "arrival_time": _ts(days_from_now=10, hour=8, minute=25),
            "base_price": 5400,
            "total_seats": 12,
            "provider_id": "PRV-AIR-1",
            "transport_mode": "air",
        },
        {
            "ticket_id": "TKT-BLR-MYS-1",
            "origin": "Bengaluru",
            "destination": "Mysuru",
            "departure_time": _ts(days_from_now=2, hour=7, minute=0),
            "arrival_time": _ts(days_from_now=2, hour=10, minute=30),
            "base_price": 450,
            "total_seats": 30,
            "provider_id": "PRV-LAND-1",
            "transport_mode": "land",
        },
        {
            "ticket_id": "TKT-BOM-GOA-1",
            "origin": "Mumbai",
            "destination": "Goa",
            "departure_time": _ts(days_from_now=5, hour=17, minute=0),
            "arrival_time": _ts(days_from_now=6, hour=9, minute=0),
            "base_price": 2200,
            "total_seats": 20,
            "provider_id": "PRV-WATER-1",
            "transport_mode": "water",
        },
    ]
    for item in ticket_defs:
        if not bookings.ticket_exists(item["ticket_id"]):
            bookings.create_ticket(**item)
        bookings.update_dynamic_price(item["ticket_id"])


def seed_travel_records(db) -> None:
    record_defs = [
        {"record_id": "TR1", "destination": "Paris", "date": "2024-05-01", "owner": "Org1MSP"},
        {"record_id": "TR2", "destination": "London", "date": "2024-06-15", "owner": "Org2MSP"},
    ]
    for item in record_defs:
        service = TravelRecordService(db, owner=item["owner"])
        if not service.records.exists(item["record_id"]):
            service.create_record(item["record_id"], item["destination"], item["date"])


def main() -> None:
    Base.metadata.create_all(bind=engine)
    with get_db_session() as db:
        seed_directory(db)
        seed_tickets(db)
        seed_travel_records(db)
    print("Seeded providers, customers, tickets and travel records.")


if __name__ == "__main__":
    main()
