import logging
from typing import List

from sqlalchemy.orm import Session

from travel_ledger.domain.entities import TravelRecord
from travel_ledger.domain.exceptions import DuplicateEntityError, NotFoundError
from travel_ledger.domain.validation import require_fields
from travel_ledger.infrastructure.ledger.ledger import Ledger
from travel_ledger.infrastructure.repositories.travel_record_repository import (
    TravelRecordRepository,
)

logger = logging.getLogger(__name__)


class TravelRecordService:
    """Plain itinerary records, stamped with the calling owner."""

    def __init__(self, db: Session, owner: str):
        self.db = db
        self.owner = owner
        self.ledger = Ledger(db, owner=owner)
        self.records = TravelRecordRepository(self.ledger)

    def create_record(self, record_id: str, destination: str, date: str) -> TravelRecord:
        self.ledger.begin("create_travel_record")

        require_fields("id, destination and date are required", record_id, destination, date)
        require_fields("caller identity is required", self.owner)
        if self.records.exists(record_id):
            raise DuplicateEntityError("travel record", record_id)

        record = TravelRecord(
            id=record_id,
            destination=destination,
            date=date,
            status="Planned",
            owner=self.owner,
        )
        self.records.save(record)
        logger.info("Travel record %s created by %s", record_id, self.owner)
        return record

    def read_record(self, record_id: str) -> TravelRecord:
        return self.records.get(record_id)

    def update_record(
        self,
        record_id: str,
        destination: str,
        date: str,
        status: str,
    ) -> TravelRecord:
        self.ledger.begin("update_travel_record")

        require_fields(
            "id, destination, date and status are required",
            record_id, destination, date, status,
        )
        require_fields("caller identity is required", self.owner)

        record = self.records.get(record_id)
        record.destination = destination
        record.date = date
        record.status = status
        record.owner = self.owner
        self.records.save(record)
        logger.info("Travel record %s updated by %s", record_id, self.owner)
        return record

    def delete_record(self, record_id: str) -> None:
        self.ledger.begin("delete_travel_record")

        if not self.records.exists(record_id):
            raise NotFoundError("travel record", record_id)
        self.records.delete(record_id)
        logger.info("Travel record %s deleted by %s", record_id, self.owner)

    def list_records(self) -> List[TravelRecord]:
        return list(self.records.iter_all())
