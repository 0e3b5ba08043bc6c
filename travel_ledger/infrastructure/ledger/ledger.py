# travel_ledger/infrastructure/ledger/ledger.py

import json
import logging
from typing import Any, Dict, Iterator, Optional, Tuple, Union
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from travel_ledger.infrastructure.db.models import LedgerRecord, LedgerTransaction
from travel_ledger.infrastructure.ledger.selector import matches, parse_query

logger = logging.getLogger(__name__)

KEY_SEPARATOR = ":"


def namespace_of(key: str) -> Optional[str]:
    namespace, separator, _ = key.partition(KEY_SEPARATOR)
    return namespace if separator else None


class Ledger:
    """
    Key/value facade over the ledger_records table.

    One Ledger instance is one unit of work: every write is flushed into the
    surrounding SQLAlchemy transaction and becomes visible to other sessions
    only when that transaction commits. The caller owns commit/rollback.
    """

    def __init__(
        self,
        db: Session,
        operation: str = "query",
        owner: Optional[str] = None,
    ):
        self.db = db
        self.owner = owner
        self.begin(operation)

    def begin(self, operation: str) -> str:
        """Starts a new logical invocation and returns its transaction ref."""
        self.operation = operation
        self._tx_ref = uuid4().hex
        self._tx_recorded = False
        return self._tx_ref

    def current_transaction_ref(self) -> str:
        return self._tx_ref

    def get(self, key: str) -> Optional[bytes]:
        record = self.db.get(LedgerRecord, key)
        if record is None:
            return None
        return record.value

    def put(self, key: str, value: bytes) -> None:
        self._record_transaction()
        record = self.db.get(LedgerRecord, key)
        if record is None:
            record = LedgerRecord(
                key=key,
                doc_type=namespace_of(key),
                value=value,
                tx_ref=self._tx_ref,
            )
            self.db.add(record)
        else:
            record.value = value
            record.tx_ref = self._tx_ref
        self.db.flush()

    def delete(self, key: str) -> None:
        record = self.db.get(LedgerRecord, key)
        if record is None:
            return
        self._record_transaction()
        self.db.delete(record)
        self.db.flush()

    def range_scan(
        self,
        start_key: str = "",
        end_key: Optional[str] = None,
    ) -> Iterator[Tuple[str, bytes]]:
        """Yields (key, value) for start_key <= key < end_key in key order."""
        stmt = select(LedgerRecord).where(LedgerRecord.key >= start_key)
        if end_key:
            stmt = stmt.where(LedgerRecord.key < end_key)
        stmt = stmt.order_by(LedgerRecord.key)

        for record in self.db.execute(stmt).scalars():
            yield record.key, record.value

    def rich_query(
        self,
        query: Union[str, Dict[str, Any]],
    ) -> Iterator[Tuple[str, bytes]]:
        """
        Yields (key, value) for every stored document matching the selector.

        Values that are not JSON objects cannot be matched and are skipped.
        """
        selector = parse_query(query)

        stmt = select(LedgerRecord)
        doc_type = selector.get("docType")
        if isinstance(doc_type, str):
            stmt = stmt.where(LedgerRecord.doc_type == doc_type)
        stmt = stmt.order_by(LedgerRecord.key)

        for record in self.db.execute(stmt).scalars():
            try:
                document = json.loads(record.value)
            except (UnicodeDecodeError, json.JSONDecodeError):
                logger.warning("Skipping undecodable ledger record %s", record.key)
                continue
            if isinstance(document, dict) and matches(document, selector):
                yield record.key, record.value

    def _record_transaction(self) -> None:
        if self._tx_recorded:
            return
        self.db.add(
            LedgerTransaction(
                tx_ref=self._tx_ref,
                operation=self.operation,
                owner=self.owner,
            )
        )
        self._tx_recorded = True
