# travel_ledger/infrastructure/db/models.py

from sqlalchemy import (
    String,
    LargeBinary,
    DateTime,
    Index,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime

from travel_ledger.infrastructure.db.session import Base


class LedgerRecord(Base):
    """
    One key of the flat ledger key space.
    Value is the encoded entity; doc_type mirrors the
    record's docType tag so rich queries can narrow the scan.
    """

    __tablename__ = "ledger_records"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    doc_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    tx_ref: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_ledger_records_doc_type", "doc_type"),
    )


class LedgerTransaction(Base):
    """Audit row for every unit of work that wrote to the ledger."""

    __tablename__ = "ledger_transactions"

    tx_ref: Mapped[str] = mapped_column(String(64), primary_key=True)
    operation: Mapped[str] = mapped_column(String(64), nullable=False)
    owner: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
