"""Ledger Entry ORM — one row per Ledger Store key.

Invariants:
    - key is the primary key (token records, weekly ledgers, feedback)
    - value is the raw string exactly as written by the core (JSON or token data)
    - updated_at refreshed on every SET

Design Decisions:
    - Key/value table instead of per-entity tables: the key naming scheme is the
      data contract, so any key/value backend can hold the same data
    - String(512) key: business names are free text, keys stay bounded
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from loyaltypool.db.base import Base


class LedgerEntry(Base):
    """Single key/value record in the Ledger Store."""
    __tablename__ = "ledger_entries"

    key: Mapped[str] = mapped_column(String(512), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
