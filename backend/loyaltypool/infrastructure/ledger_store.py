"""SQL Ledger Store — key/value LedgerStore over the ledger_entries table.

Invariants:
    - get() returns None for absent keys; callers treat "" the same as None
    - set() is an upsert and commits immediately (one key per write, no multi-key txn)
    - Every SQLAlchemy failure surfaces as StoreError; nothing is retried here

Design Decisions:
    - Session per request (FastAPI get_db): no ledger caching across requests
    - session.merge for upsert: portable across PostgreSQL and SQLite
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from loyaltypool.core.errors import ErrorContext, StoreError
from loyaltypool.models.ledger_entry import LedgerEntry

logger = logging.getLogger(__name__)


class SqlLedgerStore:
    """LedgerStore implementation backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists(self, key: str) -> bool:
        try:
            result = await self.db.execute(
                select(LedgerEntry.key).where(LedgerEntry.key == key),
            )
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            raise self._store_error(e, "EXISTS", key)

    async def get(self, key: str) -> str | None:
        try:
            result = await self.db.execute(
                select(LedgerEntry.value).where(LedgerEntry.key == key),
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._store_error(e, "GET", key)

    async def set(self, key: str, value: str) -> None:
        try:
            await self.db.merge(LedgerEntry(key=key, value=value))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise self._store_error(e, "SET", key)

    @staticmethod
    def _store_error(exc: Exception, operation: str, key: str) -> StoreError:
        logger.error(
            f"Ledger store {operation} failed: {exc}",
            extra={"ledger_key": key, "error_code": "STORE_ERROR"},
        )
        return StoreError(
            type(exc).__name__, operation, ErrorContext(ledger_key=key),
        )

