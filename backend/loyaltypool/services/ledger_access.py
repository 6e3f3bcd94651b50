"""Ledger Access — shared Ledger Store reads used by every service.

Invariants:
    - Absent keys and empty values both read as ""
    - A weekly ledger that is absent or undecodable loads as an empty WeeklyLedger
      (logged as a warning); it is never fatal to a discount request
"""

import logging

from loyaltypool.core.repository_protocols import LedgerStore
from loyaltypool.core.weekly_ledger import WeeklyLedger

logger = logging.getLogger(__name__)


async def fetch_value(store: LedgerStore, key: str) -> str:
    """EXISTS then GET, the same two round trips for every read."""
    if not await store.exists(key):
        return ""
    return await store.get(key) or ""


async def load_weekly_ledger(store: LedgerStore, key: str) -> WeeklyLedger:
    raw = await fetch_value(store, key)
    if not raw:
        return WeeklyLedger()
    try:
        return WeeklyLedger.from_json(raw)
    except ValueError as e:
        logger.warning(
            f"Discarding undecodable weekly ledger: {e}",
            extra={"ledger_key": key},
        )
        return WeeklyLedger()


async def save_weekly_ledger(
    store: LedgerStore, key: str, ledger: WeeklyLedger,
) -> None:
    await store.set(key, ledger.to_json())
