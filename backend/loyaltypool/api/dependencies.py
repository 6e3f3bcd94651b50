"""Route Dependencies — wire services to the per-request Ledger Store.

Invariants:
    - One SqlLedgerStore per request, bound to the request's AsyncSession
    - Clock and Settings injectable so tests override them via dependency_overrides
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from loyaltypool.config import Settings, get_settings
from loyaltypool.core.repository_protocols import Clock
from loyaltypool.infrastructure.clock import SystemClock
from loyaltypool.infrastructure.database import get_db
from loyaltypool.infrastructure.ledger_store import SqlLedgerStore
from loyaltypool.services.discount_engine import DiscountPoolingEngine
from loyaltypool.services.feedback_service import FeedbackService
from loyaltypool.services.token_authority import TokenAuthority


def get_clock() -> Clock:
    return SystemClock()


def get_ledger_store(db: AsyncSession = Depends(get_db)) -> SqlLedgerStore:
    return SqlLedgerStore(db)


def get_token_authority(
    store: SqlLedgerStore = Depends(get_ledger_store),
    clock: Clock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
) -> TokenAuthority:
    return TokenAuthority(store, clock, settings)


def get_discount_engine(
    store: SqlLedgerStore = Depends(get_ledger_store),
    clock: Clock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
    authority: TokenAuthority = Depends(get_token_authority),
) -> DiscountPoolingEngine:
    return DiscountPoolingEngine(store, clock, settings, authority)


def get_feedback_service(
    store: SqlLedgerStore = Depends(get_ledger_store),
    clock: Clock = Depends(get_clock),
) -> FeedbackService:
    return FeedbackService(store, clock)
