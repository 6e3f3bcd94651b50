"""Feedback Service — stores customer feedback next to the ledgers.

Invariants:
    - Validation runs before any store write
    - Timestamp and key both derive from the injected clock
"""

import logging

from loyaltypool.core.feedback_rules import build_feedback_record, validate_feedback
from loyaltypool.core.repository_protocols import Clock, LedgerStore

logger = logging.getLogger(__name__)


class FeedbackService:

    def __init__(self, store: LedgerStore, clock: Clock):
        self.store = store
        self.clock = clock

    async def submit(
        self, phone_number: str, rating: int, comment: str,
        photo: str | None = None,
    ) -> str:
        """Validate and persist one feedback record. Returns its store key."""
        validate_feedback(phone_number, rating, comment)
        key, value = build_feedback_record(
            phone_number, rating, comment, photo, self.clock.now(),
        )
        await self.store.set(key, value)
        logger.info(
            f"Stored feedback (rating={rating}, photo={'yes' if photo else 'no'})",
            extra={"ledger_key": key},
        )
        return key
