"""Discount Pooling Engine — prices a transaction against last week's pooled fund.

Invariants:
    - Validation order: token -> phone -> amount; first failure wins
    - Only the current week's ledger (<business>___<Monday>) is written; the prior
      week's ledger is read and never modified
    - One write per successful request; failed validation writes nothing
    - Read-modify-write of a (business, Monday) ledger is serialized in-process

Design Decisions:
    - Pure math in core/discount_rules.py, ledger mutation in core/weekly_ledger.py,
      IO and locking here (impureim sandwich)
    - _ledger_locks as module-level dict: deliberate exception to no-global-state rule.
      Closes the lost-update race within one process; multiple workers still rely on
      the store (see DESIGN.md)
    - get_response() returns the failure string instead of raising for authorization and
      validation failures; StoreError still propagates to the transport
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date

from loyaltypool.config import Settings
from loyaltypool.core.discount_rules import (
    compute_discount, format_result, parse_amount, price_transaction,
    split_phone_amount, validate_phone,
)
from loyaltypool.core.errors import AuthorizationError, ValidationError
from loyaltypool.core.ledger_keys import (
    format_day, previous_week_monday, week_monday, weekly_ledger_key,
)
from loyaltypool.core.repository_protocols import Clock, LedgerStore
from loyaltypool.services.ledger_access import (
    load_weekly_ledger, save_weekly_ledger,
)
from loyaltypool.services.token_authority import TokenAuthority

logger = logging.getLogger(__name__)

_ledger_locks: dict[tuple[str, date], asyncio.Lock] = {}


def _ledger_lock(business: str, monday: date) -> asyncio.Lock:
    lock = _ledger_locks.get((business, monday))
    if lock is None:
        # Past weeks are never written again.
        for stale in [k for k in _ledger_locks if k[1] < monday]:
            if not _ledger_locks[stale].locked():
                del _ledger_locks[stale]
        lock = _ledger_locks[(business, monday)] = asyncio.Lock()
    return lock


@dataclass(frozen=True)
class DiscountResult:
    phone: str
    amount: float
    discount: float
    final_amount: float
    discount_percent: float

    def render(self) -> str:
        return format_result(self.phone, self.final_amount, self.discount_percent)


class DiscountPoolingEngine:
    """Computes and records pooled discounts for one business per call."""

    def __init__(
        self, store: LedgerStore, clock: Clock, settings: Settings,
        authority: TokenAuthority | None = None,
    ):
        self.store = store
        self.clock = clock
        self.pool_percentage = settings.discount_pool_percentage
        self.authority = authority or TokenAuthority(store, clock, settings)

    async def compute(
        self, token_id: str, business: str, phone: str, amount: str,
    ) -> DiscountResult:
        """Authorize, price, and record one transaction.

        Raises AuthorizationError, InvalidPhoneNumberError, or StoreError.
        """
        await self.authority.authorize(token_id, business)
        return await self._record(business, phone, amount)

    async def _record(
        self, business: str, phone: str, amount: str,
    ) -> DiscountResult:
        phone_number = validate_phone(phone)
        amount_value = parse_amount(amount)

        now = self.clock.now()
        today = now.date()
        today_key = format_day(today)
        monday = week_monday(today)
        current_key = weekly_ledger_key(business, monday)
        prior_key = weekly_ledger_key(business, previous_week_monday(today))

        async with _ledger_lock(business, monday):
            current = await load_weekly_ledger(self.store, current_key)
            prior = await load_weekly_ledger(self.store, prior_key)

            discount = compute_discount(prior, current, phone_number, today_key)
            outcome = price_transaction(amount_value, discount, self.pool_percentage)
            newly_eligible = current.record_transaction(
                phone_number, today_key, outcome.final_amount,
                outcome.pooled_contribution, outcome.discount,
            )
            await save_weekly_ledger(self.store, current_key, current)

        logger.info(
            f"Recorded transaction: amount={amount_value} discount={discount} "
            f"final={outcome.final_amount}",
            extra={
                "business_name": business,
                "ledger_key": current_key,
                "newly_eligible": newly_eligible,
                "discount": discount,
            },
        )
        return DiscountResult(
            phone=phone_number,
            amount=amount_value,
            discount=outcome.discount,
            final_amount=outcome.final_amount,
            discount_percent=outcome.discount_percent,
        )

    async def get_response(
        self, token_id: str, business: str, phone_number_amount: str,
    ) -> str:
        """Raw 'phone,amount' in, result or failure string out."""
        try:
            await self.authority.authorize(token_id, business)
            phone, amount = split_phone_amount(phone_number_amount)
            result = await self._record(business, phone, amount)
        except (AuthorizationError, ValidationError) as e:
            logger.info(
                f"Discount request rejected: {e.message}",
                extra={"business_name": business, "error_code": e.code},
            )
            return e.message
        return result.render()
