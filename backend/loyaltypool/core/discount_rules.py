"""Discount Rules — pure pooled-discount math, input parsing, and result formatting.

Invariants:
    - discount = prior.total_pooled_amount / (prior.eligible + current.eligible) only when
      the phone is in the prior week's ledger, has not transacted today, and the
      denominator is > 0; otherwise 0
    - final_amount = amount - discount, never clamped (may go negative)
    - pooled_contribution = final_amount * pool_percentage, skimmed from every transaction
    - discount_percent = discount / amount * 100, or 0 when amount == 0
    - Unparsable amounts (non-ASCII digits included) degrade to 0.0 instead of failing

Design Decisions:
    - The denominator mixes prior-week and current-week eligibility counts. Kept as-is
      for compatibility with discounts already dispensed; see DESIGN.md open questions
    - Phone rendered numerically in the result (leading zeros dropped), matching the
      response format clients already parse
"""

import math
import re
from dataclasses import dataclass

from loyaltypool.core.domain_types import PhoneNumber
from loyaltypool.core.errors import InvalidPhoneNumberError, MalformedPayloadError
from loyaltypool.core.weekly_ledger import WeeklyLedger

PHONE_PATTERN = re.compile(r"[0-9]{10}")
DEFAULT_POOL_PERCENTAGE: float = 0.03


@dataclass(frozen=True)
class DiscountOutcome:
    """Priced transaction, before it is folded into the current ledger."""
    amount: float
    discount: float
    final_amount: float
    pooled_contribution: float
    discount_percent: float


# ─── Input Parsing ───────────────────────────────────────────────

def split_phone_amount(phone_number_amount: str) -> tuple[str, str]:
    """'9876543210, 678.90' -> ('9876543210', '678.90')."""
    parts = phone_number_amount.split(",")
    if len(parts) != 2:
        raise MalformedPayloadError()
    return parts[0].strip(), parts[1].strip()


def validate_phone(phone: str) -> PhoneNumber:
    if not PHONE_PATTERN.fullmatch(phone):
        raise InvalidPhoneNumberError(phone)
    return PhoneNumber(phone)


def parse_amount(text: str) -> float:
    """Lenient ASCII decimal parse: anything unparsable or non-finite becomes 0.0."""
    text = text.strip()
    if "_" in text or not text.isascii():
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


# ─── Discount Math ───────────────────────────────────────────────

def compute_discount(
    prior: WeeklyLedger, current: WeeklyLedger, phone: str, today: str,
) -> float:
    """Share of last week's pool owed to phone for its first visit today."""
    if current.has_transaction_on(phone, today):
        return 0.0
    if not prior.has_customer(phone):
        return 0.0
    eligible = prior.total_eligible_customers + current.total_eligible_customers
    if eligible > 0:
        return prior.total_pooled_amount / eligible
    return 0.0


def price_transaction(
    amount: float, discount: float,
    pool_percentage: float = DEFAULT_POOL_PERCENTAGE,
) -> DiscountOutcome:
    final_amount = amount - discount
    discount_percent = (discount / amount) * 100.0 if amount != 0 else 0.0
    return DiscountOutcome(
        amount=amount,
        discount=discount,
        final_amount=final_amount,
        pooled_contribution=final_amount * pool_percentage,
        discount_percent=discount_percent,
    )


# ─── Result Formatting ───────────────────────────────────────────

def format_result(phone: str, final_amount: float, discount_percent: float) -> str:
    return (
        f"Phone number: {int(phone)}\n"
        f" ; Final bill amount: {final_amount:.2f}\n"
        f" ; Discount given: {discount_percent:.2f}%"
    )
