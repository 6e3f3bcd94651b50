"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TokenId, PhoneNumber, BusinessName wrap str; never pass bare str in domain logic
    - All token states encoded as an Enum; no raw string matching
    - DATE_FORMAT and KEY_SEPARATOR are the single source of truth for persisted text

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (log extras, API envelopes)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TokenId = NewType("TokenId", str)
PhoneNumber = NewType("PhoneNumber", str)       # exactly 10 ASCII digits once validated
BusinessName = NewType("BusinessName", str)
LedgerKey = NewType("LedgerKey", str)


# ─── Persisted Text Formats ──────────────────────────────────────

DATE_FORMAT: str = "%d-%b-%Y"     # e.g. 21-Jul-2025
KEY_SEPARATOR: str = "___"


# ─── Enums ───────────────────────────────────────────────────────

class TokenStatus(str, Enum):
    """Outcome of a single token validation, re-derived on every call."""
    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"
    INVALID_EXPIRY = "invalid_expiry"
