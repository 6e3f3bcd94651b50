"""Token Rules — pure issuance records and the validation state machine.

Invariants:
    - evaluate_token is PURE: takes the stored values plus today, returns a verdict
    - Validity is re-derived on every call; no state is cached or persisted
    - A token is VALID iff token:<id> and <business>_token_<id> both resolve to <id>
      and today <= expiry (calendar day comparison, valid through the expiry day)
    - An unparsable expiry is reported as INVALID_EXPIRY, distinct from
      absent/mismatched/expired records which all read "Token expired"

Design Decisions:
    - Expiry parse checked before id comparison: a corrupt record is diagnosed as
      corrupt even when the ids would also fail
    - Wrong number of '___' parts is treated like an absent record
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from loyaltypool.core.domain_types import KEY_SEPARATOR, TokenStatus
from loyaltypool.core.errors import (
    INVALID_TOKEN_EXPIRY_MESSAGE, TOKEN_EXPIRED_MESSAGE,
)
from loyaltypool.core.ledger_keys import (
    business_token_key, parse_day, phone_token_key, token_key, token_record,
)


@dataclass(frozen=True)
class TokenVerdict:
    status: TokenStatus
    message: str | None = None
    stored_token: str = ""
    expiry_text: str = ""
    expiry: date | None = None

    @property
    def is_valid(self) -> bool:
        return self.status == TokenStatus.VALID


def token_expiry(issued_at: datetime, ttl_days: int) -> date:
    return (issued_at + timedelta(days=ttl_days)).date()


def build_token_records(
    token_id: str, phone: str, business: str, expiry: date,
) -> dict[str, str]:
    """The three records written on issue, keyed by store key."""
    return {
        token_key(token_id): token_record(token_id, expiry),
        phone_token_key(phone): token_id,
        business_token_key(business, token_id): token_id,
    }


def split_token_record(raw: str | None) -> tuple[str, str]:
    """'<id>___<expiry>' -> (id, expiry). Absent or malformed -> ('', '')."""
    if not raw:
        return "", ""
    parts = raw.split(KEY_SEPARATOR)
    if len(parts) != 2:
        return "", ""
    return parts[0], parts[1]


def evaluate_token(
    token_id: str,
    token_data: str | None,
    business_token: str | None,
    today: date,
) -> TokenVerdict:
    """Derive token status from the two stored values and today's date."""
    stored_token, expiry_text = split_token_record(token_data)

    expiry: date | None = None
    if expiry_text:
        try:
            expiry = parse_day(expiry_text)
        except ValueError:
            return TokenVerdict(
                TokenStatus.INVALID_EXPIRY, INVALID_TOKEN_EXPIRY_MESSAGE,
                stored_token, expiry_text,
            )

    if not stored_token or stored_token != token_id or (business_token or "") != token_id:
        return TokenVerdict(
            TokenStatus.INVALID, TOKEN_EXPIRED_MESSAGE,
            stored_token, expiry_text, expiry,
        )

    if expiry is None or expiry < today:
        return TokenVerdict(
            TokenStatus.EXPIRED, TOKEN_EXPIRED_MESSAGE,
            stored_token, expiry_text, expiry,
        )

    return TokenVerdict(
        TokenStatus.VALID, None, stored_token, expiry_text, expiry,
    )
