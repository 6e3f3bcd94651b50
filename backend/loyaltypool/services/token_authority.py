"""Token Authority — issues and validates bearer tokens scoped to (phone, business).

Invariants:
    - issue() writes exactly three records: token:<id>, phone:<phone>:token,
      <business>_token_<id>
    - validate() re-derives status from the store and the clock on every call
    - No revocation: a token stops working only by expiring

Design Decisions:
    - Pure verdict in core/token_rules.py, IO here (impureim sandwich)
    - authorize() raises typed AuthorizationError subclasses so the discount engine
      short-circuits with the exact failure message
"""

import logging
import uuid

from loyaltypool.config import Settings
from loyaltypool.core.domain_types import BusinessName, PhoneNumber, TokenId, TokenStatus
from loyaltypool.core.errors import (
    ErrorContext, InvalidTokenExpiryError, TokenExpiredError,
)
from loyaltypool.core.ledger_keys import business_token_key, token_key
from loyaltypool.core.repository_protocols import Clock, LedgerStore
from loyaltypool.core.token_rules import (
    TokenVerdict, build_token_records, evaluate_token, token_expiry,
)
from loyaltypool.services.ledger_access import fetch_value

logger = logging.getLogger(__name__)


class TokenAuthority:
    """Token issuance and validation against the Ledger Store."""

    def __init__(self, store: LedgerStore, clock: Clock, settings: Settings):
        self.store = store
        self.clock = clock
        self.ttl_days = settings.token_ttl_days

    async def issue(self, phone: PhoneNumber, business: BusinessName) -> TokenId:
        """Generate a fresh token valid for ttl_days and persist its records."""
        token_id = TokenId(str(uuid.uuid4()))
        expiry = token_expiry(self.clock.now(), self.ttl_days)
        records = build_token_records(token_id, phone, business, expiry)
        for key, value in records.items():
            await self.store.set(key, value)

        logger.info(
            f"Issued token {token_id} expiring {expiry.isoformat()}",
            extra={"business_name": business},
        )
        return token_id

    async def verdict(self, token_id: str, business: str) -> TokenVerdict:
        token_data = await fetch_value(self.store, token_key(token_id))
        business_token = await fetch_value(
            self.store, business_token_key(business, token_id),
        )
        today = self.clock.now().date()
        result = evaluate_token(token_id, token_data, business_token, today)

        if not result.is_valid:
            logger.warning(
                f"Token validation failed: stored_token='{result.stored_token}', "
                f"verified_token='{business_token}', token='{token_id}', "
                f"expiry='{result.expiry_text}', today='{today.isoformat()}'",
                extra={
                    "business_name": business,
                    "token_status": result.status.value,
                },
            )
        return result

    async def validate(self, token_id: str, business: str) -> bool:
        return (await self.verdict(token_id, business)).is_valid

    async def authorize(self, token_id: str, business: str) -> None:
        """Raise AuthorizationError unless token_id is valid for business."""
        result = await self.verdict(token_id, business)
        if result.is_valid:
            return
        context = ErrorContext(business_name=business)
        if result.status == TokenStatus.INVALID_EXPIRY:
            raise InvalidTokenExpiryError(result.expiry_text, context)
        raise TokenExpiredError(context)
