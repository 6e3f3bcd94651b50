"""Discount Routes — token issuance and pooled-discount lookup.

Invariants:
    - get_discount always answers 200 text/plain; authorization and validation
      failures travel in the body as their exact message strings
    - get_discount responses are never cached by clients or proxies
    - generate_token scopes the token to the configured default business unless
      a business is given

Design Decisions:
    - Path shape kept from the deployed clients:
      /get_discount/{business}/phone_number_amount/{phone,amount}/token/{token}
    - StoreError on get_discount becomes a 200 body, matching the other failures
      clients already display; generate_token lets the global handler answer 503
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from loyaltypool.api.dependencies import get_discount_engine, get_token_authority
from loyaltypool.config import Settings, get_settings
from loyaltypool.core.domain_types import BusinessName, PhoneNumber
from loyaltypool.core.errors import StoreError
from loyaltypool.schemas.discount import TokenResponse
from loyaltypool.services.discount_engine import DiscountPoolingEngine
from loyaltypool.services.token_authority import TokenAuthority

logger = logging.getLogger(__name__)
router = APIRouter(tags=["discount"])

NO_STORE = "no-store, no-cache, must-revalidate, proxy-revalidate"
STORE_UNAVAILABLE_MESSAGE = "Ledger store unavailable."


@router.get(
    "/get_discount/{business_name}/phone_number_amount/{phone_number_amount}"
    "/token/{token}",
    response_class=PlainTextResponse,
)
async def get_discount(
    business_name: str,
    phone_number_amount: str,
    token: str,
    engine: DiscountPoolingEngine = Depends(get_discount_engine),
):
    """Apply last week's pooled discount to this bill and record it."""
    try:
        body = await engine.get_response(token, business_name, phone_number_amount)
    except StoreError as e:
        logger.error(
            f"Discount lookup failed: {e.message}",
            extra={"business_name": business_name, "error_code": e.code},
        )
        body = STORE_UNAVAILABLE_MESSAGE
    return PlainTextResponse(body, headers={"Cache-Control": NO_STORE})


@router.get("/generate_token", response_model=TokenResponse)
async def generate_token(
    phone: str = Query(min_length=1, max_length=32),
    business: str | None = Query(None, min_length=1),
    authority: TokenAuthority = Depends(get_token_authority),
    settings: Settings = Depends(get_settings),
):
    """Issue a token for (phone, business) valid for token_ttl_days."""
    business_name = business or settings.default_business_name
    token = await authority.issue(PhoneNumber(phone), BusinessName(business_name))
    return TokenResponse(token=token)
