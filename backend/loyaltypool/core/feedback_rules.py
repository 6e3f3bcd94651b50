"""Feedback Rules — validation and record shape for customer feedback.

Invariants:
    - rating is 1..5 inclusive
    - phone_number and comment are non-blank after stripping
    - One record per (phone, unix second): feedback:<phone>:<unix secs>
"""

import json
from datetime import datetime

from loyaltypool.core.errors import InvalidRatingError, MissingFeedbackFieldError
from loyaltypool.core.ledger_keys import feedback_key

MIN_RATING: int = 1
MAX_RATING: int = 5


def validate_feedback(phone_number: str, rating: int, comment: str) -> None:
    if not phone_number.strip():
        raise MissingFeedbackFieldError("phone_number")
    if not comment.strip():
        raise MissingFeedbackFieldError("comment")
    if rating < MIN_RATING or rating > MAX_RATING:
        raise InvalidRatingError(rating)


def build_feedback_record(
    phone_number: str, rating: int, comment: str,
    photo: str | None, submitted_at: datetime,
) -> tuple[str, str]:
    """Return (store key, JSON value)."""
    key = feedback_key(phone_number, int(submitted_at.timestamp()))
    value = json.dumps({
        "phone_number": phone_number,
        "rating": rating,
        "comment": comment,
        "photo": photo or "",
        "timestamp": submitted_at.isoformat(),
    }, ensure_ascii=False)
    return key, value
