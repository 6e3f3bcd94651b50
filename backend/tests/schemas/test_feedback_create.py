"""FeedbackCreate — request body shape for /submit_feedback.

Invariants:
    - phone_number and comment are stripped; blank checks happen in the service
    - photo is optional (None by default) and capped at 10 MiB of base64 content
    - rating bounds are NOT enforced here
"""

import pytest
from pydantic import ValidationError

from loyaltypool.schemas.discount import (
    MAX_PHOTO_LENGTH, FeedbackCreate, TokenResponse,
)


def test_feedback_strips_text_fields():
    body = FeedbackCreate(phone_number=" 9876543210 ", rating=4, comment="  nice  ")
    assert body.phone_number == "9876543210"
    assert body.comment == "nice"


def test_feedback_photo_defaults_to_none():
    body = FeedbackCreate(phone_number="9876543210", rating=4, comment="nice")
    assert body.photo is None


def test_feedback_rating_bounds_left_to_service():
    body = FeedbackCreate(phone_number="9876543210", rating=9, comment="nice")
    assert body.rating == 9


def test_feedback_rating_must_be_integer():
    with pytest.raises(ValidationError):
        FeedbackCreate(phone_number="9876543210", rating="five", comment="nice")


def test_feedback_comment_max_length_enforced():
    with pytest.raises(ValidationError):
        FeedbackCreate(phone_number="9876543210", rating=4, comment="x" * 5_001)


def test_feedback_photo_at_limit_accepted():
    body = FeedbackCreate(
        phone_number="9876543210", rating=4, comment="nice",
        photo="A" * MAX_PHOTO_LENGTH,
    )
    assert len(body.photo) == MAX_PHOTO_LENGTH


def test_feedback_photo_max_length_enforced():
    with pytest.raises(ValidationError):
        FeedbackCreate(
            phone_number="9876543210", rating=4, comment="nice",
            photo="A" * (MAX_PHOTO_LENGTH + 1),
        )


def test_token_response_shape():
    assert TokenResponse(token="abc").model_dump() == {"token": "abc"}
