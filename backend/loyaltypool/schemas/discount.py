"""Discount & Feedback Schemas — Pydantic models for API boundaries.

Invariants:
    - FeedbackCreate carries types only; rating bounds and blank checks live in
      core/feedback_rules.py so every caller gets the same messages
    - photo is an optional base64 string of at most 10 MiB decoded, stored as-is
"""

from pydantic import BaseModel, Field, field_validator

# Base64 text of a 10 MiB upload.
MAX_PHOTO_LENGTH = 4 * ((10 * 1024 * 1024 + 2) // 3)


class TokenResponse(BaseModel):
    """Response for /generate_token."""
    token: str


class FeedbackCreate(BaseModel):
    """Customer feedback submission."""
    phone_number: str = Field(max_length=32)
    rating: int
    comment: str = Field(max_length=5_000)
    photo: str | None = Field(None, max_length=MAX_PHOTO_LENGTH)

    @field_validator("phone_number", "comment")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()
