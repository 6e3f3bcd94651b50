"""Feedback Routes — customer feedback intake.

Invariants:
    - Invalid rating or blank fields answer 400 through the global error handler
    - Stored under feedback:<phone>:<unix secs>
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from loyaltypool.api.dependencies import get_feedback_service
from loyaltypool.schemas.discount import FeedbackCreate
from loyaltypool.services.feedback_service import FeedbackService

router = APIRouter(tags=["feedback"])


@router.post("/submit_feedback", response_class=PlainTextResponse)
async def submit_feedback(
    body: FeedbackCreate,
    service: FeedbackService = Depends(get_feedback_service),
):
    await service.submit(body.phone_number, body.rating, body.comment, body.photo)
    return PlainTextResponse("Feedback submitted successfully!")
