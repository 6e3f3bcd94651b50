"""Feedback Intake — /submit_feedback stores one record per (phone, second).

Invariants:
    - Valid feedback answers 200 "Feedback submitted successfully!"
    - Record lands under feedback:<phone>:<unix secs of the frozen clock>
    - Rating outside 1..5 or blank fields answer 400 and store nothing
"""

import json

from loyaltypool.services.feedback_service import FeedbackService

from tests.services.ledger_fixtures import FROZEN_NOW, PHONE

FEEDBACK_KEY = f"feedback:{PHONE}:{int(FROZEN_NOW.timestamp())}"


async def test_submit_feedback_stores_record(client, store):
    res = await client.post("/submit_feedback", json={
        "phone_number": f" {PHONE} ",
        "rating": 5,
        "comment": "Great coffee",
    })

    assert res.status_code == 200
    assert res.text == "Feedback submitted successfully!"
    record = json.loads(await store.get(FEEDBACK_KEY))
    assert record == {
        "phone_number": PHONE,
        "rating": 5,
        "comment": "Great coffee",
        "photo": "",
        "timestamp": FROZEN_NOW.isoformat(),
    }


async def test_submit_feedback_keeps_photo(client, store):
    await client.post("/submit_feedback", json={
        "phone_number": PHONE, "rating": 3, "comment": "ok", "photo": "aGVsbG8=",
    })

    assert json.loads(await store.get(FEEDBACK_KEY))["photo"] == "aGVsbG8="


async def test_rating_out_of_range_rejected(client, store):
    res = await client.post("/submit_feedback", json={
        "phone_number": PHONE, "rating": 6, "comment": "too good",
    })

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_RATING"
    assert await store.get(FEEDBACK_KEY) is None


async def test_blank_comment_rejected(client):
    res = await client.post("/submit_feedback", json={
        "phone_number": PHONE, "rating": 4, "comment": "   ",
    })

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MISSING_FEEDBACK_FIELD"


async def test_missing_field_is_validation_error(client):
    res = await client.post("/submit_feedback", json={"phone_number": PHONE})

    assert res.status_code == 400
    body = res.json()["error"]
    assert body["code"] == "VALIDATION_ERROR"
    fields = {d["field"] for d in body["details"]}
    assert "body.rating" in fields
    assert "body.comment" in fields


async def test_service_returns_key(store, clock):
    key = await FeedbackService(store, clock).submit(PHONE, 1, "cold")
    assert key == FEEDBACK_KEY
