"""Discount Rules — tests for pure pooled-discount math and parsing.

Tests cover:
    - discount = prior pool / (prior eligible + current eligible)
    - no discount when already transacted today, absent last week, or denominator 0
    - final amount unclamped, 3% skim on post-discount amount
    - discount percent with zero amount
    - lenient amount parsing, strict phone validation, result template
"""

import pytest

from loyaltypool.core.discount_rules import (
    compute_discount, format_result, parse_amount, price_transaction,
    split_phone_amount, validate_phone,
)
from loyaltypool.core.errors import (
    InvalidPhoneNumberError, MALFORMED_PAYLOAD_MESSAGE, MalformedPayloadError,
)
from loyaltypool.core.weekly_ledger import WeeklyLedger

PHONE = "9876543210"
TODAY = "23-Jul-2025"


def _prior(pooled=30.0, eligible=1.0, phone=PHONE):
    return WeeklyLedger(
        total_pooled_amount=pooled,
        total_eligible_customers=eligible,
        customer_expense_map={phone: {"15-Jul-2025": "1000.00"}},
    )


# ─── compute_discount ────────────────────────────────────────────

def test_discount_is_prior_pool_over_combined_eligibility():
    current = WeeklyLedger(total_eligible_customers=2.0)
    assert compute_discount(_prior(), current, PHONE, TODAY) == pytest.approx(10.0)


def test_discount_with_no_current_customers():
    assert compute_discount(_prior(), WeeklyLedger(), PHONE, TODAY) == 30.0


def test_no_discount_when_already_transacted_today():
    current = WeeklyLedger(
        total_eligible_customers=1.0,
        customer_expense_map={PHONE: {TODAY: "500.00"}},
    )
    assert compute_discount(_prior(), current, PHONE, TODAY) == 0.0


def test_discount_again_on_a_later_day_of_the_week():
    current = WeeklyLedger(
        total_eligible_customers=1.0,
        customer_expense_map={PHONE: {"22-Jul-2025": "648.9"}},
    )
    assert compute_discount(_prior(), current, PHONE, TODAY) == 15.0


def test_no_discount_without_prior_week_record():
    prior = _prior(phone="1111111111")
    assert compute_discount(prior, WeeklyLedger(), PHONE, TODAY) == 0.0
    assert compute_discount(WeeklyLedger(), WeeklyLedger(), PHONE, TODAY) == 0.0


def test_no_discount_when_denominator_is_zero():
    prior = _prior(eligible=0.0)
    assert compute_discount(prior, WeeklyLedger(), PHONE, TODAY) == 0.0


# ─── price_transaction ───────────────────────────────────────────

def test_price_transaction_applies_discount_and_skim():
    outcome = price_transaction(678.90, 30.0)
    assert outcome.final_amount == pytest.approx(648.90)
    assert outcome.pooled_contribution == pytest.approx(648.90 * 0.03)
    assert outcome.discount_percent == pytest.approx(30.0 / 678.90 * 100)


def test_price_transaction_final_amount_may_go_negative():
    outcome = price_transaction(10.0, 30.0)
    assert outcome.final_amount == -20.0
    assert outcome.pooled_contribution == pytest.approx(-0.6)
    assert outcome.discount_percent == pytest.approx(300.0)


def test_price_transaction_zero_amount_has_zero_percent():
    outcome = price_transaction(0.0, 30.0)
    assert outcome.final_amount == -30.0
    assert outcome.discount_percent == 0.0


def test_price_transaction_custom_pool_percentage():
    outcome = price_transaction(100.0, 0.0, pool_percentage=0.05)
    assert outcome.pooled_contribution == pytest.approx(5.0)


# ─── parsing ─────────────────────────────────────────────────────

def test_split_phone_amount_trims_parts():
    assert split_phone_amount("9876543210, 678.90") == (PHONE, "678.90")


@pytest.mark.parametrize("raw", ["9876543210", "9876543210,1,2", ""])
def test_split_phone_amount_rejects_wrong_shape(raw):
    with pytest.raises(MalformedPayloadError) as exc:
        split_phone_amount(raw)
    assert exc.value.message == MALFORMED_PAYLOAD_MESSAGE


@pytest.mark.parametrize("phone", ["12345", "98765432101", "98765abcde", "", "９８７６５４３２１０"])
def test_validate_phone_rejects_non_ten_ascii_digits(phone):
    with pytest.raises(InvalidPhoneNumberError) as exc:
        validate_phone(phone)
    assert exc.value.message == f"Invalid phone number: {phone}. Must be 10 digits."


def test_validate_phone_accepts_ten_digits():
    assert validate_phone("0123456789") == "0123456789"


@pytest.mark.parametrize("text, expected", [
    ("678.90", 678.90),
    (" 100 ", 100.0),
    ("1e2", 100.0),
    ("abc", 0.0),
    ("", 0.0),
    ("1_000", 0.0),
    ("inf", 0.0),
    ("nan", 0.0),
    ("６７８.９０", 0.0),
    ("٣", 0.0),
])
def test_parse_amount_is_lenient(text, expected):
    assert parse_amount(text) == expected


# ─── format_result ───────────────────────────────────────────────

def test_format_result_template():
    assert format_result(PHONE, 648.9, 4.418913) == (
        "Phone number: 9876543210\n"
        " ; Final bill amount: 648.90\n"
        " ; Discount given: 4.42%"
    )


def test_format_result_renders_phone_numerically():
    assert format_result("0123456789", 1.0, 0.0).startswith("Phone number: 123456789\n")
