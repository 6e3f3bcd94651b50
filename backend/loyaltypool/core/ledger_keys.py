"""Ledger Key Naming & Date Math — the persisted data contract.

Invariants:
    - Key shapes never change: existing data stays readable
        token:<id>                   -> "<id>___<DD-Mon-YYYY>"
        phone:<phone>:token          -> <id>
        <business>_token_<id>        -> <id>
        <business>___<DD-Mon-YYYY>   -> WeeklyLedger JSON (Monday of the ISO week)
        feedback:<phone>:<unix secs> -> feedback JSON
    - week_monday() always returns a Monday on or before the given day
"""

from datetime import date, datetime, timedelta

from loyaltypool.core.domain_types import DATE_FORMAT, KEY_SEPARATOR


def format_day(day: date) -> str:
    """Render a calendar day as DD-Mon-YYYY."""
    return day.strftime(DATE_FORMAT)


def parse_day(text: str) -> date:
    """Parse DD-Mon-YYYY. Raises ValueError on anything else."""
    return datetime.strptime(text, DATE_FORMAT).date()


def week_monday(day: date) -> date:
    """Monday of the ISO week containing day."""
    return day - timedelta(days=day.weekday())


def previous_week_monday(day: date) -> date:
    return week_monday(day) - timedelta(days=7)


# ─── Token Keys ──────────────────────────────────────────────────

def token_key(token_id: str) -> str:
    return f"token:{token_id}"


def phone_token_key(phone: str) -> str:
    return f"phone:{phone}:token"


def business_token_key(business: str, token_id: str) -> str:
    return f"{business}_token_{token_id}"


def token_record(token_id: str, expiry: date) -> str:
    """Value stored under token_key: '<id>___<expiry>'."""
    return f"{token_id}{KEY_SEPARATOR}{format_day(expiry)}"


# ─── Ledger Keys ─────────────────────────────────────────────────

def weekly_ledger_key(business: str, monday: date) -> str:
    return f"{business}{KEY_SEPARATOR}{format_day(monday)}"


def feedback_key(phone: str, unix_seconds: int) -> str:
    return f"feedback:{phone}:{unix_seconds}"
