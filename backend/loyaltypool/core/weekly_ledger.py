"""Weekly Ledger — per-business, per-ISO-week aggregate of pooled funds.

Invariants:
    - JSON field names are stable: total_pooled_amount, total_eligible_customers,
      total_discount_given, customer_expense_map
    - total_eligible_customers grows by exactly 1 per phone per week (first transaction)
    - customer_expense_map is append-only: phone -> {DD-Mon-YYYY -> "a,b,c"}
    - Only the current week's ledger is ever mutated; past weeks are read-only snapshots
    - Counters are finite on both read and write; NaN, Infinity, or integers beyond
      float range make a stored ledger undecodable

Design Decisions:
    - Dataclass with explicit to_json/from_json over ad hoc dict access: the stored
      blob has one typed shape and decoding rejects anything else
    - Counters stay float on the wire (eligible count included) for compatibility
      with ledgers already in the store
"""

import json
import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

_FIELDS = (
    "total_pooled_amount",
    "total_eligible_customers",
    "total_discount_given",
    "customer_expense_map",
)


def format_amount(value: float) -> str:
    """Shortest round-trip decimal, no exponent, integral values without '.0'.

    648.9 -> "648.9", 30.0 -> "30", 1e-07 -> "0.0000001".
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass
class WeeklyLedger:
    """Aggregate for one (business, Monday) key."""

    total_pooled_amount: float = 0.0
    total_eligible_customers: float = 0.0
    total_discount_given: float = 0.0
    customer_expense_map: dict[str, dict[str, str]] = field(default_factory=dict)

    def has_customer(self, phone: str) -> bool:
        return phone in self.customer_expense_map

    def has_transaction_on(self, phone: str, day: str) -> bool:
        return day in self.customer_expense_map.get(phone, {})

    def record_transaction(
        self, phone: str, day: str, final_amount: float,
        pooled_contribution: float, discount: float,
    ) -> bool:
        """Fold one transaction in. Returns True when phone is new to the week."""
        newly_eligible = phone not in self.customer_expense_map
        if newly_eligible:
            self.total_eligible_customers += 1.0
            self.customer_expense_map[phone] = {}

        days = self.customer_expense_map[phone]
        rendered = format_amount(final_amount)
        existing = days.get(day, "")
        days[day] = f"{existing},{rendered}" if existing else rendered

        self.total_pooled_amount += pooled_contribution
        self.total_discount_given += discount
        return newly_eligible

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_pooled_amount": self.total_pooled_amount,
            "total_eligible_customers": self.total_eligible_customers,
            "total_discount_given": self.total_discount_given,
            "customer_expense_map": {
                phone: dict(days)
                for phone, days in self.customer_expense_map.items()
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), allow_nan=False)

    @classmethod
    def from_dict(cls, data: Any) -> "WeeklyLedger":
        """Build from decoded JSON. Raises ValueError on any shape mismatch."""
        if not isinstance(data, dict):
            raise ValueError("ledger must be a JSON object")
        missing = [name for name in _FIELDS if name not in data]
        if missing:
            raise ValueError(f"ledger missing fields: {', '.join(missing)}")

        return cls(
            total_pooled_amount=_as_float(data, "total_pooled_amount"),
            total_eligible_customers=_as_float(data, "total_eligible_customers"),
            total_discount_given=_as_float(data, "total_discount_given"),
            customer_expense_map=_as_expense_map(data["customer_expense_map"]),
        )

    @classmethod
    def from_json(cls, raw: str) -> "WeeklyLedger":
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            raise ValueError(f"ledger is not valid JSON: {e}") from e
        return cls.from_dict(data)


def _as_float(data: dict, name: str) -> float:
    value = data[name]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number")
    try:
        number = float(value)
    except OverflowError as e:
        raise ValueError(f"{name} is out of range") from e
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite")
    return number


def _as_expense_map(value: Any) -> dict[str, dict[str, str]]:
    if not isinstance(value, dict):
        raise ValueError("customer_expense_map must be an object")
    result: dict[str, dict[str, str]] = {}
    for phone, days in value.items():
        if not isinstance(days, dict):
            raise ValueError(f"expense days for {phone} must be an object")
        for day, amounts in days.items():
            if not isinstance(amounts, str):
                raise ValueError(f"amounts for {phone} on {day} must be a string")
        result[phone] = dict(days)
    return result
