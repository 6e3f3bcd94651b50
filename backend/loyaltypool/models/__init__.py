"""ORM Models — SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)
    - Ledger data is stored as opaque key/value rows; shape lives in core/

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all
"""

from loyaltypool.models.ledger_entry import LedgerEntry  # noqa: F401
