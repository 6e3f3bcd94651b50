"""Infrastructure Layer — database, Ledger Store, clock, and logging.

Invariants:
    - Infrastructure never imports core/ rule modules, only protocols and errors
    - All SQLAlchemy failures mapped to StoreError (core/errors.py)

Design Decisions:
    - Thin adapters over raw clients; retries are deliberately absent (callers decide)
"""
