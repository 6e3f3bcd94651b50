"""Service Layer — orchestrates Ledger Store IO around the pure core rules.

Invariants:
    - Services never format HTTP responses (routes do)
    - Every "now" comes from the injected Clock
"""
