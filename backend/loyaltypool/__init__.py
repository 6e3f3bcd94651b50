"""Loyalty Pool Package — pooled weekly loyalty discounts behind scoped tokens.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
