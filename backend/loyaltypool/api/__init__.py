"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes never contain discount or token logic

Design Decisions:
    - Thin routes delegate to services
"""
