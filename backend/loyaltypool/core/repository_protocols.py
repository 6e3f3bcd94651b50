"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations (store round trips, reading the wall clock) go through Protocols
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass plain fakes
    - Async in LedgerStore: implementations do network IO, but the core rules that
      consume the loaded values are never async themselves
"""

from datetime import datetime
from typing import Protocol


class LedgerStore(Protocol):
    """Key/value persistence used for tokens, weekly ledgers, and feedback.

    No transactions and no locking: single keys are read then written.
    An empty string from get() is treated the same as an absent key.
    """
    async def exists(self, key: str) -> bool: ...
    async def get(self, key: str) -> str | None: ...
    async def set(self, key: str, value: str) -> None: ...


class Clock(Protocol):
    """Source of the current instant (timezone-aware, UTC)."""
    def now(self) -> datetime: ...
