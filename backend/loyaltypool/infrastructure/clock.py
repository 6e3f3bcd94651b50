"""System Clock — wall-clock implementation of the core Clock protocol."""

from datetime import datetime, timezone


class SystemClock:
    """Current instant in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
