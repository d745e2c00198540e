"""System clock adapter - Implements Clock protocol."""

from datetime import UTC, datetime


class SystemClock:
    """Returns the current UTC time."""

    def now(self) -> datetime:
        return datetime.now(UTC)
