"""
Clock -- injectable time source.

Responsibility:
    ``ReportSession`` stamps ``ReportMetadata.generated_at`` from a Clock
    instead of calling ``datetime.now()`` itself.

Architecture position:
    Kernel > Domain -- pure, zero I/O except SystemClock.

Audit relevance:
    With a DeterministicClock two builds over identical entries render
    identically, metadata included.
"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime, timedelta


class Clock(ABC):
    """Source of timezone-aware "now" values."""

    @abstractmethod
    def now(self) -> datetime:
        ...


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(UTC)


class DeterministicClock(Clock):
    """
    Clock frozen at ``start`` (default 2024-01-01 12:00 UTC).

    Time only moves when ``advance`` is called.
    """

    def __init__(self, start: datetime | None = None):
        self._now = start or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: int = 1) -> None:
        self._now += timedelta(seconds=seconds)
