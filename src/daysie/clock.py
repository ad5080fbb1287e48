"""Time sources used to resolve relative expressions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class Clock(ABC):
    """Supplies the "current instant" for relative expressions.

    Implementations must be safe to call from several threads; a resolver
    shares its clock across every parse call.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return the current naive local date-time."""


class SystemClock(Clock):
    """Reads the local wall clock."""

    def now(self) -> datetime:
        return datetime.now()

    def __repr__(self) -> str:
        return "SystemClock()"


class FixedClock(Clock):
    """Always returns the same instant. Intended for tests and replays."""

    def __init__(self, instant: datetime):
        # Naive local instants only
        if instant.tzinfo is not None:
            instant = instant.replace(tzinfo=None)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def __repr__(self) -> str:
        return f"FixedClock({self._instant.isoformat()})"
