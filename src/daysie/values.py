"""Temporal value model.

The resolver produces one of two immutable shapes:

- :class:`Range`: an interval whose bounds are individually inclusive or
  exclusive. Open ends are represented by the :data:`MIN_INSTANT` and
  :data:`MAX_INSTANT` sentinels.
- :class:`Point`: a single instant. Points produced by collapsing a range
  ("start of last week") are tagged ``is_range_boundary`` and remember the
  inclusivity of the endpoint they came from.

``str()`` gives the canonical interval rendering, e.g.
``[2026-02-02T00:00,2026-02-09T00:00)`` or ``[2026-02-13T00:00, ∞)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

from daysie.exceptions import InvalidRangeError


MIN_INSTANT = datetime.min
"""Sentinel for an unbounded start."""

MAX_INSTANT = datetime.max
"""Sentinel for an unbounded end."""


def format_instant(instant: datetime) -> str:
    """Render an instant as ``YYYY-MM-DDTHH:MM[:SS[.fff|.ffffff]]``."""
    text = instant.strftime("%Y-%m-%dT%H:%M")
    if instant.second or instant.microsecond:
        text += f":{instant.second:02d}"
    if instant.microsecond:
        if instant.microsecond % 1000 == 0:
            text += f".{instant.microsecond // 1000:03d}"
        else:
            text += f".{instant.microsecond:06d}"
    return text


def _iso_or_none(instant: datetime, sentinel: datetime) -> Optional[str]:
    return None if instant == sentinel else instant.isoformat()


@dataclass(frozen=True)
class Range:
    """Interval with independently inclusive or exclusive bounds."""

    start: datetime
    end: datetime
    start_inclusive: bool = True
    end_inclusive: bool = False

    def __post_init__(self) -> None:
        if self.is_bounded and self.start > self.end:
            raise InvalidRangeError(self.start, self.end)

    @property
    def is_open_start(self) -> bool:
        return self.start == MIN_INSTANT

    @property
    def is_open_end(self) -> bool:
        return self.end == MAX_INSTANT

    @property
    def is_bounded(self) -> bool:
        """True when neither end is a sentinel."""
        return not (self.is_open_start or self.is_open_end)

    def contains(self, instant: datetime) -> bool:
        """Check whether ``instant`` falls inside the interval."""
        if not self.is_open_start:
            if instant < self.start or (instant == self.start and not self.start_inclusive):
                return False
        if not self.is_open_end:
            if instant > self.end or (instant == self.end and not self.end_inclusive):
                return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON hosts. Open ends become ``None``."""
        return {
            "type": "range",
            "start": _iso_or_none(self.start, MIN_INSTANT),
            "end": _iso_or_none(self.end, MAX_INSTANT),
            "start_inclusive": self.start_inclusive,
            "end_inclusive": self.end_inclusive,
        }

    def __str__(self) -> str:
        start_bracket = "[" if self.start_inclusive else "("
        end_bracket = "]" if self.end_inclusive else ")"
        start = "-∞" if self.is_open_start else format_instant(self.start)
        end = " ∞" if self.is_open_end else format_instant(self.end)
        return f"{start_bracket}{start},{end}{end_bracket}"


@dataclass(frozen=True)
class Point:
    """A single instant.

    ``is_range_boundary`` marks points derived from a range via "start of" /
    "end of"; ``inclusive`` then carries the inclusivity of that endpoint so
    open-bound operators can honour it.
    """

    instant: datetime
    is_range_boundary: bool = False
    inclusive: bool = True

    def contains(self, instant: datetime) -> bool:
        return instant == self.instant

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "point",
            "instant": self.instant.isoformat(),
            "is_range_boundary": self.is_range_boundary,
            "inclusive": self.inclusive,
        }

    def __str__(self) -> str:
        text = format_instant(self.instant)
        return f"[{text},{text}]"


TemporalValue = Union[Range, Point]
