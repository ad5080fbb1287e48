"""Calendar arithmetic for relative expressions.

Computes calendar-aligned "last / this / next" ranges and "ago / from now"
points from a unit, an amount and the current instant. Every unit is
described once in ``_RULES`` (alignment + step); the three directional
families share that table instead of branching per unit.

Alignment conventions:
- weeks start on Monday
- quarters start in January, April, July and October
- sub-day units (second, minute, hour) roll from ``now`` rather than from
  an aligned boundary
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from typing import Callable, Dict, Union

from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta

from daysie.exceptions import UnsupportedUnitError
from daysie.values import Point, Range


class ChronoUnit(str, Enum):
    """Calendar units understood by the calculator.

    Quarters are not a unit of their own: they are MONTH with a quarter
    interpretation, selected by the keyword that matched.
    """

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class Weekday(IntEnum):
    """Days of the week, numbered like ``datetime.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


_RD_WEEKDAYS = (MO, TU, WE, TH, FR, SA, SU)

QUARTER = "quarter"


# ---------------------------------------------------------------------------
# Alignment helpers
# ---------------------------------------------------------------------------


def start_of_day(instant: datetime) -> datetime:
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(instant: datetime) -> datetime:
    return start_of_day(instant) + relativedelta(weekday=MO(-1))


def start_of_month(instant: datetime) -> datetime:
    return start_of_day(instant).replace(day=1)


def start_of_quarter(instant: datetime) -> datetime:
    """First day of the quarter containing ``instant`` (Jan/Apr/Jul/Oct)."""
    month = ((instant.month - 1) // 3) * 3 + 1
    return start_of_month(instant).replace(month=month)


def start_of_year(instant: datetime) -> datetime:
    return start_of_month(instant).replace(month=1)


def iso_week_start(year: int, week: int) -> datetime:
    """Monday of ISO week ``week``; week 1 is the week containing January 4th."""
    if not 1 <= week <= 53:
        raise ValueError(f"ISO week out of range: {week}")
    first_monday = datetime(year, 1, 4) + relativedelta(weekday=MO(-1))
    start = first_monday + relativedelta(weeks=week - 1)
    if start.isocalendar()[1] != week:
        raise ValueError(f"{year} has no ISO week {week}")
    return start


@dataclass(frozen=True)
class _UnitRule:
    """How one unit aligns and steps.

    rolling: ``last``/``next`` ranges are anchored on ``now`` itself
    sub_day: ``last`` ranges end at ``now`` and ``next`` ranges start at it
    """

    align: Callable[[datetime], datetime]
    step: relativedelta
    rolling: bool = False
    sub_day: bool = False


_RULES: Dict[Union[ChronoUnit, str], _UnitRule] = {
    ChronoUnit.SECOND: _UnitRule(
        align=lambda t: t.replace(microsecond=0),
        step=relativedelta(seconds=1),
        rolling=True,
        sub_day=True,
    ),
    ChronoUnit.MINUTE: _UnitRule(
        align=lambda t: t.replace(second=0, microsecond=0),
        step=relativedelta(minutes=1),
        rolling=True,
        sub_day=True,
    ),
    ChronoUnit.HOUR: _UnitRule(
        align=lambda t: t.replace(minute=0, second=0, microsecond=0),
        step=relativedelta(hours=1),
        rolling=True,
        sub_day=True,
    ),
    ChronoUnit.DAY: _UnitRule(align=start_of_day, step=relativedelta(days=1), sub_day=True),
    ChronoUnit.WEEK: _UnitRule(align=start_of_week, step=relativedelta(weeks=1)),
    ChronoUnit.MONTH: _UnitRule(align=start_of_month, step=relativedelta(months=1)),
    QUARTER: _UnitRule(align=start_of_quarter, step=relativedelta(months=3)),
    ChronoUnit.YEAR: _UnitRule(align=start_of_year, step=relativedelta(years=1)),
}


def _rule(unit: ChronoUnit, is_quarter: bool, operation: str) -> _UnitRule:
    key = QUARTER if is_quarter and unit == ChronoUnit.MONTH else unit
    try:
        return _RULES[key]
    except (KeyError, TypeError):
        raise UnsupportedUnitError(unit, operation) from None


# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------


def calculate_last_range(
    now: datetime, unit: ChronoUnit, amount: int, is_quarter: bool = False
) -> Range:
    """Range covering the ``amount`` periods before the current one.

    "last 2 weeks" ends at this week's Monday. Sub-day units end at ``now``,
    so "last 3 days" runs from midnight three days ago until now.
    """
    rule = _rule(unit, is_quarter, "last")
    anchor = now if rule.rolling else rule.align(now)
    end = now if rule.sub_day else anchor
    return Range(anchor - rule.step * amount, end, True, False)


def calculate_this_range(
    now: datetime, unit: ChronoUnit, amount: int, is_quarter: bool = False
) -> Range:
    """Range of ``amount`` periods ending with the one that contains ``now``."""
    rule = _rule(unit, is_quarter, "this")
    current = rule.align(now)
    return Range(current - rule.step * (amount - 1), current + rule.step, True, False)


def calculate_next_range(
    now: datetime, unit: ChronoUnit, amount: int, is_quarter: bool = False
) -> Range:
    """Range of ``amount`` periods after the current one.

    Sub-day units start at ``now``; "next 2 days" runs until midnight two
    days after today. Larger units start at the next aligned boundary.
    """
    rule = _rule(unit, is_quarter, "next")
    if rule.rolling:
        return Range(now, now + rule.step * amount, True, False)
    current = rule.align(now)
    start = now if rule.sub_day else current + rule.step
    return Range(start, current + rule.step * (amount + 1), True, False)


# ---------------------------------------------------------------------------
# Points
# ---------------------------------------------------------------------------


def calculate_ago_point(
    now: datetime, unit: ChronoUnit, amount: int, is_quarter: bool = False
) -> Point:
    """``now`` minus ``amount`` units, calendar-correct for months and years."""
    rule = _rule(unit, is_quarter, "ago")
    return Point(now - rule.step * amount)


def calculate_from_now_point(
    now: datetime, unit: ChronoUnit, amount: int, is_quarter: bool = False
) -> Point:
    rule = _rule(unit, is_quarter, "from now")
    return Point(now + rule.step * amount)


def most_recent_weekday(now: datetime, weekday: Weekday) -> datetime:
    """Midnight of the latest ``weekday`` on or before today."""
    return start_of_day(now) + relativedelta(weekday=_RD_WEEKDAYS[weekday](-1))


def previous_weekday(now: datetime, weekday: Weekday) -> datetime:
    """Midnight of the latest ``weekday`` strictly before today."""
    return start_of_day(now) + relativedelta(days=-1, weekday=_RD_WEEKDAYS[weekday](-1))


def upcoming_weekday(now: datetime, weekday: Weekday) -> datetime:
    """Midnight of the first ``weekday`` on or after today."""
    return start_of_day(now) + relativedelta(weekday=_RD_WEEKDAYS[weekday](+1))


def following_weekday(now: datetime, weekday: Weekday) -> datetime:
    """Midnight of the first ``weekday`` strictly after today."""
    return start_of_day(now) + relativedelta(days=+1, weekday=_RD_WEEKDAYS[weekday](+1))


def calculate_day_of_week_ago(now: datetime, weekday: Weekday, amount: int) -> Point:
    """``weekday`` on or before today, stepped back ``amount - 1`` more weeks."""
    target = most_recent_weekday(now, weekday) - relativedelta(weeks=amount - 1)
    return Point(target)


def calculate_day_of_week_from_now(now: datetime, weekday: Weekday, amount: int) -> Point:
    target = upcoming_weekday(now, weekday) + relativedelta(weeks=amount - 1)
    return Point(target)
