"""Grammar and resolver for temporal expressions.

:class:`TemporalResolver` builds one grammar per (keyword configuration,
clock) pair and resolves strings such as "last 3 days", "since yesterday",
"between 2026-01-01 and end of next month" or "gisteren tot vandaag" into a
:class:`~daysie.values.Range` or :class:`~daysie.values.Point`.

Grammar layers, lowest first:

1. primitives: ISO date, ISO date-time, ISO week, year-month, time of day
2. fixed relative days and weekday names
3. relative points ("3 days ago", "in 2 weeks", "2 fridays from now")
4. generalized relative ranges ("last 3 months", "next quarter", "this week")
5. relative point + time ("yesterday at 10:00")
6. absolute date-time ("now", ISO literals, bare time)
7. modifiers ("start of", "end of", "first day of", "last day of", "between")
8. range connectors ("A to B")
9. open bounds ("until X", "after X")

Within every alternation the branch consuming the most input wins.

The module-level functions :func:`start_of`, :func:`end_of`,
:func:`first_day_of`, :func:`last_day_of`, :func:`between`, :func:`connect`,
:func:`until_bound` and :func:`from_bound` implement the boundary rules the
grammar applies. Each of them keeps track of whether an endpoint was open or
closed when a range collapses to a point or a point widens to a range.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta
from functools import lru_cache
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

from daysie import calculator
from daysie.calculator import start_of_day
from daysie.clock import Clock, SystemClock
from daysie.grammar import (
    WHITESPACE,
    WHITESPACE1,
    Parser,
    Reference,
    keyword,
    longest,
    regex,
    sequence,
    token,
)
from daysie.keywords import ENGLISH, KeywordConfiguration
from daysie.values import MAX_INSTANT, MIN_INSTANT, Point, Range, TemporalValue

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


# ---------------------------------------------------------------------------
# Boundary rules
# ---------------------------------------------------------------------------


def _lower(value: TemporalValue) -> Tuple[datetime, bool]:
    if isinstance(value, Range):
        return value.start, value.start_inclusive
    return value.instant, value.inclusive


def start_of(value: TemporalValue) -> Point:
    """Collapse ``value`` to its start, keeping the start's inclusivity."""
    if isinstance(value, Point):
        return value
    return Point(value.start, is_range_boundary=True, inclusive=value.start_inclusive)


def end_of(value: TemporalValue) -> Point:
    """Collapse ``value`` to its end, keeping the end's inclusivity."""
    if isinstance(value, Point):
        return value
    return Point(value.end, is_range_boundary=True, inclusive=value.end_inclusive)


def first_day_of(value: TemporalValue) -> Range:
    """One-day range containing the start of ``value``."""
    anchor, _ = _lower(value)
    day = start_of_day(anchor)
    return Range(day, day + ONE_DAY, True, False)


def last_day_of(value: TemporalValue) -> Range:
    """Range from the start of the last calendar day of ``value`` to its end."""
    if isinstance(value, Range):
        end, inclusive = value.end, value.end_inclusive
    else:
        end, inclusive = start_of_day(value.instant) + ONE_DAY, False
    day = start_of_day(end)
    if day == end:
        day -= ONE_DAY
    return Range(day, end, True, inclusive)


def between(first: TemporalValue, second: TemporalValue) -> Range:
    """Range for "between A and B": from A's start through B's end, end closed."""
    start, start_inclusive = _lower(first)
    end = second.end if isinstance(second, Range) else second.instant
    return Range(start, end, start_inclusive, True)


def connect(first: TemporalValue, second: TemporalValue, inclusive: bool) -> Range:
    """Range for "A to B" with an inclusive or exclusive connector keyword.

    An inclusive connector runs through B's end (keeping B's flag); an
    exclusive one stops just before B starts.
    """
    start, start_inclusive = _lower(first)
    if isinstance(second, Range):
        if inclusive:
            end, end_inclusive = second.end, second.end_inclusive
        else:
            end, end_inclusive = second.start, False
    elif second.is_range_boundary:
        end, end_inclusive = second.instant, second.inclusive and inclusive
    else:
        end, end_inclusive = second.instant, inclusive
    return Range(start, end, start_inclusive, end_inclusive)


def until_bound(value: TemporalValue, inclusive: bool) -> Range:
    """Open-start range up to ``value``.

    With an inclusive keyword a range operand contributes its end and that
    end's flag; with an exclusive keyword it contributes its start, flipped.
    A boundary point keeps its own flag unless the keyword is exclusive.
    """
    if isinstance(value, Range):
        if inclusive:
            end, end_inclusive = value.end, value.end_inclusive
        else:
            end, end_inclusive = value.start, not value.start_inclusive
    elif value.is_range_boundary:
        end, end_inclusive = value.instant, value.inclusive and inclusive
    else:
        end, end_inclusive = value.instant, inclusive
    return Range(MIN_INSTANT, end, False, end_inclusive)


def from_bound(value: TemporalValue, inclusive: bool) -> Range:
    """Open-end range starting at ``value``; mirror image of :func:`until_bound`."""
    if isinstance(value, Range):
        if inclusive:
            start, start_inclusive = value.start, value.start_inclusive
        else:
            start, start_inclusive = value.end, not value.end_inclusive
    elif value.is_range_boundary:
        start, start_inclusive = value.instant, value.inclusive and inclusive
    else:
        start, start_inclusive = value.instant, inclusive
    return Range(start, MAX_INSTANT, start_inclusive, False)


def after_day(value: TemporalValue) -> Range:
    """Open-end range starting right after a date-like ``value``."""
    if isinstance(value, Range):
        return Range(value.end, MAX_INSTANT, not value.end_inclusive, False)
    return Range(start_of_day(value.instant) + ONE_DAY, MAX_INSTANT, True, False)


def _date_of(value: TemporalValue) -> datetime:
    anchor, _ = _lower(value)
    return start_of_day(anchor)


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class TemporalResolver:
    """Parses temporal expressions against a keyword vocabulary and a clock.

    The grammar is assembled once in the constructor and never mutated, so a
    single resolver can be shared between threads as long as its clock is
    thread-safe.

    Example:
        >>> resolver = TemporalResolver(ENGLISH, FixedClock(datetime(2026, 2, 14, 10)))
        >>> str(resolver.parse("since yesterday"))
        '[2026-02-13T00:00, ∞)'
    """

    def __init__(self, config: KeywordConfiguration = ENGLISH, clock: Optional[Clock] = None):
        self._keywords = config
        self._clock = clock or SystemClock()
        self._component = self._build()
        self._whole = self._component.followed_by_end()
        logger.debug(
            f"Built temporal grammar: {len(config.chrono_units)} unit aliases, "
            f"{len(config.days_of_week)} weekday aliases, clock={self._clock!r}"
        )

    @property
    def keywords(self) -> KeywordConfiguration:
        return self._keywords

    @property
    def clock(self) -> Clock:
        return self._clock

    def parse(self, text: str) -> TemporalValue:
        """Resolve the whole of ``text``.

        Raises:
            ExpressionSyntaxError: if no alternative matches or input remains
        """
        value = self._whole.parse(text)
        logger.debug(f"Resolved {text!r} -> {value}")
        return value

    def parse_component(self, text: str) -> Tuple[TemporalValue, int]:
        """Resolve the longest expression at the start of ``text``.

        Trailing unconsumed text is tolerated, which lets hosts embed the
        grammar inside a larger query language.

        Returns:
            The value and the number of characters consumed
        """
        return self._component.parse_prefix(text)

    # -- helpers -----------------------------------------------------------

    def _now(self) -> datetime:
        return self._clock.now()

    def _today(self) -> datetime:
        return start_of_day(self._now())

    # -- grammar -----------------------------------------------------------

    def _build(self) -> Parser:
        kw = self._keywords

        number = token(r"0*[1-9]\d*", "number").map(int)
        unit = self._unit_parser()
        weekday = keyword(kw.days_of_week.keys(), "weekday").map(kw.days_of_week.__getitem__)
        time_of_day = self._time_parser()
        at = keyword(kw.at, "'at'")

        # Layer 1-2
        date_only, relative_date = self._date_parsers(weekday)

        # Layer 3
        relative_point = self._relative_point_parser(number, unit, weekday)

        # Layer 4
        amount_unit = longest(
            sequence(number, WHITESPACE, unit, combine=lambda amount, _, info: (amount, info)),
            unit.map(lambda info: (1, info)),
        )
        trailing_time = sequence(WHITESPACE, at.optional(), WHITESPACE, time_of_day)
        generalized_last = self._generalized(kw.last, "'last'", amount_unit, trailing_time, calculator.calculate_last_range)
        generalized_next = self._generalized(kw.next, "'next'", amount_unit, trailing_time, calculator.calculate_next_range)
        generalized_this = self._generalized(kw.current, "'this'", amount_unit, trailing_time, calculator.calculate_this_range)

        # Layer 5
        relative_point_with_time = sequence(
            longest(relative_date, relative_point),
            WHITESPACE1,
            at.optional(),
            WHITESPACE,
            time_of_day,
            combine=lambda value, _, __, ___, t: Point(datetime.combine(_date_of(value).date(), t)),
        )

        # Layer 6
        absolute = self._absolute_parser(date_only, time_of_day)

        # Layer 7
        final_ref = Reference("expression")
        final = final_ref.lazy()

        base = longest(
            generalized_last,
            generalized_next,
            generalized_this,
            relative_point_with_time,
            relative_point,
            relative_date,
            absolute,
        )

        def modifier(words, label, fn) -> Parser:
            return sequence(keyword(words, label), WHITESPACE1, base, combine=lambda _, __, value: fn(value))

        between_parser = sequence(
            keyword(kw.between, "'between'"),
            WHITESPACE1,
            final,
            WHITESPACE1,
            keyword(kw.and_, "'and'"),
            WHITESPACE1,
            final,
            combine=lambda _, __, first, ___, ____, _____, second: between(first, second),
        )

        final_ref.set(
            longest(
                modifier(kw.start_of, "'start of'", start_of),
                modifier(kw.end_of, "'end of'", end_of),
                modifier(kw.first_day_of, "'first day of'", first_day_of),
                modifier(kw.last_day_of, "'last day of'", last_day_of),
                between_parser,
                relative_point_with_time,
                relative_point,
                relative_date,
                generalized_last,
                generalized_next,
                generalized_this,
                absolute,
            )
        )

        # Layer 8
        range_parser = sequence(
            final,
            WHITESPACE,
            keyword(kw.range_connectors_inclusive | kw.range_connectors_exclusive, "range connector"),
            WHITESPACE,
            final,
            combine=lambda first, _, op, __, second: connect(
                first, second, op in kw.range_connectors_inclusive
            ),
        )

        # Layer 9
        until_parser = sequence(
            keyword(kw.until_inclusive | kw.until_exclusive, "until keyword"),
            WHITESPACE,
            final,
            combine=lambda op, _, value: until_bound(value, op in kw.until_inclusive),
        )
        exclusive_from = sequence(
            keyword(kw.from_exclusive, "from keyword"),
            WHITESPACE,
            date_only,
            combine=lambda _, __, value: after_day(value),
        )
        inclusive_from = sequence(
            keyword(kw.from_inclusive, "from keyword"),
            WHITESPACE,
            final,
            combine=lambda _, __, value: from_bound(value, True),
        )
        # Date-only operands after an exclusive keyword belong to exclusive_from
        general_from = sequence(
            keyword(kw.from_exclusive, "from keyword"),
            WHITESPACE,
            final.excluding(date_only),
            combine=lambda _, __, value: from_bound(value, False),
        )

        return sequence(
            WHITESPACE,
            longest(range_parser, until_parser, exclusive_from, inclusive_from, general_from, final),
            WHITESPACE,
            combine=lambda _, value, __: value,
        )

    def _unit_parser(self) -> Parser:
        kw = self._keywords
        return keyword(kw.chrono_units.keys(), "unit").map(
            lambda alias: (kw.chrono_units[alias], alias in kw.quarters)
        )

    def _time_parser(self) -> Parser:
        kw = self._keywords

        time24 = regex(r"(\d{2}):(\d{2})(?::(\d{2}))?", "time").map(
            lambda m: time(int(m.group(1)), int(m.group(2)), int(m.group(3) or 0))
        )

        def to_12h(match, _, marker) -> time:
            hour = int(match.group(1))
            if hour > 12:
                raise ValueError(f"Hour {hour} is not a 12-hour clock value")
            is_am = marker in kw.am
            if not is_am and hour < 12:
                hour += 12
            if is_am and hour == 12:
                hour = 0
            return time(hour, int(match.group(2) or 0), int(match.group(3) or 0))

        time12 = sequence(
            regex(r"(\d{1,2})(?::(\d{2}))?(?::(\d{2}))?", "time"),
            WHITESPACE,
            keyword(kw.am | kw.pm, "am/pm"),
            combine=to_12h,
        )
        return longest(time24, time12, label="time")

    def _date_parsers(self, weekday: Parser) -> Tuple[Parser, Parser]:
        """Date-only primitives and fixed relative days (layers 1-2)."""
        kw = self._keywords

        iso_date = regex(r"(\d{4})-(\d{2})-(\d{2})", "date").map(
            lambda m: datetime(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        )
        # A bare date must not be the head of a date-time
        bare_date = iso_date.not_followed_by(regex(r"\s*\d", "digit")).map(Point)

        def week_range(m) -> Range:
            start = calculator.iso_week_start(int(m.group(1)), int(m.group(2)))
            return Range(start, start + timedelta(weeks=1), True, False)

        iso_week = regex(r"(\d{4})-W(\d{1,2})(?!\d)", "ISO week").map(week_range)

        def month_range(m) -> Range:
            start = datetime(int(m.group(1)), int(m.group(2)), 1)
            return Range(start, start + relativedelta(months=1), True, False)

        year_month = regex(r"(\d{4})-(\d{2})(?!\d|-\d{2}(?!\d))", "year-month").map(month_range)

        offsets = {}
        for words, offset in (
            (kw.day_before_yesterday, -2),
            (kw.yesterday, -1),
            (kw.today, 0),
            (kw.tomorrow, 1),
            (kw.day_after_tomorrow, 2),
        ):
            offsets.update({word: offset for word in words})
        fixed_day = keyword(offsets.keys(), "relative day").map(
            lambda word: Point(self._today() + timedelta(days=offsets[word]))
        )
        bare_weekday = weekday.map(lambda day: Point(calculator.most_recent_weekday(self._now(), day)))
        next_weekday = sequence(
            keyword(kw.next, "'next'"),
            WHITESPACE1,
            weekday,
            combine=lambda _, __, day: Point(calculator.following_weekday(self._now(), day)),
        )
        last_weekday = sequence(
            keyword(kw.last, "'last'"),
            WHITESPACE1,
            weekday,
            combine=lambda _, __, day: Point(calculator.previous_weekday(self._now(), day)),
        )
        relative_date = longest(fixed_day, bare_weekday, next_weekday, last_weekday)

        date_only = longest(bare_date, iso_week, year_month, relative_date)
        return date_only, relative_date

    def _relative_point_parser(self, number: Parser, unit: Parser, weekday: Parser) -> Parser:
        """Relative points: "3 days ago", "in 5 minutes", "2 mondays ago" (layer 3)."""
        kw = self._keywords
        amount = number.optional(1)
        ago = keyword(kw.ago, "'ago'")
        from_now = keyword(kw.from_now, "'from now'")

        def offset(direction_words, fn) -> Parser:
            return sequence(
                amount,
                WHITESPACE,
                unit,
                WHITESPACE1,
                direction_words,
                combine=lambda n, _, info, __, ___: fn(self._now(), info[0], n, info[1]),
            )

        def weekday_offset(direction_words, fn) -> Parser:
            return sequence(
                amount,
                WHITESPACE,
                weekday,
                WHITESPACE,
                direction_words,
                combine=lambda n, _, day, __, ___: fn(self._now(), day, n),
            )

        in_parser = sequence(
            keyword(kw.in_, "'in'"),
            WHITESPACE1,
            amount,
            WHITESPACE,
            unit,
            combine=lambda _, __, n, ___, info: calculator.calculate_from_now_point(
                self._now(), info[0], n, info[1]
            ),
        )

        return longest(
            weekday_offset(ago, calculator.calculate_day_of_week_ago),
            weekday_offset(from_now, calculator.calculate_day_of_week_from_now),
            offset(ago, calculator.calculate_ago_point),
            offset(from_now, calculator.calculate_from_now_point),
            in_parser,
        )

    def _generalized(self, words, label, amount_unit, trailing_time, fn) -> Parser:
        """Generalized "last/next/this [n] <unit>" (layer 4); never followed by a time."""
        return sequence(
            keyword(words, label),
            WHITESPACE1,
            amount_unit,
            combine=lambda _, __, amount_info: fn(
                self._now(), amount_info[1][0], amount_info[0], amount_info[1][1]
            ),
        ).not_followed_by(trailing_time)

    def _absolute_parser(self, date_only: Parser, time_of_day: Parser) -> Parser:
        """Absolute forms: "now", ISO date-time, date-only forms and bare times (layer 6)."""
        kw = self._keywords
        now = keyword(kw.now, "'now'").map(lambda _: Point(self._now()))
        date_time = sequence(
            regex(r"(\d{4})-(\d{2})-(\d{2})", "date"),
            longest(WHITESPACE1, regex("T", "'T'")),
            time_of_day,
            combine=lambda m, _, t: Point(
                datetime.combine(datetime(int(m.group(1)), int(m.group(2)), int(m.group(3))).date(), t)
            ),
        )
        time_only = time_of_day.map(lambda t: Point(datetime.combine(self._today().date(), t)))
        return longest(now, date_time, date_only, time_only)


@lru_cache(maxsize=1)
def default_resolver() -> TemporalResolver:
    """English resolver on the system clock, built on first use."""
    return TemporalResolver()


def parse(text: str) -> TemporalValue:
    """Resolve ``text`` with :func:`default_resolver`."""
    return default_resolver().parse(text)
