"""Per-language keyword vocabularies.

A :class:`KeywordConfiguration` is plain data: named keyword sets plus two
lookup maps (unit names and weekday names). Languages are instances, not
subclasses; :meth:`KeywordConfiguration.combine` merges several of them so a
single resolver accepts all of those languages at once.

Keywords are case-insensitive. They are stored lower-cased with internal
whitespace collapsed to single spaces.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, FrozenSet, Iterable, List, Sequence, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from daysie.calculator import ChronoUnit, Weekday
from daysie.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def normalize_keyword(keyword: str) -> str:
    """Lower-case ``keyword`` and collapse runs of whitespace."""
    return " ".join(keyword.split()).lower()


class KeywordConfiguration(BaseModel):
    """Immutable keyword vocabulary for one or more languages."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Open bounds and range connectors
    until_inclusive: FrozenSet[str] = frozenset()
    until_exclusive: FrozenSet[str] = frozenset()
    from_inclusive: FrozenSet[str] = frozenset()
    from_exclusive: FrozenSet[str] = frozenset()
    range_connectors_inclusive: FrozenSet[str] = frozenset()
    range_connectors_exclusive: FrozenSet[str] = frozenset()

    # Fixed relative days
    today: FrozenSet[str] = frozenset()
    yesterday: FrozenSet[str] = frozenset()
    tomorrow: FrozenSet[str] = frozenset()
    day_before_yesterday: FrozenSet[str] = frozenset()
    day_after_tomorrow: FrozenSet[str] = frozenset()

    # Relative ranges and points
    last: FrozenSet[str] = frozenset()
    next: FrozenSet[str] = frozenset()
    current: FrozenSet[str] = frozenset()
    ago: FrozenSet[str] = frozenset()
    from_now: FrozenSet[str] = frozenset()
    in_: FrozenSet[str] = Field(default=frozenset(), alias="in")

    # Times
    at: FrozenSet[str] = frozenset()
    now: FrozenSet[str] = frozenset()
    am: FrozenSet[str] = frozenset()
    pm: FrozenSet[str] = frozenset()

    # Modifiers
    start_of: FrozenSet[str] = frozenset()
    end_of: FrozenSet[str] = frozenset()
    first_day_of: FrozenSet[str] = frozenset()
    last_day_of: FrozenSet[str] = frozenset()
    between: FrozenSet[str] = frozenset()
    and_: FrozenSet[str] = Field(default=frozenset(), alias="and")

    # Unit aliases that mean "quarter" (MONTH x 3)
    quarters: FrozenSet[str] = frozenset()

    chrono_units: Dict[str, ChronoUnit] = Field(default_factory=dict)
    days_of_week: Dict[str, Weekday] = Field(default_factory=dict)

    @field_validator("*", mode="before")
    @classmethod
    def _normalize(cls, value):
        if isinstance(value, dict):
            return {normalize_keyword(k): v for k, v in value.items()}
        if isinstance(value, (set, frozenset, list, tuple)):
            return frozenset(normalize_keyword(k) for k in value)
        return value

    @classmethod
    def keyword_fields(cls) -> List[str]:
        """Names of every keyword-set field (excludes the two maps)."""
        return [name for name in cls.model_fields if name not in ("chrono_units", "days_of_week")]

    def is_quarter(self, alias: str) -> bool:
        return normalize_keyword(alias) in self.quarters

    @classmethod
    def combine(cls, configs: Sequence["KeywordConfiguration"]) -> "KeywordConfiguration":
        """Merge several vocabularies into one.

        Keyword sets are unioned. The unit and weekday maps are merged in
        order, so a later configuration wins when two define the same alias;
        such overrides are logged but not rejected.
        """
        sets: Dict[str, Set[str]] = {name: set() for name in cls.keyword_fields()}
        chrono_units: Dict[str, ChronoUnit] = {}
        days_of_week: Dict[str, Weekday] = {}

        for config in configs:
            for name in sets:
                sets[name].update(getattr(config, name))
            for alias, unit in config.chrono_units.items():
                previous = chrono_units.get(alias)
                if previous is not None and previous != unit:
                    logger.warning(
                        f"Unit alias '{alias}' redefined: {previous.value} -> {unit.value}"
                    )
                chrono_units[alias] = unit
            for alias, day in config.days_of_week.items():
                previous_day = days_of_week.get(alias)
                if previous_day is not None and previous_day != day:
                    logger.warning(
                        f"Weekday alias '{alias}' redefined: {previous_day.name} -> {day.name}"
                    )
                days_of_week[alias] = day

        return cls(
            **{name: frozenset(values) for name, values in sets.items()},
            chrono_units=chrono_units,
            days_of_week=days_of_week,
        )


def _alias_meanings(config: KeywordConfiguration) -> Iterable[Tuple[str, str]]:
    for alias, unit in config.chrono_units.items():
        if unit == ChronoUnit.MONTH and alias in config.quarters:
            yield alias, "unit:quarter"
        else:
            yield alias, f"unit:{unit.value}"
    for alias, day in config.days_of_week.items():
        yield alias, f"weekday:{day.name.lower()}"


def find_alias_collisions(configs: Sequence[KeywordConfiguration]) -> Dict[str, Set[str]]:
    """Aliases that mean different things in different configurations.

    Quarter aliases count as a meaning of their own, so a word that is a
    quarter in one language and a plain month in another is reported.

    Returns:
        Mapping of alias to the set of meanings it carries, e.g.
        ``{"m": {"unit:minute", "unit:month"}}``. Empty when consistent.
    """
    meanings: Dict[str, Set[str]] = defaultdict(set)
    for config in configs:
        for alias, meaning in _alias_meanings(config):
            meanings[alias].add(meaning)
    return {alias: found for alias, found in meanings.items() if len(found) > 1}


ENGLISH = KeywordConfiguration(
    until_inclusive={"<=", "until", "through"},
    until_exclusive={"<", "before"},
    from_inclusive={">=", "since", "starting"},
    from_exclusive={">", "after"},
    range_connectors_inclusive={"to", "-", "until", "through"},
    range_connectors_exclusive={"up to"},
    today={"today"},
    yesterday={"yesterday"},
    tomorrow={"tomorrow"},
    day_before_yesterday={"day before yesterday", "the day before yesterday"},
    day_after_tomorrow={"day after tomorrow", "the day after tomorrow"},
    last={"last", "previous", "past"},
    next={"next", "coming"},
    current={"this", "current"},
    ago={"ago"},
    from_now={"from now", "later"},
    in_={"in"},
    at={"at", "@"},
    now={"now", "right now"},
    am={"am", "a.m."},
    pm={"pm", "p.m."},
    start_of={"start of", "beginning of", "the start of", "the beginning of"},
    end_of={"end of", "the end of"},
    first_day_of={"first day of", "the first day of"},
    last_day_of={"last day of", "the last day of"},
    between={"between"},
    and_={"and"},
    quarters={"quarter", "quarters"},
    chrono_units={
        "second": ChronoUnit.SECOND,
        "seconds": ChronoUnit.SECOND,
        "sec": ChronoUnit.SECOND,
        "secs": ChronoUnit.SECOND,
        "minute": ChronoUnit.MINUTE,
        "minutes": ChronoUnit.MINUTE,
        "min": ChronoUnit.MINUTE,
        "mins": ChronoUnit.MINUTE,
        "hour": ChronoUnit.HOUR,
        "hours": ChronoUnit.HOUR,
        "h": ChronoUnit.HOUR,
        "day": ChronoUnit.DAY,
        "days": ChronoUnit.DAY,
        "week": ChronoUnit.WEEK,
        "weeks": ChronoUnit.WEEK,
        "month": ChronoUnit.MONTH,
        "months": ChronoUnit.MONTH,
        "quarter": ChronoUnit.MONTH,
        "quarters": ChronoUnit.MONTH,
        "year": ChronoUnit.YEAR,
        "years": ChronoUnit.YEAR,
    },
    days_of_week={
        "monday": Weekday.MONDAY,
        "mondays": Weekday.MONDAY,
        "tuesday": Weekday.TUESDAY,
        "tuesdays": Weekday.TUESDAY,
        "wednesday": Weekday.WEDNESDAY,
        "wednesdays": Weekday.WEDNESDAY,
        "thursday": Weekday.THURSDAY,
        "thursdays": Weekday.THURSDAY,
        "friday": Weekday.FRIDAY,
        "fridays": Weekday.FRIDAY,
        "saturday": Weekday.SATURDAY,
        "saturdays": Weekday.SATURDAY,
        "sunday": Weekday.SUNDAY,
        "sundays": Weekday.SUNDAY,
    },
)

DUTCH = KeywordConfiguration(
    until_inclusive={"<=", "tot en met", "t/m"},
    until_exclusive={"<", "voor", "tot"},
    from_inclusive={">=", "sinds", "vanaf"},
    from_exclusive={">", "na"},
    range_connectors_inclusive={"tot", "t/m", "tot en met", "-"},
    range_connectors_exclusive={"tot aan"},
    today={"vandaag"},
    yesterday={"gisteren"},
    tomorrow={"morgen"},
    day_before_yesterday={"eergisteren"},
    day_after_tomorrow={"overmorgen"},
    last={"vorige", "vorig", "laatste", "afgelopen"},
    next={"volgende", "volgend", "komende"},
    current={"deze", "dit", "huidige"},
    ago={"geleden"},
    from_now={"vanaf nu", "later"},
    in_={"over", "binnen"},
    at={"om"},
    now={"nu"},
    start_of={"begin van", "start van", "het begin van"},
    end_of={"eind van", "einde van", "het einde van"},
    first_day_of={"eerste dag van", "de eerste dag van"},
    last_day_of={"laatste dag van", "de laatste dag van"},
    between={"tussen"},
    and_={"en"},
    quarters={"kwartaal", "kwartalen"},
    chrono_units={
        "seconde": ChronoUnit.SECOND,
        "seconden": ChronoUnit.SECOND,
        "minuut": ChronoUnit.MINUTE,
        "minuten": ChronoUnit.MINUTE,
        "uur": ChronoUnit.HOUR,
        "uren": ChronoUnit.HOUR,
        "u": ChronoUnit.HOUR,
        "dag": ChronoUnit.DAY,
        "dagen": ChronoUnit.DAY,
        "week": ChronoUnit.WEEK,
        "weken": ChronoUnit.WEEK,
        "maand": ChronoUnit.MONTH,
        "maanden": ChronoUnit.MONTH,
        "kwartaal": ChronoUnit.MONTH,
        "kwartalen": ChronoUnit.MONTH,
        "jaar": ChronoUnit.YEAR,
        "jaren": ChronoUnit.YEAR,
    },
    days_of_week={
        "maandag": Weekday.MONDAY,
        "dinsdag": Weekday.TUESDAY,
        "woensdag": Weekday.WEDNESDAY,
        "donderdag": Weekday.THURSDAY,
        "vrijdag": Weekday.FRIDAY,
        "zaterdag": Weekday.SATURDAY,
        "zondag": Weekday.SUNDAY,
    },
)

LANGUAGES: Dict[str, KeywordConfiguration] = {
    "en": ENGLISH,
    "nl": DUTCH,
}


def language(code: str) -> KeywordConfiguration:
    """Look up a built-in vocabulary by language code."""
    try:
        return LANGUAGES[code.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(LANGUAGES))
        raise ConfigurationError(f"Unknown language '{code}' (known: {known})") from None
