"""Natural-language temporal expression resolver.

Turns short human phrases such as "last 3 days", "since yesterday",
"between 2026-01-01 and end of next month" or "gisteren tot vandaag" into
concrete ranges and points relative to a clock:
- Multi-language keyword vocabularies that can be combined
- Calendar-aligned "last / this / next" arithmetic (weeks start Monday)
- Inclusive/exclusive boundary tracking through modifiers and open bounds
- Longest-match grammar with positioned syntax errors
"""

from daysie.clock import Clock, FixedClock, SystemClock
from daysie.exceptions import (
    ConfigurationError,
    DaysieError,
    ExpressionSyntaxError,
    GrammarError,
    InvalidRangeError,
    UnsupportedUnitError,
)
from daysie.keywords import (
    DUTCH,
    ENGLISH,
    LANGUAGES,
    KeywordConfiguration,
    find_alias_collisions,
    language,
)
from daysie.calculator import ChronoUnit, Weekday
from daysie.values import MAX_INSTANT, MIN_INSTANT, Point, Range, TemporalValue
from daysie.resolver import (
    TemporalResolver,
    between,
    connect,
    default_resolver,
    end_of,
    first_day_of,
    from_bound,
    last_day_of,
    parse,
    start_of,
    until_bound,
)
from daysie.settings import ResolverSettings, create_resolver, load_settings, resolve_settings

__version__ = "0.1.0"

__all__ = [
    # Values
    "Range",
    "Point",
    "TemporalValue",
    "MIN_INSTANT",
    "MAX_INSTANT",
    # Clocks
    "Clock",
    "SystemClock",
    "FixedClock",
    # Keywords
    "KeywordConfiguration",
    "ENGLISH",
    "DUTCH",
    "LANGUAGES",
    "language",
    "find_alias_collisions",
    "ChronoUnit",
    "Weekday",
    # Resolver
    "TemporalResolver",
    "default_resolver",
    "parse",
    "start_of",
    "end_of",
    "first_day_of",
    "last_day_of",
    "between",
    "connect",
    "until_bound",
    "from_bound",
    # Settings
    "ResolverSettings",
    "load_settings",
    "resolve_settings",
    "create_resolver",
    # Errors
    "DaysieError",
    "ExpressionSyntaxError",
    "UnsupportedUnitError",
    "InvalidRangeError",
    "ConfigurationError",
    "GrammarError",
]
