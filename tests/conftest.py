"""Shared fixtures for daysie tests.

Every resolver here runs on a fixed clock at Saturday 2026-02-14 10:00:00,
so expected renderings are stable.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from daysie.clock import FixedClock
from daysie.keywords import DUTCH, ENGLISH, KeywordConfiguration
from daysie.resolver import TemporalResolver


NOW = datetime(2026, 2, 14, 10, 0, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def english(clock) -> TemporalResolver:
    """English-only resolver."""
    return TemporalResolver(ENGLISH, clock)


@pytest.fixture
def dutch(clock) -> TemporalResolver:
    """Dutch-only resolver."""
    return TemporalResolver(DUTCH, clock)


@pytest.fixture
def combined(clock) -> TemporalResolver:
    """Resolver accepting English and Dutch at once."""
    return TemporalResolver(KeywordConfiguration.combine([ENGLISH, DUTCH]), clock)
