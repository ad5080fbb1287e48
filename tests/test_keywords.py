"""Tests for keyword vocabularies and their combination."""

import logging

import pytest
from pydantic import ValidationError

from daysie.calculator import ChronoUnit, Weekday
from daysie.exceptions import ConfigurationError
from daysie.keywords import (
    DUTCH,
    ENGLISH,
    KeywordConfiguration,
    find_alias_collisions,
    language,
    normalize_keyword,
)


class TestKeywordConfiguration:
    """Construction and normalization."""

    def test_keywords_are_normalized(self):
        config = KeywordConfiguration(today={"  To  Day "}, chrono_units={"Days": ChronoUnit.DAY})
        assert config.today == frozenset({"to day"})
        assert config.chrono_units == {"days": ChronoUnit.DAY}

    def test_reserved_word_aliases(self):
        config = KeywordConfiguration(**{"in": ["Over"], "and": ["En"]})
        assert config.in_ == frozenset({"over"})
        assert config.and_ == frozenset({"en"})

    def test_string_units_are_coerced(self):
        config = KeywordConfiguration(chrono_units={"wk": "week"}, days_of_week={"mo": 0})
        assert config.chrono_units["wk"] is ChronoUnit.WEEK
        assert config.days_of_week["mo"] is Weekday.MONDAY

    def test_frozen(self):
        with pytest.raises(ValidationError):
            ENGLISH.today = frozenset({"now"})

    def test_quarter_detection(self):
        assert ENGLISH.is_quarter("Quarters")
        assert not ENGLISH.is_quarter("month")
        assert DUTCH.is_quarter("kwartaal")

    def test_normalize_keyword(self):
        assert normalize_keyword(" Tot\tEn  MET ") == "tot en met"


class TestCombine:
    """Merging several vocabularies into one."""

    def test_sets_are_unioned(self):
        combined = KeywordConfiguration.combine([ENGLISH, DUTCH])
        assert {"today", "vandaag"} <= combined.today
        assert {"until", "tot en met"} <= combined.until_inclusive
        assert combined.chrono_units["dagen"] is ChronoUnit.DAY
        assert combined.days_of_week["monday"] is Weekday.MONDAY

    def test_later_configuration_wins(self, caplog):
        first = KeywordConfiguration(chrono_units={"m": ChronoUnit.MINUTE})
        second = KeywordConfiguration(chrono_units={"m": ChronoUnit.MONTH})

        with caplog.at_level(logging.WARNING, logger="daysie.keywords"):
            combined = KeywordConfiguration.combine([first, second])

        assert combined.chrono_units["m"] is ChronoUnit.MONTH
        assert "redefined" in caplog.text

    def test_same_meaning_is_not_an_override(self, caplog):
        with caplog.at_level(logging.WARNING, logger="daysie.keywords"):
            KeywordConfiguration.combine([ENGLISH, DUTCH])

        assert "redefined" not in caplog.text


class TestAliasCollisions:
    def test_builtin_languages_are_consistent(self):
        assert find_alias_collisions([ENGLISH, DUTCH]) == {}

    def test_unit_collision(self):
        first = KeywordConfiguration(chrono_units={"m": ChronoUnit.MINUTE})
        second = KeywordConfiguration(chrono_units={"m": ChronoUnit.MONTH})

        assert find_alias_collisions([first, second]) == {"m": {"unit:minute", "unit:month"}}

    def test_quarter_is_its_own_meaning(self):
        first = KeywordConfiguration(chrono_units={"q": ChronoUnit.MONTH}, quarters={"q"})
        second = KeywordConfiguration(chrono_units={"q": ChronoUnit.MONTH})

        assert find_alias_collisions([first, second]) == {"q": {"unit:quarter", "unit:month"}}

    def test_unit_and_weekday_collision(self):
        first = KeywordConfiguration(chrono_units={"ma": ChronoUnit.MONTH})
        second = KeywordConfiguration(days_of_week={"ma": Weekday.MONDAY})

        assert find_alias_collisions([first, second]) == {"ma": {"unit:month", "weekday:monday"}}


class TestLanguageRegistry:
    def test_lookup(self):
        assert language("EN") is ENGLISH
        assert language(" nl ") is DUTCH

    def test_unknown_language(self):
        with pytest.raises(ConfigurationError, match="Unknown language"):
            language("fr")
