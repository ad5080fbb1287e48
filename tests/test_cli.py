"""Tests for the daysie command line interface."""

import json

import pytest
from typer.testing import CliRunner

from daysie.cli import app


NOW = "2026-02-14T10:00:00"


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("DAYSIE_LANGUAGES", raising=False)
    monkeypatch.delenv("DAYSIE_STRICT_ALIASES", raising=False)


def test_parse_prints_interval(runner):
    """Test parse command with the default rendering."""
    result = runner.invoke(app, ["parse", "last week", "--now", NOW])

    assert result.exit_code == 0
    assert "[2026-02-02T00:00,2026-02-09T00:00)" in result.output


def test_parse_json_output(runner):
    """Test parse command with JSON output."""
    result = runner.invoke(app, ["parse", "since yesterday", "--now", NOW, "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload == {
        "type": "range",
        "start": "2026-02-13T00:00:00",
        "end": None,
        "start_inclusive": True,
        "end_inclusive": False,
    }


def test_parse_multiple_languages(runner):
    """Test parse command with several --lang options."""
    result = runner.invoke(
        app, ["parse", "gisteren tot vandaag", "--lang", "en", "--lang", "nl", "--now", NOW]
    )

    assert result.exit_code == 0
    assert "[2026-02-13T00:00,2026-02-14T00:00]" in result.output


def test_parse_syntax_error_shows_pointer(runner):
    """Test parse command reports the failing offset."""
    result = runner.invoke(app, ["parse", "last week foo", "--now", NOW])

    assert result.exit_code == 1
    assert "offset 10" in result.output
    assert "last week foo\n          ^" in result.output


def test_parse_unknown_language(runner):
    result = runner.invoke(app, ["parse", "today", "--lang", "fr"])

    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_parse_invalid_now(runner):
    result = runner.invoke(app, ["parse", "today", "--now", "yesterday-ish"])

    assert result.exit_code == 2
    assert "Invalid --now" in result.output


def test_parse_reads_config_file(runner, tmp_path):
    config = tmp_path / "daysie.json"
    config.write_text(json.dumps({"languages": ["nl"]}))

    result = runner.invoke(app, ["parse", "vorige week", "--config", str(config), "--now", NOW])

    assert result.exit_code == 0
    assert "[2026-02-02T00:00,2026-02-09T00:00)" in result.output


def test_verbose_flag(runner):
    result = runner.invoke(app, ["--verbose", "parse", "today", "--now", NOW])

    assert result.exit_code == 0
    assert "[2026-02-14T00:00,2026-02-14T00:00]" in result.output


def test_languages_table(runner):
    """Test languages command lists the registered vocabularies."""
    result = runner.invoke(app, ["languages"])

    assert result.exit_code == 0
    assert "en" in result.output
    assert "nl" in result.output
    assert "vandaag" in result.output


def test_check_aliases_consistent(runner):
    result = runner.invoke(app, ["check-aliases", "--lang", "en", "--lang", "nl"])

    assert result.exit_code == 0
    assert "No alias collisions" in result.output


def test_check_aliases_reports_collisions(runner, monkeypatch):
    from daysie import keywords
    from daysie.calculator import ChronoUnit
    from daysie.keywords import KeywordConfiguration

    monkeypatch.setitem(
        keywords.LANGUAGES, "xx", KeywordConfiguration(chrono_units={"h": ChronoUnit.DAY})
    )

    result = runner.invoke(app, ["check-aliases", "--lang", "en", "--lang", "xx"])

    assert result.exit_code == 1
    assert "h: unit:day, unit:hour" in result.output
