"""Typed settings for building resolvers.

Settings are a small Pydantic model so the CLI and host applications can
rely on validated values. They are resolved in layers: defaults, an optional
JSON file, explicit overrides, then ``DAYSIE_*`` environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from daysie.clock import Clock
from daysie.exceptions import ConfigurationError
from daysie.keywords import LANGUAGES, KeywordConfiguration, find_alias_collisions
from daysie.resolver import TemporalResolver

logger = logging.getLogger(__name__)


class ResolverSettings(BaseModel):
    """Which vocabularies a resolver accepts and how strictly they combine."""

    languages: List[str] = Field(default_factory=lambda: ["en"], min_length=1)
    strict_aliases: bool = Field(
        False, description="Reject language combinations whose unit or weekday aliases collide"
    )

    @field_validator("languages", mode="before")
    @classmethod
    def _split_languages(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [part for part in value.split(",") if part.strip()]
        return value

    @field_validator("languages")
    @classmethod
    def _validate_languages(cls, value: List[str]) -> List[str]:
        codes = []
        for code in value:
            normalized = code.strip().lower()
            if normalized not in LANGUAGES:
                known = ", ".join(sorted(LANGUAGES))
                raise ValueError(f"unknown language '{code}' (known: {known})")
            if normalized not in codes:
                codes.append(normalized)
        return codes


def load_settings(path: Path) -> ResolverSettings:
    """Load settings from a JSON file or raise if invalid."""

    if not path.exists():
        raise FileNotFoundError(f"Settings file not found at {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        return ResolverSettings.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid configuration in {path}: {exc}", cause=exc) from exc


def resolve_settings(
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ResolverSettings:
    """Layer the settings file, explicit overrides and environment variables."""

    data = load_settings(path).model_dump() if path is not None else ResolverSettings().model_dump()
    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value
    _set_env_override(data, "languages", "DAYSIE_LANGUAGES")
    _set_env_override(data, "strict_aliases", "DAYSIE_STRICT_ALIASES", cast_bool=True)

    try:
        return ResolverSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}", cause=exc) from exc


def _set_env_override(
    mapping: Dict[str, Any],
    key: str,
    env_name: str,
    *,
    cast_bool: bool = False,
) -> None:
    raw = os.getenv(env_name)
    if raw is None:
        return
    if cast_bool:
        mapping[key] = raw.lower() in {"1", "true", "yes"}
    else:
        mapping[key] = raw


def build_keywords(settings: ResolverSettings) -> KeywordConfiguration:
    """Combine the configured vocabularies into one.

    Raises:
        ConfigurationError: if ``strict_aliases`` is set and two languages
            give the same unit or weekday alias different meanings
    """
    configs = [LANGUAGES[code] for code in settings.languages]
    if len(configs) == 1:
        return configs[0]

    collisions = find_alias_collisions(configs)
    if collisions and settings.strict_aliases:
        details = "; ".join(
            f"{alias}: {', '.join(sorted(meanings))}" for alias, meanings in sorted(collisions.items())
        )
        raise ConfigurationError(f"Conflicting aliases for {settings.languages}: {details}")
    return KeywordConfiguration.combine(configs)


def create_resolver(
    settings: Optional[ResolverSettings] = None,
    clock: Optional[Clock] = None,
) -> TemporalResolver:
    """Build a resolver for ``settings`` (defaults to English only)."""
    settings = settings or ResolverSettings()
    logger.debug(f"Creating resolver for languages={settings.languages}")
    return TemporalResolver(build_keywords(settings), clock=clock)
