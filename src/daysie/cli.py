"""Command line interface for daysie.

Commands:
    daysie parse "last 3 days" --json
    daysie parse "gisteren tot vandaag" --lang en --lang nl --now 2026-02-14T10:00
    daysie languages
    daysie check-aliases --lang en --lang nl
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from daysie.clock import FixedClock
from daysie.exceptions import ConfigurationError, ExpressionSyntaxError
from daysie.keywords import LANGUAGES, find_alias_collisions
from daysie.settings import create_resolver, resolve_settings

logger = logging.getLogger(__name__)

app = typer.Typer(help="Resolve natural-language temporal expressions into ranges and points")
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """daysie: temporal expression resolver."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


@app.command("parse")
def parse_expression(
    expression: str = typer.Argument(..., help="Temporal expression, e.g. 'since yesterday'"),
    languages: Optional[List[str]] = typer.Option(
        None, "--lang", "-l", help="Language code (can be used multiple times)"
    ),
    now: Optional[str] = typer.Option(
        None, "--now", help="Reference instant in ISO format instead of the system clock"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to a JSON settings file"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Resolve an expression and print the resulting interval."""
    clock = None
    if now is not None:
        try:
            clock = FixedClock(datetime.fromisoformat(now))
        except ValueError:
            typer.echo(f"Invalid --now value: {now}")
            raise typer.Exit(code=2)

    try:
        settings = resolve_settings(config_path, {"languages": languages or None})
        resolver = create_resolver(settings, clock=clock)
    except (ConfigurationError, FileNotFoundError) as exc:
        typer.echo(f"Configuration error: {exc}")
        raise typer.Exit(code=2)

    try:
        value = resolver.parse(expression)
    except ExpressionSyntaxError as exc:
        logger.debug(f"Parse failed at offset {exc.position}: {exc.expected}")
        typer.echo(str(exc))
        typer.echo(exc.pointer())
        raise typer.Exit(code=1)

    if output_json:
        typer.echo(json.dumps(value.to_dict()))
    else:
        typer.echo(str(value))


@app.command("languages")
def list_languages() -> None:
    """Show the registered vocabularies."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Code", style="cyan")
    table.add_column("Today")
    table.add_column("Last")
    table.add_column("Units", justify="right")
    table.add_column("Weekdays", justify="right")

    for code, config in sorted(LANGUAGES.items()):
        table.add_row(
            code,
            ", ".join(sorted(config.today)),
            ", ".join(sorted(config.last)),
            str(len(config.chrono_units)),
            str(len(config.days_of_week)),
        )

    console.print(table)


@app.command("check-aliases")
def check_aliases(
    languages: List[str] = typer.Option(
        ..., "--lang", "-l", help="Language code to combine (can be used multiple times)"
    ),
) -> None:
    """Report unit and weekday aliases that mean different things across languages."""
    try:
        settings = resolve_settings(overrides={"languages": languages})
    except ConfigurationError as exc:
        typer.echo(f"Configuration error: {exc}")
        raise typer.Exit(code=2)

    collisions = find_alias_collisions([LANGUAGES[code] for code in settings.languages])
    if not collisions:
        typer.echo(f"No alias collisions for {', '.join(settings.languages)}")
        return

    for alias, meanings in sorted(collisions.items()):
        typer.echo(f"{alias}: {', '.join(sorted(meanings))}")
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
