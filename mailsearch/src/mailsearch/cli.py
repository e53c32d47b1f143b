"""mailsearch command-line interface.

What:
  Provide a Typer-based entry point exposing the ``parse``, ``normalize`` and
  ``check`` commands over raw SEARCH argument text.

Why:
  Operators debugging client/server disagreements need to see how a SEARCH
  command is interpreted and what its canonical spelling is, without writing
  Python.

How:
  Resolve parser settings from the configuration file and command-line
  overrides, tokenise the text with :func:`~mailsearch.imap.wire.tokenize`,
  parse it, and print either the JSON tree or the canonical wire text.

Interfaces:
  ``app`` (Typer application), ``parse``, ``normalize``, ``check``, ``main``.

Invariants & Safety:
  - Exit codes follow shell expectations (``0`` success, ``1`` failure).
  - Results go to stdout, diagnostics to stderr.
"""
from __future__ import annotations

import json
import logging
from typing import Optional

import typer
from pydantic import ValidationError

from .config.loader import ConfigLoadError, load_search_config
from .config.schema import MAX_NESTING_DEPTH, SearchSettings
from .imap.criteria import Criteria
from .imap.errors import SearchError
from .imap.parser import parse_criteria
from .imap.wire import serialize_criteria, tokenize

app = typer.Typer(help="IMAP SEARCH criteria codec")

LOGGER = logging.getLogger("mailsearch.cli")


def _resolve_settings(
    config_path: Optional[str],
    lenient_dates: bool,
    max_depth: Optional[int],
) -> SearchSettings:
    """Merge command-line overrides into the configured parser settings.

    Raises:
      typer.Exit: With code ``1`` when the configuration cannot be loaded or an
        override is invalid.
    """

    try:
        settings = load_search_config(config_path).search
    except ConfigLoadError as exc:
        LOGGER.error("config_load_failed: %s", exc)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    updates = {}
    if lenient_dates:
        updates["date_policy"] = "lenient"
    if max_depth is not None:
        updates["max_depth"] = max_depth
    if not updates:
        return settings
    try:
        return SearchSettings.model_validate({**settings.model_dump(), **updates})
    except ValidationError as exc:
        typer.echo(
            f"error: --max-depth must be between 1 and {MAX_NESTING_DEPTH}", err=True
        )
        raise typer.Exit(code=1) from exc


def _parse_text(text: str, settings: SearchSettings) -> Criteria:
    try:
        return parse_criteria(tokenize(text), settings=settings)
    except SearchError as exc:
        LOGGER.info("search_rejected: %s", exc)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command("parse")
def parse(
    text: str = typer.Argument(..., help="SEARCH arguments, e.g. 'OR (SEEN) (FLAGGED)'"),
    *,
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to mailsearch.yaml"),
    lenient_dates: bool = typer.Option(False, "--lenient-dates", help="Skip malformed dates"),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", help="Maximum NOT/OR nesting"),
) -> None:
    """Print the parsed criteria tree as JSON."""

    settings = _resolve_settings(config_path, lenient_dates, max_depth)
    criteria = _parse_text(text, settings)
    typer.echo(json.dumps(criteria.to_dict(), indent=2, sort_keys=True))


@app.command("normalize")
def normalize(
    text: str = typer.Argument(..., help="SEARCH arguments to rewrite canonically"),
    *,
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to mailsearch.yaml"),
    lenient_dates: bool = typer.Option(False, "--lenient-dates", help="Skip malformed dates"),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", help="Maximum NOT/OR nesting"),
) -> None:
    """Print the canonical wire spelling of the criteria."""

    settings = _resolve_settings(config_path, lenient_dates, max_depth)
    criteria = _parse_text(text, settings)
    typer.echo(serialize_criteria(criteria))


@app.command("check")
def check(
    text: str = typer.Argument(..., help="SEARCH arguments to validate"),
    *,
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to mailsearch.yaml"),
    lenient_dates: bool = typer.Option(False, "--lenient-dates", help="Skip malformed dates"),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", help="Maximum NOT/OR nesting"),
) -> None:
    """Exit with ``0`` when the criteria parse, ``1`` otherwise."""

    settings = _resolve_settings(config_path, lenient_dates, max_depth)
    criteria = _parse_text(text, settings)
    if criteria.unparsed:
        skipped = ", ".join(keyword for keyword, _ in criteria.unparsed)
        typer.echo(f"ok (skipped dates: {skipped})")
    else:
        typer.echo("ok")


def main() -> None:
    """Execute the Typer application entry point."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
