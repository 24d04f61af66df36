"""Typer CLI entrypoint for duoload."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .config import ConfigRepository, TransferConfig
from .engine import CancellationToken, PaginatedFetcher
from .engine.deck_id import validate_deck_id
from .engine.exporter import (
    BaseSink,
    Destination,
    FileDestination,
    JsonSink,
    PackageSink,
    StreamDestination,
)
from .errors import DeckIdError, DuoloadError
from .logging_conf import configure_logging
from .orchestrator import TransferOrchestrator
from .ui import ProgressReporter

EXIT_CANCELLED = 130

app = typer.Typer(
    help="Export Duocards vocabulary to Anki packages or JSON.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(
    name="config",
    help="Inspect or create the configuration file.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)

FetcherFactory = Callable[..., PaginatedFetcher]


@dataclass
class AppState:
    repository: ConfigRepository
    verbose: bool = False
    fetcher_factory: FetcherFactory = field(default=PaginatedFetcher)


def build_state(
    verbose: bool = False,
    config_path: Path | None = None,
    log_file: Path | None = None,
) -> AppState:
    configure_logging(verbose=verbose, log_file=log_file)
    return AppState(repository=ConfigRepository(path=config_path), verbose=verbose)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state()
        ctx.obj = state
    return state


def _fail(message: str, code: int = 1) -> typer.Exit:
    err_console.print(f"[bold red]Error:[/] {escape(message)}")
    return typer.Exit(code=code)


def _load_config(state: AppState, **overrides: object) -> TransferConfig:
    try:
        config = state.repository.load()
        changes = {key: value for key, value in overrides.items() if value is not None}
        if changes:
            config = TransferConfig.model_validate({**config.model_dump(), **changes})
    except (ValidationError, ValueError, yaml.YAMLError) as exc:
        raise _fail(f"Invalid configuration: {exc}") from exc
    return config


def _check_deck_id(deck_id: str) -> str:
    deck_id = deck_id.strip()
    try:
        validate_deck_id(deck_id)
    except DeckIdError as exc:
        raise _fail(f"{exc.user_message} ({exc})") from exc
    return deck_id


def _select_output(
    anki_file: Optional[Path],
    json_file: Optional[Path],
    json_stdout: bool,
    config: TransferConfig,
) -> tuple[BaseSink, Destination]:
    chosen = sum(1 for option in (anki_file, json_file) if option is not None) + int(json_stdout)
    if chosen != 1:
        raise _fail("Specify exactly one of --anki-file, --json-file or --json.")
    if anki_file is not None:
        return PackageSink(config.package), FileDestination(anki_file)
    if json_file is not None:
        return JsonSink(), FileDestination(json_file)
    return JsonSink(), StreamDestination()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging on stderr.", is_flag=True),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Configuration file (defaults to $DUOLOAD_HOME/config.yaml)."
    ),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write JSON logs to this file."),
) -> None:
    ctx.obj = build_state(verbose=verbose, config_path=config_path, log_file=log_file)


@app.command("export", help="Export every card of a deck to one destination.")
def export(
    ctx: typer.Context,
    deck_id: str = typer.Argument(..., help="Deck ID copied from the Duocards web app."),
    anki_file: Optional[Path] = typer.Option(None, "--anki-file", help="Write an Anki .apkg package."),
    json_file: Optional[Path] = typer.Option(None, "--json-file", help="Write a JSON array to a file."),
    json_stdout: bool = typer.Option(False, "--json", help="Write a JSON array to stdout.", is_flag=True),
    pages: Optional[int] = typer.Option(None, "--pages", min=1, help="Stop after this many pages."),
    delay: Optional[float] = typer.Option(None, "--delay", min=0.0, help="Seconds to wait between requests."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Per-page fetch budget in seconds."),
    quiet: bool = typer.Option(False, "--quiet", help="Suppress progress output.", is_flag=True),
) -> None:
    state = _get_state(ctx)
    deck_id = _check_deck_id(deck_id)
    config = _load_config(state, polite_delay=delay, fetch_timeout=timeout)
    sink, destination = _select_output(anki_file, json_file, json_stdout, config)

    progress = ProgressReporter(stream=sys.stderr if json_stdout else sys.stdout, enabled=not quiet)
    token = CancellationToken()
    fetcher = state.fetcher_factory(config, deck_id, token=token)
    try:
        orchestrator = TransferOrchestrator(fetcher, sink, destination, page_limit=pages, progress=progress)
        orchestrator.run()
    except KeyboardInterrupt:
        token.cancel()
        raise _fail("Transfer cancelled.", code=EXIT_CANCELLED) from None
    except DuoloadError as exc:
        raise _fail(exc.user_message) from exc
    finally:
        fetcher.close()


@app.command("fetch-page", help="Fetch a single page and print its records as JSON.")
def fetch_page(
    ctx: typer.Context,
    deck_id: str = typer.Argument(..., help="Deck ID copied from the Duocards web app."),
    page: int = typer.Option(1, "--page", min=1, help="Page number to print."),
) -> None:
    state = _get_state(ctx)
    deck_id = _check_deck_id(deck_id)
    config = _load_config(state)
    fetcher = state.fetcher_factory(config, deck_id)
    try:
        number = 1
        result = fetcher.fetch(number)
        while number < page:
            if not result.has_next:
                raise _fail(f"Deck has only {number} page(s).")
            number += 1
            result = fetcher.fetch(number)
    except DuoloadError as exc:
        raise _fail(exc.user_message) from exc
    finally:
        fetcher.close()

    payload = {
        "page": result.current_page,
        "has_next": result.has_next,
        "records": [record.to_dict() for record in result.records],
    }
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@config_app.command("show", help="Print the effective configuration as YAML.")
def config_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    config = _load_config(state)
    typer.echo(f"# {state.repository.path}")
    typer.echo(yaml.safe_dump(config.model_dump(mode="json"), allow_unicode=True, sort_keys=False), nl=False)


@config_app.command("init", help="Write the default configuration file.")
def config_init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file.", is_flag=True),
) -> None:
    state = _get_state(ctx)
    path = state.repository.path
    if path.exists() and not force:
        raise _fail(f"{path} already exists; pass --force to overwrite it.")
    try:
        written = state.repository.save(TransferConfig())
    except OSError as exc:
        raise _fail(f"Could not write {path}: {exc.strerror or exc}") from exc
    console.print(f"Wrote default configuration to {escape(str(written))}")


app.add_typer(config_app, name="config")


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
