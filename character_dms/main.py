from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from character_dms import reporter
from character_dms.config import get_settings
from character_dms.csv_io import export_file, import_file
from character_dms.ranking import top_n
from character_dms.results import DataFileError
from character_dms.shell import ConsoleSession
from character_dms.store import CharacterStore
from character_dms.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Game Character DMS CLI.")

log = get_logger(__name__)

DATA_OPTION_HELP = "CSV file to load first (default from DMS_DATA_FILE)."


def _setup() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


def _load_store(data: Optional[Path]) -> CharacterStore:
    """
    Build a store and import `data` (or the configured data file) into it.

    Exits with status 1 when the file cannot be read.
    """
    store = CharacterStore()
    path = data or get_settings().data_file
    if path is None:
        return store
    try:
        import_file(store, path)
    except DataFileError as exc:
        typer.echo(f"Error reading file: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    return store


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"env={settings.app_env} log_level={settings.log_level} json={settings.log_json} | "
        f"data_file={settings.data_file} export_dir={settings.export_dir} | "
        f"top_n={settings.default_top_n} include_archived={settings.report_include_archived}"
    )


@app.command()
def load(path: Path = typer.Argument(..., help="CSV file to import.")) -> None:
    """
    Import a CSV file and report how many lines were added or skipped.
    """
    _setup()
    store = CharacterStore()
    try:
        report = import_file(store, path)
    except DataFileError as exc:
        typer.echo(f"Error reading file: {exc}", err=True)
        if exc.report is not None:
            typer.echo(exc.report.summary(), err=True)
        raise typer.Exit(code=1) from exc
    reporter.print_import_report(report)


@app.command("list")
def list_characters(
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=DATA_OPTION_HELP),
    show_all: bool = typer.Option(False, "--all", "-a", help="Include archived characters."),
) -> None:
    """
    List active characters (or all of them) ordered by id.
    """
    _setup()
    store = _load_store(data)
    if show_all:
        reporter.print_characters(store.all(), title="All Characters")
    else:
        reporter.print_characters(store.list_active(), title="Active Characters")


@app.command()
def search(
    query: str = typer.Argument("", help="Substring of handle, server or occupation."),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=DATA_OPTION_HELP),
) -> None:
    """
    Search active characters by handle, server or occupation.
    """
    _setup()
    store = _load_store(data)
    reporter.print_characters(store.search(query), title=f"Matches for '{query}'")


@app.command()
def show(
    character_id: Optional[int] = typer.Option(None, "--id", help="Character id."),
    handle: Optional[str] = typer.Option(None, "--handle", help="Character handle."),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=DATA_OPTION_HELP),
) -> None:
    """
    Look up one character by id or handle.
    """
    if (character_id is None) == (handle is None):
        raise typer.BadParameter("pass exactly one of --id or --handle")
    _setup()
    store = _load_store(data)
    found = store.find_by_id(character_id) if character_id is not None else store.find_by_handle(handle)
    if found is None:
        typer.echo("No match")
        raise typer.Exit(code=1)
    typer.echo(found.describe())


@app.command()
def top(
    n: Optional[int] = typer.Argument(None, help="How many entries (default DMS_TOP_N)."),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=DATA_OPTION_HELP),
    include_archived: Optional[bool] = typer.Option(
        None,
        "--include-archived/--active-only",
        help="Rank archived characters too (default DMS_REPORT_INCLUDE_ARCHIVED).",
    ),
    export: Optional[Path] = typer.Option(None, "--export", "-e", help="Write the report as CSV."),
) -> None:
    """
    Rank characters by threat score and show the top N.
    """
    _setup()
    settings = get_settings()
    store = _load_store(data)
    count = settings.default_top_n if n is None else n
    archived = settings.report_include_archived if include_archived is None else include_archived

    entries = top_n(count, store.all() if archived else store.list_active())
    reporter.print_threats(entries, title=f"Top-{count} Most Wanted")

    if export is not None:
        try:
            written = export_file(export, entries)
        except DataFileError as exc:
            typer.echo(f"Export failed: {exc}", err=True)
            raise typer.Exit(code=1) from exc
        typer.echo(f"Exported {len(entries)} entries to {written}")


@app.command()
def shell(
    data: Optional[Path] = typer.Option(None, "--data", "-d", help=DATA_OPTION_HELP),
) -> None:
    """
    Start the interactive menu (add, update, remove, archive, search, top-N).
    """
    _setup()
    store = _load_store(data)
    log.info("Shell started", extra={"characters": len(store)})
    ConsoleSession(store, get_settings(), console=Console()).run()


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
