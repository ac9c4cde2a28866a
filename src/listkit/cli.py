"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from listkit.appctx import AppContext
from listkit.errors import InvalidRecordSourceError, ListKitError
from listkit.settings.manager import SettingsManager
from listkit.utils.jsonio import read_json

LOG_LEVEL_ENV = "LISTKIT_LOG_LEVEL"

app = typer.Typer(help="Search, filter, sort, page and select records from the terminal")
theme_app = typer.Typer(help="Manage the persisted theme preference")
app.add_typer(theme_app, name="theme")

console = Console()


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ListKitError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _configure_logging() -> None:
    level = getattr(logging, os.environ.get(LOG_LEVEL_ENV, "WARNING").upper(), logging.WARNING)
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _context(ctx: typer.Context) -> AppContext:
    if ctx.obj is None:
        ctx.obj = AppContext(use_qt=False)
    return ctx.obj


@app.callback()
def main(
    ctx: typer.Context,
    settings_file: Optional[Path] = typer.Option(
        None, "--settings-file", help="Use this settings file instead of the per-user one."
    ),
) -> None:
    _configure_logging()
    if settings_file is not None:
        settings = SettingsManager(settings_file)
        try:
            settings.load()
        except ListKitError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        ctx.obj = AppContext(settings=settings, use_qt=False)


def _load_records(path: Path) -> list:
    try:
        payload = read_json(path)
    except (OSError, ValueError) as exc:
        raise InvalidRecordSourceError(f"Cannot read {path}: {exc}") from exc
    if isinstance(payload, dict):
        payload = payload.get("records")
    if not isinstance(payload, list):
        raise InvalidRecordSourceError(f"{path} must contain a list of records")
    return payload


def _parse_filters(entries: List[str]) -> dict[str, str]:
    filters: dict[str, str] = {}
    for entry in entries:
        key, sep, value = entry.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected KEY=VALUE, got {entry!r}", param_hint="--filter")
        filters[key.strip()] = value.strip()
    return filters


def _match_id(raw: str, known_ids: list[Any]) -> Any:
    for record_id in known_ids:
        if str(record_id) == raw:
            return record_id
    return raw


def _render(view_model) -> None:
    columns: list[str] = []
    for record in view_model.records:
        if isinstance(record, dict):
            for key in record:
                if key not in columns:
                    columns.append(key)
    table = Table(show_lines=False)
    table.add_column("", width=1)
    for column in columns:
        table.add_column(str(column))
    for record in view_model.records:
        record_id = record.get("id") if isinstance(record, dict) else None
        mark = "x" if record_id in view_model.selection else ""
        table.add_row(mark, *("" if record.get(c) is None else str(record.get(c)) for c in columns))
    console.print(table)
    total_pages = view_model.total_pages or 1
    total = view_model.total_count if view_model.total_count is not None else "?"
    print(
        f"Page {view_model.query_state.page} of {total_pages} | "
        f"{total} matching | {view_model.selected_count} selected"
    )
    if view_model.error:
        print(f"[red]{view_model.error}")


@app.command()
@_handle_errors
def query(
    ctx: typer.Context,
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with records."),
    filters: List[str] = typer.Option([], "--filter", "-f", help="Filter as KEY=VALUE."),
    sort: Optional[str] = typer.Option(None, "--sort", help="Field to sort by."),
    desc: bool = typer.Option(False, "--desc", help="Sort descending."),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Free-text search."),
    page: int = typer.Option(1, "--page", help="Page number (1-based)."),
    page_size: Optional[int] = typer.Option(None, "--page-size", help="Rows per page."),
    select: List[str] = typer.Option([], "--select", help="Mark a record id as selected."),
    min_chars: Optional[int] = typer.Option(None, "--min-chars", help="Ignore shorter searches."),
) -> None:
    """Print one page of records after filtering, searching and sorting."""

    if desc and not sort:
        raise typer.BadParameter("--desc needs --sort", param_hint="--desc")
    records = _load_records(source)
    options: dict[str, Any] = {}
    if min_chars is not None:
        options["min_chars"] = min_chars
    if page_size is not None:
        options["page_size"] = page_size
    controller = _context(ctx).controllers.create_local_controller(records, list_id=source.stem, **options)
    try:
        parsed = _parse_filters(filters)
        for key, value in parsed.items():
            controller.on_filter_change(key, value)
        if sort:
            controller.on_sort_change(sort)
            if desc:
                controller.on_sort_change(sort)
        if search is not None:
            controller.on_search_input(search)
            controller.on_search_flush()
        if page != 1:
            controller.on_page_change(page)
        known_ids = [r.get("id") for r in records if isinstance(r, dict)]
        for raw in select:
            controller.on_toggle_row(_match_id(raw, known_ids))
        _render(controller.get_view_model())
    finally:
        controller.dispose()


@theme_app.command("show")
@_handle_errors
def theme_show(ctx: typer.Context) -> None:
    """Show the active theme and the available ones."""

    service = _context(ctx).theme
    active = service.theme
    for name, label in service.available_themes():
        marker = "[green]*[/green]" if name == active else " "
        print(f"{marker} {name} ({label})")


@theme_app.command("set")
@_handle_errors
def theme_set(ctx: typer.Context, name: str) -> None:
    """Persist *name* as the active theme."""

    service = _context(ctx).theme
    service.set_theme(name)
    print(f"[green]Theme set to {name}")


if __name__ == "__main__":  # pragma: no cover
    app()
