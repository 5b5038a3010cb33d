"""Typer-based CLI for browsing sources page by page."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .core.loader import IncrementalLoadingCollection
from .errors import PageflowError
from .settings import merge_with_defaults
from .sources import LineFileSource

app = typer.Typer(help="Load text files incrementally, one page at a time")
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _read_settings(path: Optional[Path]) -> dict:
    if path is None:
        return merge_with_defaults(None)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        typer.echo(f"Error: cannot read settings {path}: {exc}", err=True)
        raise typer.Exit(1) from exc
    try:
        return merge_with_defaults(payload)
    except PageflowError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc


@app.command()
def browse(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Text file to page through"),
    page_size: Optional[int] = typer.Option(None, "--page-size", "-n", min=1, help="Lines per page"),
    pages: int = typer.Option(0, "--pages", "-p", min=0, help="Stop after this many pages (0 = all)"),
    settings: Optional[Path] = typer.Option(None, "--settings", help="JSON loader settings file"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Print *path* page by page until the file is exhausted."""

    _configure_logging(verbose)
    resolved = _read_settings(settings)
    if page_size is not None:
        resolved["items_per_page"] = page_size

    failures: list[Exception] = []
    loader = IncrementalLoadingCollection.from_settings(
        LineFileSource(path), resolved, on_error=failures.append
    )
    loaded_pages = 0
    with loader:
        while loader.has_more_items and (pages == 0 or loaded_pages < pages):
            start = len(loader)
            result = loader.load_more_items(loader.items_per_page).result()
            if result.count == 0:
                break
            loaded_pages += 1
            table = Table(title=f"Page {loaded_pages}", show_header=False)
            table.add_column("#", justify="right", style="dim")
            table.add_column("line")
            for offset, line in enumerate(loader[start:]):
                table.add_row(str(start + offset + 1), line)
            console.print(table)

    if failures:
        typer.echo(f"Error: {failures[0]}", err=True)
        raise typer.Exit(1)
    console.print(f"[bold]{len(loader)}[/bold] lines in {loaded_pages} page(s)")


@app.command("check-settings")
def check_settings(path: Path = typer.Argument(..., exists=True, dir_okay=False)) -> None:
    """Validate a loader settings file and print the effective values."""

    resolved = _read_settings(path)
    for key, value in resolved.items():
        console.print(f"{key} = {value!r}")


def main() -> None:  # pragma: no cover - thin wrapper
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
