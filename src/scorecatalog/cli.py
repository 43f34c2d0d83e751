"""Command line interface for ScoreCatalog."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

import typer
import uvicorn
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from scorecatalog.config import AppConfig
from scorecatalog.index.catalog import CatalogLoadError
from scorecatalog.index.query import ScoreQueries
from scorecatalog.models import KNOWN_FIELDS, Score, ScoreFilter
from scorecatalog.web.app import create_app

T = TypeVar("T")

console = Console()
app = typer.Typer(help="ScoreCatalog - browse and search notation files")


class SearchField(str, Enum):
    title = "title"
    composer = "composer"


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _queries(scores_dir: Optional[Path]) -> ScoreQueries:
    config = AppConfig(scores_dir=scores_dir)
    return ScoreQueries(config.build_catalog(Path.cwd()))


def _run(func: Callable[..., T], *args: object) -> T:
    try:
        return func(*args)
    except CatalogLoadError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc


def _print_scores(scores: List[Score]) -> None:
    if not scores:
        console.print("[yellow]No matching scores.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Path")
    table.add_column("Title")
    table.add_column("Composer")
    table.add_column("Time")
    table.add_column("Tempo")
    table.add_column("Key")

    for score in scores:
        table.add_row(
            score.path,
            score.title or "",
            score.composer or "",
            score.time_signature or "",
            score.tempo or "",
            score.key_signature or "",
        )

    console.print(table)


ScoresDirOption = typer.Option(None, "--scores-dir", help="Directory containing score files")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Verbose logging")


@app.command("list")
def list_scores(
    title: Optional[str] = typer.Option(None, help="Title contains (case-insensitive)"),
    composer: Optional[str] = typer.Option(None, help="Composer contains (case-insensitive)"),
    category: Optional[str] = typer.Option(None, help="Category or nested category"),
    time_signature: Optional[str] = typer.Option(None, help="Exact time signature"),
    tempo: Optional[str] = typer.Option(None, help="Exact tempo"),
    key_signature: Optional[str] = typer.Option(None, help="Exact key signature"),
    scores_dir: Optional[Path] = ScoresDirOption,
    verbose: bool = VerboseOption,
) -> None:
    """List scores, optionally filtered."""
    _setup_logging(verbose)
    criteria = ScoreFilter(
        title=title,
        composer=composer,
        category=category,
        time_signature=time_signature,
        tempo=tempo,
        key_signature=key_signature,
    )
    _print_scores(_run(_queries(scores_dir).filter_scores, criteria))


@app.command()
def show(
    path: str = typer.Argument(..., help="Score path relative to the scores directory"),
    raw: bool = typer.Option(False, "--raw", help="Print the file content unchanged"),
    scores_dir: Optional[Path] = ScoresDirOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show a single score."""
    _setup_logging(verbose)
    score = _run(_queries(scores_dir).get_by_path, path)
    if score is None:
        console.print(f"[yellow]Score not found: {escape(path)}[/yellow]")
        raise typer.Exit(code=1)

    if raw:
        console.print(score.content, markup=False, highlight=False)
        return

    console.print(f"[bold]{escape(score.title or score.filename)}[/bold]")
    for attribute, key in KNOWN_FIELDS.items():
        value = getattr(score, attribute)
        if value is not None and attribute != "title":
            console.print(f"{key}: {value}", markup=False)
    known_keys = set(KNOWN_FIELDS.values())
    for key, value in score.metadata.items():
        if key in known_keys:
            continue
        console.print(f"{key}: {value}", markup=False)
    console.print()
    console.print(score.notation, markup=False, highlight=False)


@app.command()
def categories(
    scores_dir: Optional[Path] = ScoresDirOption,
    verbose: bool = VerboseOption,
) -> None:
    """List all categories."""
    _setup_logging(verbose)
    for category in _run(_queries(scores_dir).categories):
        console.print(category, markup=False)


@app.command()
def composers(
    scores_dir: Optional[Path] = ScoresDirOption,
    verbose: bool = VerboseOption,
) -> None:
    """List all composers."""
    _setup_logging(verbose)
    for composer in _run(_queries(scores_dir).composers):
        console.print(composer, markup=False)


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to look for"),
    by: SearchField = typer.Option(SearchField.title, "--by", help="Field to search"),
    scores_dir: Optional[Path] = ScoresDirOption,
    verbose: bool = VerboseOption,
) -> None:
    """Search scores by title or composer."""
    _setup_logging(verbose)
    queries = _queries(scores_dir)
    if by is SearchField.composer:
        results = _run(queries.search_by_composer, query)
    else:
        results = _run(queries.search_by_title, query)
    _print_scores(results)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: Optional[int] = typer.Option(None, help="Server port (default: $PORT or 3000)"),
    scores_dir: Optional[Path] = ScoresDirOption,
) -> None:
    """Start the HTTP API."""
    config = AppConfig(scores_dir=scores_dir, host=host, port=port)
    try:
        port = config.resolve_port()
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--port") from exc
    resolved_dir = config.resolve_scores_dir(Path.cwd())
    if not resolved_dir.is_dir():
        console.print(
            f"[yellow]Warning: scores directory not found: {escape(str(resolved_dir))}[/yellow]"
        )

    console.print(f"Starting API on http://{host}:{port} (scores: {escape(str(resolved_dir))})")
    uvicorn.run(
        create_app(config.build_catalog(Path.cwd()), config),
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
