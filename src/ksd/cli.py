"""Command line interface for ksd."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ksd.build.builder import Builder
from ksd.config import BuildConfig
from ksd.models import KsdError
from ksd.sync.synchronizer import parse_endpoint, plan_sync, synchronize


console = Console()
app = typer.Typer(help="ksd - build Kusto function declarations into control commands")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _resolve_root(directory: Optional[Path]) -> Path:
    root = Path.cwd() if directory is None else directory
    if not root.is_absolute():
        root = Path.cwd() / root
    if not root.is_dir():
        raise typer.BadParameter(f"Directory not found: {directory or root}")
    return root


def _fail(error: KsdError) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False)
    raise typer.Exit(code=1)


def _run_build(root: Path, config: BuildConfig) -> Path:
    builder = Builder(root, config)
    console.print(f"Building into [bold]{builder.out_root}[/bold]...")
    try:
        stats = builder.build()
    except KsdError as exc:
        _fail(exc)

    console.print(f"Built: {stats.built}, failed: {stats.failed}")
    if stats.errors:
        for error in stats.errors:
            console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False)
        raise typer.Exit(code=1)
    return builder.out_root


@app.command()
def build(
    directory: Optional[Path] = typer.Argument(None, help="Directory with declaration files."),
    out: Path = typer.Option(BuildConfig().out_dir, "--out", help="Output directory"),
    keep_going: bool = typer.Option(
        False, "--keep-going", help="Build every file and report all errors at the end"
    ),
    strict_docstring: bool = typer.Option(
        False, "--strict-docstring", help="Stop collecting docstrings at the first code line"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Build declaration files into .create-or-alter command scripts."""
    _setup_logging(verbose)
    root = _resolve_root(directory)
    config = BuildConfig(out_dir=out, keep_going=keep_going, stop_at_code=strict_docstring)
    _run_build(root, config)


@app.command()
def sync(
    directory: Optional[Path] = typer.Argument(None, help="Directory with declaration files."),
    cluster: str = typer.Option(..., "--cluster", "-c", help="Database endpoint, https://<cluster>/<database>"),
    from_out: Optional[Path] = typer.Option(
        None, "--from-out", help="Already built output directory; skips the build step"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Synchronize built scripts to a cluster database."""
    _setup_logging(verbose)
    try:
        connection = parse_endpoint(cluster)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--cluster") from exc

    root = _resolve_root(directory)
    config = BuildConfig()
    if from_out is None:
        out_root = _run_build(root, config)
    else:
        out_root = from_out if from_out.is_absolute() else root / from_out
        if not out_root.is_dir():
            raise typer.BadParameter(f"Directory not found: {from_out}", param_hint="--from-out")

    items = plan_sync(out_root, config.extensions)
    if not items:
        console.print("[yellow]No scripts to sync.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Script")
    table.add_column("Database")
    for item in items:
        table.add_row(str(item.relative_path), connection.database)
    console.print(table)

    try:
        synchronize(connection, items)
    except KsdError as exc:
        _fail(exc)
