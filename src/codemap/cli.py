"""CLI entry point for codemap."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from .errors import CodemapError, ScanRootError
from .formatters import format_json, format_markdown
from .mapper import CodebaseMapper
from .project import load_config

app = typer.Typer(
    name="codemap",
    help="Structural map of a codebase: declarations, imports and nesting.",
    add_completion=False,
)

# Diagnostics go to stderr so stdout stays machine-parseable.
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("codemap")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=err_console, show_path=False, show_time=False))


@app.command()
def main(
    dirs: Optional[list[str]] = typer.Argument(None, help="Directories to scan, relative to --root."),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Project root (paths and cache are relative to it)."),
    json_output: bool = typer.Option(False, "--json", help="Emit the structured JSON document."),
    no_synthesize: bool = typer.Option(False, "--no-synthesize", help="Never call the generation oracle."),
    oracle: Optional[str] = typer.Option(None, "--oracle", help="Oracle command, e.g. 'claude -p -'."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log per-file diagnostics."),
) -> None:
    """Map the source files under DIRS."""
    _configure_logging(verbose)
    root = root.resolve()

    try:
        cfg = load_config(root)
    except CodemapError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)

    if no_synthesize:
        cfg.synthesize = False
    if oracle:
        cfg.oracle_command = shlex.split(oracle)

    try:
        codebase = CodebaseMapper(root, config=cfg).map(dirs or ["."])
    except ScanRootError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)

    typer.echo(format_json(codebase) if json_output else format_markdown(codebase))


if __name__ == "__main__":
    app()
