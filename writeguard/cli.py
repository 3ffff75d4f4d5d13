"""writeguard CLI: Typer + Rich terminal interface.

Commands: check, diff.
"""

from __future__ import annotations

import asyncio
import errno
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from writeguard import __version__
from writeguard.config import load_options
from writeguard.diff import render_diff
from writeguard.engine import resolve_files
from writeguard.errors import ConfigurationError, PromptError
from writeguard.file import VirtualFile
from writeguard.schemas.conflict import ConflictOptions, DiffMode

console = Console()

app = typer.Typer(
    name="writeguard",
    help="Ask before generated files overwrite something different.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"writeguard {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """writeguard: conflict checks for generated files."""


def _write_files(files: list[VirtualFile], options: ConflictOptions) -> list[Path]:
    written: list[Path] = []
    for file in files:
        target = options.resolve_dest(file)
        target.parent.mkdir(parents=True, exist_ok=True)
        contents = file.ensure_contents()
        if contents is None:
            raise FileNotFoundError(errno.ENOENT, "Proposed file not found", str(file.path))
        target.write_bytes(contents)
        written.append(target)
    return written


@app.command()
def check(
    sources: list[Path] = typer.Argument(
        ..., help="Proposed files to write (relative to --cwd)",
    ),
    dest: str = typer.Option(
        None, "--dest", "-d",
        help="Destination directory",
    ),
    cwd: Path = typer.Option(
        None, "--cwd",
        help="Base directory for relative paths",
    ),
    force: bool = typer.Option(
        False, "--force", "-f",
        help="Overwrite every existing file without asking",
    ),
    silent: bool = typer.Option(
        False, "--silent", "-s",
        help="Suppress status lines",
    ),
    chars: bool = typer.Option(
        False, "--chars",
        help="Show character-level diffs",
    ),
    config: Path = typer.Option(
        None, "--config", "-c",
        help="TOML config file ([writeguard] or [tool.writeguard])",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run",
        help="Resolve conflicts but do not write anything",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Check SOURCES against DEST and write the ones you approve."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        options = load_options(
            config,
            dest=dest,
            cwd=cwd,
            overwrite=True if force else None,
            silent=True if silent else None,
            diff_mode=DiffMode.CHARS if chars else None,
        )
        accepted = asyncio.run(resolve_files(sources, options))
    except (ConfigurationError, PromptError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    if not accepted:
        console.print("[dim]No files to write.[/dim]")
        return

    table = Table(title="Dry run" if dry_run else "Written", show_lines=False)
    table.add_column("File", style="cyan")
    table.add_column("Destination")

    try:
        targets = (
            [options.resolve_dest(f) for f in accepted]
            if dry_run
            else _write_files(accepted, options)
        )
    except (ConfigurationError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    for file, target in zip(accepted, targets):
        table.add_row(file.relative, str(target))
    console.print(table)


@app.command()
def diff(
    existing: Path = typer.Argument(..., help="Existing file"),
    proposed: Path = typer.Argument(..., help="Proposed replacement"),
    chars: bool = typer.Option(
        False, "--chars",
        help="Show a character-level diff",
    ),
) -> None:
    """Show how PROPOSED differs from EXISTING."""
    options = ConflictOptions(diff_mode=DiffMode.CHARS if chars else DiffMode.LINES)
    try:
        renderable = render_diff(VirtualFile(existing), VirtualFile(proposed), options)
    except OSError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    console.print(renderable)
