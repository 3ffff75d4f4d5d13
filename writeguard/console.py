"""Shared Rich console and status iconography.

Status lines go to stderr so they never mix with data written to stdout
by a pipeline.
"""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from writeguard.file import VirtualFile

err_console = Console(stderr=True, highlight=False)

SUCCESS = Text("✔", style="green")
WARNING = Text("⚠", style="yellow")
ERROR = Text("✖", style="red")
INFO = Text("ℹ", style="cyan")


def relative(file: VirtualFile) -> Text:
    """Display path of ``file`` in the path colour."""
    return Text(file.relative, style="yellow")


def status(icon: Text, *parts: str | Text) -> Text:
    """Assemble a one-line status message: icon followed by parts."""
    line = Text.assemble(icon)
    for part in parts:
        line.append(" ")
        line.append(part)
    return line
