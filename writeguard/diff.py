"""Human-readable diffs between an existing file and a proposed file.

Text files get a line diff (or a character diff when neither side has a
newline, or when character mode is requested). Binary files get a Rich
table comparing path, size, timestamps and, for raster images, pixel
dimensions. Binary detection only probes a bounded prefix of each file;
full contents are read only when a text diff is actually produced.
"""

from __future__ import annotations

import difflib
import io
import logging
import time

from PIL import Image, UnidentifiedImageError
from rich.console import Console, RenderableType
from rich.table import Table
from rich.text import Text

from writeguard.file import VirtualFile
from writeguard.schemas.conflict import ConflictOptions, DiffMode

logger = logging.getLogger(__name__)

_ADDED = "green"
_REMOVED = "red"

_UNITS = ["bytes", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"]

# Raster formats (as named by Pillow) that get a Dimensions row
IMAGE_FORMATS = frozenset({"BMP", "DDS", "GIF", "JPEG", "PNG", "PSD", "TIFF", "WEBP"})

# Leading signatures of common binary formats
_BINARY_SIGNATURES = (
    b"\x89PNG",
    b"GIF8",
    b"\xff\xd8\xff",
    b"PK\x03\x04",
    b"%PDF",
    b"\x7fELF",
    b"BM",
)


# ── Classification ────────────────────────────────────────────────


def is_binary(chunk: bytes | None) -> bool:
    """Guess whether a leading chunk of bytes belongs to a binary file."""
    if not chunk:
        return False

    for sig in _BINARY_SIGNATURES:
        if chunk.startswith(sig):
            # "BM" is also plausible text; require a NUL to confirm a bitmap
            if sig == b"BM" and b"\x00" not in chunk:
                continue
            return True

    if b"\x00" in chunk:
        return True

    non_text = sum(1 for b in chunk if b < 9 or 13 < b < 32)
    return non_text / len(chunk) > 0.3


def image_dimensions(file: VirtualFile) -> str | None:
    """Return ``"W x H"`` for a recognised raster image, else None."""
    if file.is_null() and not file.exists():
        return None

    source = io.BytesIO(file.contents) if file.contents is not None else file.path
    try:
        with Image.open(source) as img:
            if img.format not in IMAGE_FORMATS:
                return None
            width, height = img.size
    except (UnidentifiedImageError, OSError):
        return None
    return f"{width} x {height}"


# ── Formatting helpers ────────────────────────────────────────────


def format_bytes(number: int | float, precision: int = 2) -> str:
    """Format a byte count with decimal units, e.g. ``1.2 KB``."""
    for exponent in range(len(_UNITS) - 1, -1, -1):
        scale = 1000 ** exponent
        if scale <= number + 1:
            return f"{round(number / scale, precision):g} {_UNITS[exponent]}"
    return f"{number:g} bytes"


def format_date(timestamp: float) -> str:
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(timestamp))


def shorten_path(filepath: str) -> str:
    """Trim long paths to their first 5 and last 21 characters."""
    if len(filepath) < 24:
        return filepath
    return filepath[:5] + "..." + filepath[-21:]


def render_to_string(renderable: RenderableType, width: int = 100) -> str:
    """Render a diff renderable to uncoloured text."""
    buf = io.StringIO()
    console = Console(file=buf, width=width, no_color=True, highlight=False)
    console.print(renderable)
    return buf.getvalue()


# ── Text diffs ────────────────────────────────────────────────────


def _legend() -> Text:
    text = Text()
    text.append("+ added", style=_ADDED)
    text.append("\n")
    text.append("- removed", style=_REMOVED)
    text.append("\n\n")
    return text


def diff_lines(existing: str, proposed: str) -> Text:
    """Line-granularity diff with ``+``/``-`` prefixed changed lines."""
    old_lines = existing.splitlines(keepends=True)
    new_lines = proposed.splitlines(keepends=True)
    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)

    text = _legend()

    def emit(lines: list[str], prefix: str = "", style: str | None = None) -> None:
        for line in lines:
            if not line.endswith("\n"):
                line += "\n"
            text.append(f"{prefix}{line}", style=style)

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            emit(old_lines[i1:i2])
            continue
        if tag in ("delete", "replace"):
            emit(old_lines[i1:i2], "-", _REMOVED)
        if tag in ("insert", "replace"):
            emit(new_lines[j1:j2], "+", _ADDED)
    return text


def diff_chars(existing: str, proposed: str) -> Text:
    """Character-granularity diff; changed runs are coloured, not prefixed."""
    matcher = difflib.SequenceMatcher(None, existing, proposed, autojunk=False)

    text = _legend()
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            text.append(existing[i1:i2])
            continue
        if tag in ("delete", "replace"):
            text.append(existing[i1:i2], style=_REMOVED)
        if tag in ("insert", "replace"):
            text.append(proposed[j1:j2], style=_ADDED)
    return text


def diff_text(existing: str, proposed: str, chars: bool = False) -> Text:
    """Pick line or character granularity and diff two strings."""
    if chars or ("\n" not in existing and "\n" not in proposed):
        return diff_chars(existing, proposed)
    return diff_lines(existing, proposed)


# ── Binary diffs ──────────────────────────────────────────────────


def _metadata_table(
    existing: VirtualFile,
    proposed: VirtualFile,
    dimensions: bool,
) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("")
    table.add_column("Existing")
    table.add_column("Replacement")
    table.add_column("Diff")

    stat = existing.stat
    old_size = existing.size if stat is not None else None
    new_size = proposed.size

    if old_size is not None and new_size is not None:
        sign = "-" if old_size > new_size else "+"
        size_diff = sign + format_bytes(abs(old_size - new_size))
    else:
        size_diff = "N/A"

    table.add_row(
        "Path",
        shorten_path(str(existing.path)) if stat is not None else "-",
        shorten_path(str(proposed.path)),
        "",
    )
    table.add_row(
        "Size",
        format_bytes(old_size) if old_size is not None else "-",
        format_bytes(new_size) if new_size is not None else "-",
        size_diff,
    )
    if dimensions:
        table.add_row(
            "Dimensions",
            image_dimensions(existing) or "-",
            image_dimensions(proposed) or "-",
            "N/A",
        )

    if stat is not None:
        created = getattr(stat, "st_birthtime", stat.st_ctime)
        dates = (stat.st_mtime, stat.st_atime, created)
    else:
        dates = (None, None, None)

    for label, value in zip(("Date modified", "Date accessed", "Date created"), dates):
        table.add_row(label, format_date(value) if value is not None else "-", "New", "N/A")
    return table


def diff_binary(existing: VirtualFile, proposed: VirtualFile) -> Table:
    """Metadata comparison table for binary files."""
    return _metadata_table(existing, proposed, dimensions=False)


def diff_image(existing: VirtualFile, proposed: VirtualFile) -> Table:
    """Metadata comparison table with a pixel Dimensions row."""
    return _metadata_table(existing, proposed, dimensions=True)


# ── Entry point ───────────────────────────────────────────────────


def render_diff(
    existing: VirtualFile,
    proposed: VirtualFile,
    options: ConflictOptions | None = None,
) -> Text | Table:
    """Return a Rich renderable describing how ``proposed`` differs from ``existing``.

    Args:
        existing: The file currently at the destination (may not exist).
        proposed: The file that would replace it.
        options: ``diff_mode`` selects character granularity and
            ``probe_size`` bounds the binary sniffing read.

    Raises:
        OSError: If either file exists but cannot be read.
    """
    opts = options or ConflictOptions()

    head_a = existing.read_chunk(opts.probe_size)
    head_b = proposed.read_chunk(opts.probe_size)

    if is_binary(head_a) or is_binary(head_b):
        if image_dimensions(existing) or image_dimensions(proposed):
            logger.debug("Image diff: %s", proposed.path)
            return diff_image(existing, proposed)
        logger.debug("Binary diff: %s", proposed.path)
        return diff_binary(existing, proposed)

    a = existing.ensure_contents() or b""
    b = proposed.ensure_contents() or b""
    return diff_text(
        a.decode("utf-8", errors="replace"),
        b.decode("utf-8", errors="replace"),
        chars=opts.diff_mode == DiffMode.CHARS,
    )
