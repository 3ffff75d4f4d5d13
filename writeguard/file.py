"""Virtual file handle used by the conflict engine.

A ``VirtualFile`` pairs a path with optional in-memory contents. Content
loading is explicit: ``ensure_contents()`` reads the backing file once
and records whether it was loaded or missing, so the equality check and
the diff renderer never trigger hidden re-reads.
"""

from __future__ import annotations

import logging
import os
import stat as statmod
from enum import StrEnum
from pathlib import Path

from writeguard.schemas.conflict import Action

logger = logging.getLogger(__name__)


class ContentState(StrEnum):
    """Cache state of a file's contents."""

    UNLOADED = "unloaded"
    LOADED = "loaded"
    MISSING = "missing"


class VirtualFile:
    """A file that may or may not exist on disk yet.

    Args:
        path: File path. Relative paths are resolved against ``cwd``.
        contents: Optional contents. Strings are encoded as UTF-8.
        cwd: Working directory used to resolve the path.
        base: Base directory for ``relative``. Defaults to ``cwd``.
        stat: Optional pre-fetched ``os.stat_result``.
        action: Optional pre-set action that bypasses the prompt.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        contents: bytes | str | None = None,
        *,
        cwd: str | os.PathLike[str] | None = None,
        base: str | os.PathLike[str] | None = None,
        stat: os.stat_result | None = None,
        action: Action | str | None = None,
    ) -> None:
        self.history: list[Path] = []
        self._cwd = Path(cwd).resolve() if cwd else None
        self._base = Path(base) if base else None
        self._contents: bytes | None = None
        self._state = ContentState.UNLOADED
        self._stat = stat
        self.action = action
        self.path = path
        if contents is not None:
            self.contents = contents

    def __repr__(self) -> str:
        state = f" <{len(self._contents)} bytes>" if self._contents is not None else ""
        return f'<VirtualFile "{self.relative}"{state}>'

    # ── Paths ────────────────────────────────────────────────────

    @property
    def path(self) -> Path:
        """The most recent entry in ``history``."""
        return self.history[-1]

    @path.setter
    def path(self, value: str | os.PathLike[str]) -> None:
        resolved = (self.cwd / Path(value)).resolve()
        if not self.history or resolved != self.history[-1]:
            self.history.append(resolved)

    @property
    def cwd(self) -> Path:
        return self._cwd or Path.cwd()

    @property
    def base(self) -> Path:
        return (self.cwd / self._base).resolve() if self._base else self.cwd

    @base.setter
    def base(self, value: str | os.PathLike[str] | None) -> None:
        self._base = Path(value) if value else None

    @property
    def relative(self) -> str:
        """Display path relative to ``base``."""
        return os.path.relpath(self.path, self.base)

    @property
    def basename(self) -> str:
        return self.path.name

    @property
    def dirname(self) -> Path:
        return self.path.parent

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def extname(self) -> str:
        return self.path.suffix

    # ── Contents ─────────────────────────────────────────────────

    @property
    def contents(self) -> bytes | None:
        """Cached contents, or None when not loaded or missing."""
        return self._contents

    @contents.setter
    def contents(self, value: bytes | str | None) -> None:
        if value is None:
            self._contents = None
            self._state = ContentState.UNLOADED
            return
        self._contents = value.encode("utf-8") if isinstance(value, str) else bytes(value)
        self._state = ContentState.LOADED

    @property
    def state(self) -> ContentState:
        return self._state

    def ensure_contents(self) -> bytes | None:
        """Load contents from disk exactly once.

        Returns:
            The contents, or None when the file is missing or a directory.

        Raises:
            OSError: If the file exists but cannot be read.
        """
        if self._state is not ContentState.UNLOADED:
            return self._contents

        if not self.exists() or self.is_directory():
            self._state = ContentState.MISSING
            return None

        logger.debug("Reading %s", self.path)
        self._contents = self.path.read_bytes()
        self._state = ContentState.LOADED
        return self._contents

    def read_chunk(self, size: int) -> bytes | None:
        """Return up to ``size`` leading bytes without filling the cache."""
        if self._contents is not None:
            return self._contents[:size]
        if self._state is ContentState.MISSING or not self.exists() or self.is_directory():
            return None
        with open(self.path, "rb") as f:
            return f.read(size)

    @property
    def size(self) -> int | None:
        """Byte length from contents when loaded, else from ``stat``."""
        if self._contents is not None:
            return len(self._contents)
        stat = self.stat
        return stat.st_size if stat is not None else None

    # ── Filesystem ───────────────────────────────────────────────

    @property
    def stat(self) -> os.stat_result | None:
        """Filesystem metadata, fetched once. None when the path does not exist."""
        if self._stat is None and self.exists():
            self._stat = self.path.stat()
        return self._stat

    @stat.setter
    def stat(self, value: os.stat_result | None) -> None:
        self._stat = value

    def exists(self) -> bool:
        if self._stat is not None:
            return True
        return self.path.exists()

    def is_null(self) -> bool:
        return self._contents is None

    def is_buffer(self) -> bool:
        return self._contents is not None

    def is_directory(self) -> bool:
        if self._contents is not None:
            return False
        st = self.stat
        return st is not None and statmod.S_ISDIR(st.st_mode)
