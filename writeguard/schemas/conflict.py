"""Conflict resolution schemas.

Defines the action tokens, batch options, per-batch session state and
the question descriptor handed to the prompt collaborator.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from writeguard.errors import ConfigurationError

if TYPE_CHECKING:
    from writeguard.file import VirtualFile


class Action(StrEnum):
    """Action token returned by a decision source."""

    YES = "yes"
    NO = "no"
    ALL = "all"
    ABORT = "abort"
    DIFF = "diff"
    SKIP = "skip"


class DiffMode(StrEnum):
    """Granularity of text diffs."""

    LINES = "lines"
    CHARS = "chars"


class ConflictOptions(BaseModel):
    """Options recognised by the batch entry point and the engine."""

    cwd: Path = Field(
        default_factory=Path.cwd, description="Base for resolving relative paths"
    )
    dest: str | Path | Callable[..., Any] | None = Field(
        default=None,
        description="Destination directory, or a function mapping a file to one",
    )
    overwrite: bool | Callable[..., Any] | None = Field(
        default=None,
        description="Force overwrite, or a (possibly async) per-file predicate",
    )
    on_conflict: Callable[..., Any] | None = Field(
        default=None, description="Observer awaited before each conflict prompt"
    )
    silent: bool = Field(default=False, description="Suppress status lines")
    show: bool = Field(default=True, description="show=False is the same as silent=True")
    diff_mode: DiffMode = Field(default=DiffMode.LINES, description="Text diff granularity")
    prompt: Callable[..., Any] | None = Field(
        default=None,
        description="Factory taking a ConflictQuestion and returning a prompt",
    )
    probe_size: int = Field(
        default=4100, gt=0, description="Leading bytes sniffed for binary detection"
    )

    @classmethod
    def coerce(cls, value: Any = None) -> ConflictOptions:
        """Build options from an instance, mapping, or bare destination."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(**value)
        if isinstance(value, (str, Path)) or callable(value):
            return cls(dest=value)
        raise ConfigurationError(
            f"expected options, a mapping or a destination, got {type(value).__name__}"
        )

    @property
    def is_silent(self) -> bool:
        return self.silent or not self.show

    def resolve_dest(self, file: VirtualFile) -> Path:
        """Return the destination path for ``file``.

        Raises:
            ConfigurationError: If no ``dest`` is configured.
        """
        if not self.dest:
            raise ConfigurationError("expected destination path to be a string or function")

        dest = self.dest(file) if callable(self.dest) else self.dest
        if not dest:
            raise ConfigurationError(f"destination function returned nothing for {file.path}")
        return (self.cwd / Path(dest)).resolve() / file.basename


@dataclass
class ConflictSession:
    """Mutable state shared by every detection in one batch.

    ``all`` and ``abort`` only ever go from False to True.
    """

    files: list[VirtualFile] = field(default_factory=list)
    abort: bool = False
    all: bool = False
    action: str | None = None
    yes: bool = False
    no: bool = False
    skip: bool = False

    def add(self, file: VirtualFile) -> None:
        """Append ``file`` unless this exact instance is already queued."""
        if not any(f is file for f in self.files):
            self.files.append(file)

    def clear(self) -> None:
        self.files.clear()


class Choice(BaseModel):
    """One entry in the conflict prompt."""

    key: str = Field(description="Single-character shortcut")
    name: str = Field(description="Human-readable hint")
    value: Action = Field(description="Token returned when chosen")


class ConflictQuestion(BaseModel):
    """Question descriptor handed to the prompt collaborator."""

    name: str = Field(default="conflicts")
    message: str = Field(description="Question text")
    filepath: str = Field(default="", description="Display path of the proposed file")
    choices: list[Choice] = Field(default_factory=list)
    default: str = Field(default="x", description="Key used when the answer is empty")

    def lookup(self, key: str) -> Choice | None:
        key = key.strip().lower()
        for choice in self.choices:
            if key in (choice.key, choice.value.value):
                return choice
        return None
