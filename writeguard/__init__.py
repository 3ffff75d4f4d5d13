"""writeguard: ask before generated files overwrite something different."""

__version__ = "0.1.0"

from writeguard.actions import Actions
from writeguard.diff import render_diff
from writeguard.engine import Conflicts, detect, resolve_files
from writeguard.errors import ConfigurationError, PromptError, WriteGuardError
from writeguard.file import ContentState, VirtualFile
from writeguard.pipeline import conflict_stage
from writeguard.prompt import ConsolePrompt, ScriptedPrompt, create_question
from writeguard.same import is_equal
from writeguard.schemas.conflict import (
    Action,
    ConflictOptions,
    ConflictQuestion,
    ConflictSession,
    DiffMode,
)

__all__ = [
    "Action",
    "Actions",
    "ConfigurationError",
    "ConflictOptions",
    "ConflictQuestion",
    "ConflictSession",
    "Conflicts",
    "ConsolePrompt",
    "ContentState",
    "DiffMode",
    "PromptError",
    "ScriptedPrompt",
    "VirtualFile",
    "WriteGuardError",
    "conflict_stage",
    "create_question",
    "detect",
    "is_equal",
    "render_diff",
    "resolve_files",
]
