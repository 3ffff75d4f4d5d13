"""writeguard schema definitions.

Pydantic v2 models and enums shared by the engine, actions and prompt.
"""

from writeguard.schemas.conflict import (
    Action,
    Choice,
    ConflictOptions,
    ConflictQuestion,
    ConflictSession,
    DiffMode,
)

__all__ = [
    "Action",
    "Choice",
    "ConflictOptions",
    "ConflictQuestion",
    "ConflictSession",
    "DiffMode",
]
