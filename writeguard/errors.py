"""Exception taxonomy for writeguard.

I/O failures are not wrapped: they surface as the built-in ``OSError``
family so callers can handle them the way they handle any other read
failure.
"""

from __future__ import annotations


class WriteGuardError(Exception):
    """Base class for all writeguard errors."""


class ConfigurationError(WriteGuardError, ValueError):
    """Raised when options are missing or invalid.

    Raised before any file is processed, e.g. when a batch call has no
    ``dest`` or a config file contains an unknown key.
    """


class PromptError(WriteGuardError):
    """Raised when the conflict prompt cannot produce an answer.

    Args:
        filepath: Path of the proposed file being asked about.
        message: Optional custom message.
    """

    def __init__(self, filepath: str = "", message: str | None = None) -> None:
        self.filepath = filepath
        if message is None:
            message = f"Prompt interrupted for {filepath}" if filepath else "Prompt interrupted"
        super().__init__(message)
