"""Action table for conflict decisions.

Each method applies one action token to the session and prints a status
line. Silence suppresses the status line only; state changes are the
same either way.
"""

from __future__ import annotations

import logging

from rich.console import Console

from writeguard.console import ERROR, INFO, SUCCESS, WARNING, err_console, relative, status
from writeguard.diff import render_diff
from writeguard.file import VirtualFile
from writeguard.schemas.conflict import Action, ConflictOptions, ConflictSession

logger = logging.getLogger(__name__)


class Actions:
    """Applies action tokens to a ``ConflictSession``."""

    def __init__(
        self,
        session: ConflictSession,
        options: ConflictOptions,
        console: Console | None = None,
    ) -> None:
        self.session = session
        self.options = options
        self._console = console or err_console

    def _log(self, *renderables) -> None:
        if self.options.is_silent:
            return
        for renderable in renderables:
            self._console.print(renderable)

    def apply(self, token: str, proposed: VirtualFile, existing: VirtualFile) -> Action:
        """Dispatch ``token`` to its handler and record it on the session.

        Unrecognised tokens are treated as ``no``.
        """
        try:
            action = Action(token)
        except ValueError:
            logger.warning("Unrecognised action %r for %s, skipping", token, proposed.path)
            action = Action.NO

        handler = getattr(self, action.value)
        handler(proposed, existing)
        self.session.action = action.value
        return action

    def yes(self, proposed: VirtualFile, existing: VirtualFile) -> None:
        self.session.yes = True
        self.session.add(proposed)
        self._log(status(SUCCESS, "Overwriting", relative(proposed)))

    def no(self, proposed: VirtualFile, existing: VirtualFile) -> None:
        self.session.no = True
        self._log(status(WARNING, "Skipping", relative(proposed)))

    def skip(self, proposed: VirtualFile, existing: VirtualFile) -> None:
        self.session.skip = True
        self._log(status(WARNING, "Skipping", relative(proposed), "File is identical."))

    def all(self, proposed: VirtualFile, existing: VirtualFile) -> None:
        self.session.all = True
        self.session.add(proposed)
        self._log(
            status(SUCCESS, "All remaining files will be written, overwriting any existing files.")
        )

    def abort(self, proposed: VirtualFile, existing: VirtualFile) -> None:
        self.session.abort = True
        self.session.clear()
        self._log(status(ERROR, "Stopping, no files will be overwritten."))

    def diff(self, proposed: VirtualFile, existing: VirtualFile) -> None:
        """Print the diff. Not terminal: the engine asks again afterwards."""
        if self.options.is_silent:
            return
        self._log(
            status(INFO, "Diff comparison of", relative(proposed), "and existing content."),
            render_diff(existing, proposed, self.options),
        )
