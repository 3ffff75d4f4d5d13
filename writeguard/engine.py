"""Conflict engine: decides whether a proposed file may be written.

Evaluates, in order: session abort, forced overwrite (option or a prior
``all``), the caller's overwrite predicate, a missing destination,
byte equality, and finally a decision from the pre-set file action or the
prompt. ``diff`` is handled as a loop here: the diff is shown and the
decision is asked for again.

Detections against one session must run one at a time; session state is
not synchronised.
"""

from __future__ import annotations

import errno
import inspect
import logging
import os
from collections.abc import Iterable
from typing import Any

from rich.console import Console

from writeguard.actions import Actions
from writeguard.errors import ConfigurationError, PromptError
from writeguard.file import VirtualFile
from writeguard.prompt import ConsolePrompt, create_question
from writeguard.same import is_equal
from writeguard.schemas.conflict import Action, ConflictOptions, ConflictSession

logger = logging.getLogger(__name__)


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class Conflicts:
    """Runs detections for one batch against a shared session.

    Args:
        options: ``ConflictOptions``, a mapping, or a bare destination.
        session: Existing session to continue. A fresh one by default.
        console: Console for status lines. Defaults to stderr.
    """

    def __init__(
        self,
        options: ConflictOptions | dict | str | None = None,
        session: ConflictSession | None = None,
        console: Console | None = None,
    ) -> None:
        self.options = ConflictOptions.coerce(options)
        self.session = session if session is not None else ConflictSession()
        self.actions = Actions(self.session, self.options, console)

    async def detect(self, proposed: VirtualFile, existing: VirtualFile) -> Action:
        """Resolve one proposed/existing pair and return the action taken.

        Raises:
            OSError: If file contents cannot be read.
            PromptError: If the prompt cannot produce an answer.
        """
        session = self.session
        options = self.options

        if session.abort:
            session.clear()
            session.action = Action.ABORT.value
            return Action.ABORT

        if options.overwrite is True or session.all:
            logger.debug("Forced overwrite: %s", proposed.path)
            session.add(proposed)
            session.action = Action.ALL.value
            return Action.ALL

        if callable(options.overwrite):
            if await _maybe_await(options.overwrite(proposed)) is True:
                logger.debug("Overwrite predicate accepted %s", proposed.path)
                session.add(proposed)
                session.action = Action.YES.value
                return Action.YES

        if not existing.exists():
            logger.debug("No existing file at %s", existing.path)
            session.add(proposed)
            session.action = Action.YES.value
            return Action.YES

        if is_equal(existing, proposed, options):
            return self.actions.apply(Action.SKIP, proposed, existing)

        return await self._resolve_conflict(proposed, existing)

    async def _resolve_conflict(self, proposed: VirtualFile, existing: VirtualFile) -> Action:
        shown_diff = False
        while True:
            if self.options.on_conflict is not None:
                await _maybe_await(self.options.on_conflict(proposed, existing))

            token = proposed.action
            # A pre-set diff is honoured once; after that the prompt decides
            if not token or (shown_diff and token == Action.DIFF):
                token = await self._ask(proposed)

            action = self.actions.apply(token, proposed, existing)
            if action is not Action.DIFF:
                logger.debug("Resolved %s as %s", proposed.path, action.value)
                return action
            shown_diff = True

    async def _ask(self, proposed: VirtualFile) -> str:
        factory = self.options.prompt or ConsolePrompt
        prompt = factory(create_question(proposed))
        if not hasattr(prompt, "run"):
            raise PromptError(str(proposed.path), "Prompt factory returned an object without run()")
        return await prompt.run()

    async def files(self, files: Iterable[str | os.PathLike[str] | VirtualFile]) -> list[VirtualFile]:
        """Detect every file in order and return the accepted files.

        Paths are resolved against ``options.cwd``; each destination is
        ``dest / basename``.

        Raises:
            ConfigurationError: If ``dest`` is not configured.
            FileNotFoundError: If a path-built file is missing or a directory.
        """
        if not self.options.dest:
            raise ConfigurationError("expected destination path to be a string or function")

        for item in files:
            if isinstance(item, VirtualFile):
                proposed = item
            else:
                proposed = VirtualFile(item, cwd=self.options.cwd)
                if not self.session.abort and proposed.ensure_contents() is None:
                    raise FileNotFoundError(
                        errno.ENOENT, "Proposed file not found", str(proposed.path),
                    )
            existing = VirtualFile(self.options.resolve_dest(proposed), cwd=self.options.cwd)
            await self.detect(proposed, existing)

        return list(self.session.files)


async def detect(
    proposed: VirtualFile,
    existing: VirtualFile,
    options: ConflictOptions | dict | str | None = None,
    session: ConflictSession | None = None,
) -> Action:
    """Resolve a single pair against ``session``. See ``Conflicts.detect``."""
    return await Conflicts(options, session).detect(proposed, existing)


async def resolve_files(
    files: Iterable[str | os.PathLike[str] | VirtualFile],
    options: ConflictOptions | dict | str | None = None,
) -> list[VirtualFile]:
    """Batch entry point: detect every file with a fresh session.

    Returns:
        The files approved for writing, in input order.
    """
    return await Conflicts(options).files(files)
