"""Prompt collaborator for conflict decisions.

The engine only needs an object with ``async run() -> str`` returning one
of the action tokens. ``ConsolePrompt`` asks on the terminal with
single-key "expand" choices; ``ScriptedPrompt`` replays canned answers
for automation.
"""

from __future__ import annotations

import signal
import threading
from collections import deque
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.text import Text

from writeguard.console import err_console
from writeguard.errors import PromptError
from writeguard.file import VirtualFile
from writeguard.schemas.conflict import Action, Choice, ConflictQuestion


@runtime_checkable
class ConflictPrompt(Protocol):
    """Anything that can be awaited for an action token."""

    async def run(self) -> str: ...


def create_question(file: VirtualFile) -> ConflictQuestion:
    """Build the question asked when ``file`` conflicts with an existing file."""
    return ConflictQuestion(
        message=f"File exists, want to overwrite {file.relative}?",
        filepath=file.relative,
        choices=[
            Choice(key="y", name="Yes, overwrite this file", value=Action.YES),
            Choice(key="n", name="No, do not overwrite this file", value=Action.NO),
            Choice(key="a", name="Overwrite this file and all remaining files", value=Action.ALL),
            Choice(key="x", name="Abort", value=Action.ABORT),
            Choice(
                key="d",
                name="Show the difference between the existing and the new",
                value=Action.DIFF,
            ),
        ],
    )


@contextmanager
def _default_sigint() -> Iterator[None]:
    """Let Ctrl-C raise KeyboardInterrupt while waiting for input.

    asyncio.run replaces the SIGINT handler with one that only cancels the
    main task, which cannot interrupt a blocking read.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = signal.signal(signal.SIGINT, signal.default_int_handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous if previous is not None else signal.SIG_DFL)


class ConsolePrompt:
    """Interactive terminal prompt.

    Shows ``message (ynaxdh)``; ``h`` lists the choices and unknown keys
    re-ask. An empty answer picks the question's default.
    """

    def __init__(self, question: ConflictQuestion, console: Console | None = None) -> None:
        self._question = question
        self._console = console or err_console

    async def run(self) -> str:
        # Must stay on the main thread so Ctrl-C reaches input()
        return self._ask()

    def _ask(self) -> str:
        keys = "".join(c.key for c in self._question.choices) + "h"
        label = Text.assemble(
            ("? ", "green"),
            (self._question.message, "bold"),
            (f" ({keys}) ", "dim"),
        )

        while True:
            try:
                with _default_sigint():
                    answer = self._console.input(label).strip().lower()
            except (EOFError, KeyboardInterrupt) as e:
                raise PromptError(self._question.filepath) from e

            if not answer:
                answer = self._question.default

            if answer == "h":
                self._print_help()
                continue

            choice = self._question.lookup(answer)
            if choice is not None:
                return choice.value.value

            self._console.print(f"[dim]Use one of {keys}.[/dim]")

    def _print_help(self) -> None:
        for choice in self._question.choices:
            self._console.print(f"  [bold]{choice.key}[/bold]) {choice.name}")
        self._console.print("  [bold]h[/bold]) Help, list all options")


class ScriptedPrompt:
    """Prompt that returns queued answers in order.

    A single ``ScriptedPrompt`` can be shared by every question in a batch
    by returning it from a factory: ``options.prompt = lambda q: scripted``.
    """

    def __init__(self, answers: Iterable[str] = ()) -> None:
        self._answers: deque[str] = deque(answers)
        self.questions: list[ConflictQuestion] = []

    def push(self, *answers: str) -> None:
        self._answers.extend(answers)

    def __call__(self, question: ConflictQuestion) -> ScriptedPrompt:
        self.questions.append(question)
        return self

    async def run(self) -> str:
        if not self._answers:
            filepath = self.questions[-1].filepath if self.questions else ""
            raise PromptError(filepath, f"No scripted answer left for {filepath or 'prompt'}")
        return self._answers.popleft()
