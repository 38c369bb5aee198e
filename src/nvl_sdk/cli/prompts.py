"""Interactive question prompts for the nvl CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, Sequence, TextIO

from rich.console import Console
from rich.prompt import Confirm, Prompt

QuestionKind = Literal["input", "confirm", "list"]


@dataclass(frozen=True)
class Question:
    kind: QuestionKind
    name: str
    message: str
    value: object | None = None
    default: object | None = None
    choices: tuple[str, ...] = ()
    trim: bool = False

    @property
    def initial(self) -> object | None:
        """Pre-filled value when present, otherwise the default."""
        return self.value if self.value is not None else self.default


class Prompter(Protocol):
    def ask(self, questions: Sequence[Question]) -> dict[str, object]: ...


class RichPrompter:
    def __init__(self, console: Console | None = None, *, stream: TextIO | None = None) -> None:
        self.console = console or Console()
        self.stream = stream

    def ask(self, questions: Sequence[Question]) -> dict[str, object]:
        return {question.name: self._ask_one(question) for question in questions}

    def _ask_one(self, question: Question) -> object:
        initial = question.initial
        if question.kind == "confirm":
            return Confirm.ask(
                question.message,
                console=self.console,
                stream=self.stream,
                default=bool(initial) if initial is not None else False,
            )

        if question.kind == "list":
            if not question.choices:
                raise ValueError(f"question {question.name!r} has no choices")
            for choice in question.choices:
                self.console.print(f"  - {choice}", markup=False, highlight=False)
            default = str(initial) if initial in question.choices else question.choices[0]
            return Prompt.ask(
                question.message,
                console=self.console,
                stream=self.stream,
                choices=list(question.choices),
                default=default,
                show_choices=False,
            )

        if initial is None:
            answer = Prompt.ask(question.message, console=self.console, stream=self.stream)
        else:
            answer = Prompt.ask(
                question.message,
                console=self.console,
                default=str(initial),
                stream=self.stream,
            )
        return answer.strip() if question.trim else answer
