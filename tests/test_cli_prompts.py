from __future__ import annotations

import io

from rich.console import Console

from nvl_sdk.cli.prompts import Question, RichPrompter


def _prompter(answers: str) -> tuple[RichPrompter, io.StringIO]:
    out = io.StringIO()
    console = Console(file=out, highlight=False)
    return RichPrompter(console, stream=io.StringIO(answers)), out


def test_question_prefill_wins_over_default() -> None:
    assert Question(kind="input", name="n", message="N", value="a", default="b").initial == "a"
    assert Question(kind="input", name="n", message="N", default="b").initial == "b"
    assert Question(kind="confirm", name="r", message="R", value=False, default=True).initial is False


def test_text_confirm_and_choice_answers() -> None:
    prompter, out = _prompter("  read:files  \ny\nb\n")

    answers = prompter.ask(
        [
            Question(kind="input", name="name", message="Name", trim=True),
            Question(kind="confirm", name="restricted", message="Restricted"),
            Question(kind="list", name="scope_name", message="Select a scope", choices=("a", "b")),
        ]
    )

    assert answers == {"name": "read:files", "restricted": True, "scope_name": "b"}
    assert "Select a scope" in out.getvalue()
    assert "- a" in out.getvalue()


def test_end_of_input_accepts_prefilled_values() -> None:
    prompter, _ = _prompter("")

    answers = prompter.ask(
        [
            Question(kind="input", name="name", message="Name", value="openid", default="x"),
            Question(kind="confirm", name="restricted", message="Restricted", default=True),
            Question(kind="list", name="issuer", message="Select an issuer", choices=("p", "s")),
        ]
    )

    assert answers == {"name": "openid", "restricted": True, "issuer": "p"}


def test_invalid_choice_is_asked_again() -> None:
    prompter, out = _prompter("z\na\n")

    answers = prompter.ask(
        [Question(kind="list", name="scope_name", message="Select a scope", choices=("a", "b"))]
    )

    assert answers == {"scope_name": "a"}
    assert "Please select one of the available options" in out.getvalue()
