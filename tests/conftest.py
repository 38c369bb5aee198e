from __future__ import annotations

import json
from pathlib import Path

import pytest

from nvl_sdk.errors import AuthorityRequestError
from nvl_sdk.schemas import ProviderConfiguration, Scope, ScopeInput

ISSUER_URL = "https://auth.example.com"
ACCESS_TOKEN = "tok-123"


class FakeScopes:
    def __init__(self) -> None:
        self.items: dict[str, Scope] = {}
        self.calls: list[tuple] = []
        self.error: Exception | None = None

    def seed(self, *scopes: Scope) -> None:
        for scope in scopes:
            self.items[scope.name] = scope

    def _record(self, *call) -> None:
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    def _lookup(self, name: str) -> Scope:
        try:
            return self.items[name]
        except KeyError:
            raise AuthorityRequestError(
                "request failed: 404 Not found",
                status_code=404,
                detail="Not found",
            ) from None

    def create(self, data: ScopeInput, *, token: str | None = None) -> Scope:
        self._record("create", data.to_payload(), token)
        scope = Scope(**data.to_payload(), created=1700000000000, modified=1700000000000)
        self.items[scope.name] = scope
        return scope

    def list(self, *, token: str | None = None) -> list[Scope]:
        self._record("list", token)
        return list(self.items.values())

    def get(self, name: str, *, token: str | None = None) -> Scope:
        self._record("get", name, token)
        return self._lookup(name)

    def update(self, name: str, data: ScopeInput, *, token: str | None = None) -> Scope:
        self._record("update", name, data.to_payload(), token)
        current = self._lookup(name)
        updated = current.model_copy(update=data.to_payload())
        del self.items[name]
        self.items[updated.name] = updated
        return updated

    def delete(self, name: str, *, token: str | None = None) -> None:
        self._record("delete", name, token)
        self._lookup(name)
        del self.items[name]


class FakeClient:
    def __init__(self) -> None:
        self.issuer = ISSUER_URL
        self.access_token: str | None = ACCESS_TOKEN
        self.scopes = FakeScopes()
        self.discover_error: Exception | None = None
        self.discovered = False
        self.built_with: dict | None = None

    def __call__(self, **kwargs) -> "FakeClient":
        # Stands in for the AuthorityClient constructor.
        self.built_with = kwargs
        self.issuer = kwargs["issuer"]
        self.access_token = kwargs.get("access_token")
        return self

    def discover(self) -> ProviderConfiguration:
        if self.discover_error is not None:
            raise self.discover_error
        self.discovered = True
        return ProviderConfiguration(issuer=self.issuer)


class ScriptedPrompter:
    """Answers by question name; unanswered questions accept the shown value."""

    def __init__(self, answers: dict[str, object] | None = None) -> None:
        self.answers = dict(answers or {})
        self.questions: list = []

    def ask(self, questions) -> dict[str, object]:
        self.questions.extend(questions)
        result = {}
        for question in questions:
            if question.name in self.answers:
                result[question.name] = self.answers[question.name]
            else:
                result[question.name] = question.initial
        return result

    def question(self, name: str):
        return next(question for question in self.questions if question.name == name)


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def scripted_prompter():
    return ScriptedPrompter


@pytest.fixture
def cli_config(tmp_path: Path, monkeypatch) -> Path:
    """Config file pointing at a temporary issuers dir with one issuer."""
    monkeypatch.delenv("NVL_ISSUER", raising=False)
    monkeypatch.delenv("NVL_ISSUERS_DIR", raising=False)

    issuers_dir = tmp_path / "issuers"
    issuers_dir.mkdir()
    (issuers_dir / "local.json").write_text(
        json.dumps({"issuer": ISSUER_URL, "access_token": ACCESS_TOKEN}),
        encoding="utf-8",
    )
    config_path = tmp_path / "config.toml"
    config_path.write_text(f'issuers_dir = "{issuers_dir.as_posix()}"\n', encoding="utf-8")
    return config_path
