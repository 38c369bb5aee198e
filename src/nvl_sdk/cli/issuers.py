"""Locally registered issuers for the nvl CLI."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from pathlib import Path

from nvl_sdk.cli.prompts import Prompter, Question
from nvl_sdk.cli.store import FileStore, StoreError

_ISSUER_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class IssuerError(ValueError):
    """Raised when an issuer cannot be selected or loaded."""


@dataclass(frozen=True)
class Issuer:
    name: str
    issuer: str
    access_token: str | None = None


def validate_issuer_name(name: str) -> str:
    normalized = name.strip()
    if not _ISSUER_NAME_RE.match(normalized):
        raise IssuerError(f"invalid issuer name: {name!r}")
    return normalized


class IssuerStore:
    """One JSON document per issuer under ``root``."""

    def __init__(self, root: str | Path, store: FileStore | None = None) -> None:
        self.root = Path(root)
        self.store = store or FileStore()

    def _path(self, name: str) -> Path:
        return self.root / f"{validate_issuer_name(name)}.json"

    def list(self) -> list[Issuer]:
        if not self.store.exists(self.root, "directory"):
            return []
        return [self.load(path.stem) for path in sorted(self.root.glob("*.json"))]

    def load(self, name: str) -> Issuer:
        path = self._path(name)
        if not self.store.exists(path, "file"):
            raise IssuerError(f"unknown issuer: {name}")
        try:
            payload = self.store.read(path, "json")
        except StoreError as exc:
            raise IssuerError(str(exc)) from exc
        if not isinstance(payload, dict) or not isinstance(payload.get("issuer"), str):
            raise IssuerError(f"issuer file must contain an issuer url: {path}")
        token = payload.get("access_token")
        return Issuer(
            name=path.stem,
            issuer=payload["issuer"],
            access_token=token if isinstance(token, str) and token else None,
        )

    def save(self, issuer: Issuer) -> Path:
        payload = {key: value for key, value in asdict(issuer).items() if value is not None}
        return self.store.write(self._path(issuer.name), payload, "json")

    def remove(self, name: str) -> None:
        self.store.delete(self._path(name))


def _match_issuer_url(issuers: IssuerStore, url: str) -> Issuer:
    if issuers.store.exists(issuers.root, "directory"):
        for path in sorted(issuers.root.glob("*.json")):
            try:
                candidate = issuers.load(path.stem)
            except IssuerError:
                continue
            if candidate.issuer.rstrip("/") == url.rstrip("/"):
                return candidate
    raise IssuerError(f"unknown issuer: {url}")


def resolve_issuer(
    explicit: str | None,
    *,
    issuers: IssuerStore,
    prompter: Prompter,
    default: str | None = None,
) -> Issuer:
    if explicit:
        if _ISSUER_NAME_RE.match(explicit.strip()):
            return issuers.load(explicit)
        return _match_issuer_url(issuers, explicit)

    if default:
        return issuers.load(default)

    available = issuers.list()
    if not available:
        raise IssuerError("no issuers configured; run `nvl issuer:add` first")
    if len(available) == 1:
        return available[0]

    answers = prompter.ask(
        [
            Question(
                kind="list",
                name="issuer",
                message="Select an issuer",
                choices=tuple(item.name for item in available),
            )
        ]
    )
    selected = str(answers["issuer"])
    for candidate in available:
        if candidate.name == selected:
            return candidate
    raise IssuerError(f"unknown issuer: {selected}")
