"""Scope administration commands.

Each command is a single pass over the same prologue (resolve the issuer,
build a client, run discovery) followed by its own steps. Failures are raised
to the caller; mapping them to exit codes happens in :mod:`nvl_sdk.cli.main`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from rich.console import Console

from nvl_sdk.cli.display import display_scope, scope_table
from nvl_sdk.cli.issuers import Issuer, IssuerStore, resolve_issuer
from nvl_sdk.cli.prompts import Prompter, Question
from nvl_sdk.client import AuthorityClient
from nvl_sdk.errors import ScopeResolutionError
from nvl_sdk.policy import check_scope_delete, check_scope_rename
from nvl_sdk.schemas import ProviderConfiguration, Scope, ScopeInput

logger = logging.getLogger(__name__)

SCOPE_USAGE = (
    "Usage:",
    "  nvl scope:register [<name>] [--issuer | -i <issuer id>] [--name | -n <name>]\n"
    "\t[--description | -d <description>] [--restricted | -r]",
    "  nvl scope:list [--issuer | -i <issuer id>]",
    "  nvl scope:info [<name>] [--issuer | -i <issuer id>]",
    "  nvl scope:update [<name>] [--issuer | -i <issuer id>] [--name | -n <name>]\n"
    "\t[--description | -d <description>] [--restricted | -r]",
    "  nvl scope:delete [<name>] [--issuer | -i <issuer id>]",
)


@dataclass(frozen=True)
class ScopeFields:
    """Field values supplied on the command line."""

    name: str | None = None
    description: str | None = None
    restricted: bool | None = None


@dataclass(frozen=True)
class ScopeSession:
    issuer: Issuer
    client: AuthorityClient
    configuration: ProviderConfiguration

    @property
    def token(self) -> str | None:
        return self.client.access_token

    def list_scopes(self) -> list[Scope]:
        return self.client.scopes.list(token=self.token)


def open_session(
    explicit_issuer: str | None,
    *,
    issuers: IssuerStore,
    prompter: Prompter,
    build_client: Callable[[Issuer], AuthorityClient],
    default_issuer: str | None = None,
) -> ScopeSession:
    issuer = resolve_issuer(
        explicit_issuer,
        issuers=issuers,
        prompter=prompter,
        default=default_issuer,
    )
    logger.debug("using issuer %s (%s)", issuer.name, issuer.issuer)
    client = build_client(issuer)
    configuration = client.discover()
    logger.debug("discovered configuration for %s", configuration.issuer)
    return ScopeSession(issuer=issuer, client=client, configuration=configuration)


def resolve_scope_name(
    explicit: str | None,
    lister: Callable[[], Sequence[Scope]],
    *,
    prompter: Prompter,
) -> str:
    if explicit:
        return explicit

    scopes = lister()
    if not scopes:
        raise ScopeResolutionError("no scopes registered for this issuer")
    answers = prompter.ask(
        [
            Question(
                kind="list",
                name="scope_name",
                message="Select a scope",
                choices=tuple(scope.name for scope in scopes),
            )
        ]
    )
    return str(answers["scope_name"])


def _scope_questions(fields: ScopeFields, current: Scope | None = None) -> list[Question]:
    return [
        Question(
            kind="input",
            name="name",
            message="Name",
            value=fields.name,
            default=current.name if current is not None else None,
            trim=True,
        ),
        Question(
            kind="input",
            name="description",
            message="Description",
            value=fields.description,
            default=current.description if current is not None else None,
            trim=True,
        ),
        Question(
            kind="confirm",
            name="restricted",
            message="Restricted",
            value=fields.restricted,
            default=current.restricted if current is not None else None,
        ),
    ]


def _scope_input(answers: dict[str, object]) -> ScopeInput:
    description = answers.get("description")
    restricted = answers.get("restricted")
    return ScopeInput(
        name=str(answers["name"]),
        description=str(description) if description not in (None, "") else None,
        restricted=None if restricted is None else bool(restricted),
    )


def run_register(
    session: ScopeSession,
    fields: ScopeFields,
    *,
    prompter: Prompter,
    console: Console,
) -> Scope:
    data = _scope_input(prompter.ask(_scope_questions(fields)))
    registration = session.client.scopes.create(data, token=session.token)
    logger.debug("registered scope %s", registration.name)
    display_scope(console, registration)
    return registration


def run_list(session: ScopeSession, *, console: Console) -> list[Scope]:
    scopes = session.list_scopes()
    console.print(scope_table(scopes))
    return scopes


def run_info(
    session: ScopeSession,
    explicit: str | None,
    *,
    prompter: Prompter,
    console: Console,
) -> Scope:
    scope_name = resolve_scope_name(explicit, session.list_scopes, prompter=prompter)
    scope = session.client.scopes.get(scope_name, token=session.token)
    display_scope(console, scope)
    return scope


def run_update(
    session: ScopeSession,
    explicit: str | None,
    fields: ScopeFields,
    *,
    prompter: Prompter,
    console: Console,
) -> Scope:
    scope_name = resolve_scope_name(explicit, session.list_scopes, prompter=prompter)
    current = session.client.scopes.get(scope_name, token=session.token)
    update = _scope_input(prompter.ask(_scope_questions(fields, current)))
    check_scope_rename(current.name, update.name)

    updated = session.client.scopes.update(current.name, update, token=session.token)
    logger.debug("updated scope %s", current.name)
    display_scope(console, updated)
    return updated


def run_delete(
    session: ScopeSession,
    explicit: str | None,
    *,
    prompter: Prompter,
    console: Console,
) -> str:
    scope_name = resolve_scope_name(explicit, session.list_scopes, prompter=prompter)
    check_scope_delete(scope_name)

    session.client.scopes.delete(scope_name, token=session.token)
    logger.debug("deleted scope %s", scope_name)
    console.print(f"Deleted scope {scope_name}", markup=False, highlight=False)
    return scope_name
