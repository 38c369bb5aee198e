"""Command-line interface for nvl."""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Sequence

from rich.console import Console

from nvl_sdk.cli.config import CLIConfig, ConfigError, load_cli_config
from nvl_sdk.cli.issuers import Issuer, IssuerError, IssuerStore, validate_issuer_name
from nvl_sdk.cli.prompts import Prompter, RichPrompter
from nvl_sdk.cli.scopes import (
    SCOPE_USAGE,
    ScopeFields,
    open_session,
    run_delete,
    run_info,
    run_list,
    run_register,
    run_update,
)
from nvl_sdk.cli.store import StoreError
from nvl_sdk.client import AuthorityClient, validate_issuer_url
from nvl_sdk.errors import (
    ClientConfigurationError,
    NVLSDKError,
    ProtectedScopeError,
    ScopeResolutionError,
)

EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 1
EXIT_REMOTE_ERROR = 2

AUTH_REQUIRED_MESSAGE = "Please login to the issuer."
AUTH_STATUS_CODES = (401, 403)

SCOPE_COMMANDS = ("scope:register", "scope:list", "scope:info", "scope:update", "scope:delete")

_SENSITIVE_FIELDS = (
    "access_token",
    "refresh_token",
    "id_token",
    "client_secret",
    "password",
    "authorization",
    "token",
)

logger = logging.getLogger(__name__)


def _sdk_version() -> str:
    try:
        return pkg_version("nvl-sdk")
    except PackageNotFoundError:
        return "0.0.0+local"


def _add_issuer_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--issuer", "-i", default=None, help="Issuer name or URL")


def _add_field_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", "-n", default=None, help="Scope name")
    parser.add_argument("--description", "-d", default=None, help="Scope description")
    parser.add_argument(
        "--restricted",
        "-r",
        action="store_true",
        default=None,
        help="Mark the scope as restricted",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nvl")
    parser.add_argument(
        "--version",
        action="version",
        version=f"nvl {_sdk_version()}",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to CLI config TOML (default: ~/.nvl/config.toml)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log requests to stderr")

    sub = parser.add_subparsers(dest="command", required=True)

    version = sub.add_parser("version", help="Show CLI version")
    version.add_argument("--json", action="store_true", help="Print version details as JSON")

    sub.add_parser("scope", help="Show scope command usage")

    register = sub.add_parser("scope:register", help="Register a new scope")
    register.add_argument("scope", nargs="?", default=None, help="Scope name")
    _add_issuer_option(register)
    _add_field_options(register)

    scope_list = sub.add_parser("scope:list", help="List scopes registered with an issuer")
    _add_issuer_option(scope_list)

    info = sub.add_parser("scope:info", help="Show a single scope")
    info.add_argument("scope", nargs="?", default=None, help="Scope name")
    _add_issuer_option(info)

    update = sub.add_parser("scope:update", help="Update a scope")
    update.add_argument("scope", nargs="?", default=None, help="Scope name")
    _add_issuer_option(update)
    _add_field_options(update)

    delete = sub.add_parser("scope:delete", help="Delete a scope")
    delete.add_argument("scope", nargs="?", default=None, help="Scope name")
    _add_issuer_option(delete)

    issuer_add = sub.add_parser("issuer:add", help="Register an issuer locally")
    issuer_add.add_argument("name", help="Local issuer name")
    issuer_add.add_argument("--url", required=True, help="Issuer base URL")
    issuer_add.add_argument("--token", default=None, help="Access token for admin calls")

    sub.add_parser("issuer:list", help="List locally registered issuers")

    return parser


def _configure_logging(verbose: bool, stderr) -> None:
    package_logger = logging.getLogger("nvl_sdk")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    handler = logging.StreamHandler(stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


def _sanitize_error_text(value: str) -> str:
    redacted = re.sub(r"(?i)(bearer\s+)([^\s,]+)", r"\1[REDACTED]", value)
    for field in _SENSITIVE_FIELDS:
        redacted = re.sub(
            rf"(?i)({field}\s*[=:]\s*)([^,\s]+)",
            r"\1[REDACTED]",
            redacted,
        )
    redacted = re.sub(r"(?i)([?&](?:token|access_token|secret)=)([^&\s]+)", r"\1[REDACTED]", redacted)
    return redacted


def _print_error(stderr, prefix: str, message: str, *, code: int) -> int:
    print(f"{prefix}: {_sanitize_error_text(message)}", file=stderr)
    return code


def _report_remote_error(stderr, exc: NVLSDKError) -> int:
    if getattr(exc, "status_code", None) in AUTH_STATUS_CODES:
        print(AUTH_REQUIRED_MESSAGE, file=stderr)
        return EXIT_REMOTE_ERROR
    return _print_error(stderr, "authority error", str(exc), code=EXIT_REMOTE_ERROR)


def _build_client(issuer: Issuer, config: CLIConfig) -> AuthorityClient:
    return AuthorityClient(
        issuer=issuer.issuer,
        access_token=issuer.access_token,
        timeout=config.timeout,
    )


def _run_version(*, as_json: bool, stdout) -> int:
    payload = {"cli": "nvl", "sdk_version": _sdk_version()}
    if as_json:
        print(json.dumps(payload, sort_keys=True), file=stdout)
    else:
        print(f"nvl {payload['sdk_version']}", file=stdout)
    return EXIT_SUCCESS


def _run_scope_usage(*, stdout) -> int:
    for line in SCOPE_USAGE:
        print(line, file=stdout)
    return EXIT_SUCCESS


def _run_issuer_add(*, args, config: CLIConfig, stdout, stderr) -> int:
    try:
        issuer = Issuer(
            name=validate_issuer_name(args.name),
            issuer=args.url.strip(),
            access_token=(args.token or "").strip() or None,
        )
        validate_issuer_url(issuer.issuer)
        path = IssuerStore(config.issuers_dir).save(issuer)
    except (IssuerError, ClientConfigurationError) as exc:
        return _print_error(stderr, "issuer error", str(exc), code=EXIT_VALIDATION_ERROR)
    except (OSError, StoreError) as exc:
        return _print_error(stderr, "config error", str(exc), code=EXIT_VALIDATION_ERROR)

    print(f"issuer: {issuer.name}", file=stdout)
    print(f"issuer_file: {path}", file=stdout)
    return EXIT_SUCCESS


def _run_issuer_list(*, config: CLIConfig, stdout, stderr) -> int:
    try:
        issuers = IssuerStore(config.issuers_dir).list()
    except IssuerError as exc:
        return _print_error(stderr, "issuer error", str(exc), code=EXIT_VALIDATION_ERROR)

    if not issuers:
        print("no issuers configured", file=stdout)
        return EXIT_SUCCESS
    for issuer in issuers:
        marker = "*" if issuer.name == config.default_issuer else " "
        print(f"{marker} {issuer.name}\t{issuer.issuer}", file=stdout)
    return EXIT_SUCCESS


def _run_scope_command(*, args, config: CLIConfig, stdout, stderr, prompter: Prompter | None) -> int:
    console = Console(file=stdout, highlight=False, soft_wrap=True)
    if prompter is None:
        prompter = RichPrompter(console)

    try:
        session = open_session(
            args.issuer,
            issuers=IssuerStore(config.issuers_dir),
            prompter=prompter,
            build_client=lambda issuer: _build_client(issuer, config),
            default_issuer=config.default_issuer,
        )
    except IssuerError as exc:
        return _print_error(stderr, "issuer error", str(exc), code=EXIT_VALIDATION_ERROR)
    except ClientConfigurationError as exc:
        return _print_error(stderr, "client error", str(exc), code=EXIT_VALIDATION_ERROR)
    except NVLSDKError as exc:
        return _report_remote_error(stderr, exc)

    fields = ScopeFields(
        name=getattr(args, "name", None),
        description=getattr(args, "description", None),
        restricted=getattr(args, "restricted", None),
    )
    try:
        if args.command == "scope:register":
            if fields.name is None and args.scope:
                fields = ScopeFields(
                    name=args.scope,
                    description=fields.description,
                    restricted=fields.restricted,
                )
            run_register(session, fields, prompter=prompter, console=console)
        elif args.command == "scope:list":
            run_list(session, console=console)
        elif args.command == "scope:info":
            run_info(session, args.scope, prompter=prompter, console=console)
        elif args.command == "scope:update":
            run_update(session, args.scope, fields, prompter=prompter, console=console)
        else:
            run_delete(session, args.scope, prompter=prompter, console=console)
    except ProtectedScopeError as exc:
        return _print_error(stderr, "policy error", str(exc), code=EXIT_VALIDATION_ERROR)
    except ScopeResolutionError as exc:
        return _print_error(stderr, "scope error", str(exc), code=EXIT_VALIDATION_ERROR)
    except NVLSDKError as exc:
        return _report_remote_error(stderr, exc)
    return EXIT_SUCCESS


def main(
    argv: Sequence[str] | None = None,
    *,
    stdout=sys.stdout,
    stderr=sys.stderr,
    prompter: Prompter | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_cli_config(args.config)
    except ConfigError as exc:
        return _print_error(stderr, "config error", str(exc), code=EXIT_VALIDATION_ERROR)

    _configure_logging(args.verbose or config.verbose, stderr)
    logger.debug("running %s", args.command)

    if args.command == "version":
        return _run_version(as_json=args.json, stdout=stdout)

    if args.command == "scope":
        return _run_scope_usage(stdout=stdout)

    if args.command in SCOPE_COMMANDS:
        return _run_scope_command(
            args=args,
            config=config,
            stdout=stdout,
            stderr=stderr,
            prompter=prompter,
        )

    if args.command == "issuer:add":
        return _run_issuer_add(args=args, config=config, stdout=stdout, stderr=stderr)

    if args.command == "issuer:list":
        return _run_issuer_list(config=config, stdout=stdout, stderr=stderr)

    print("unknown command", file=stderr)
    return EXIT_VALIDATION_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
