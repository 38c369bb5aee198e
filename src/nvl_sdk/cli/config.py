"""Configuration helpers for the nvl CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = Path.home() / ".nvl" / "config.toml"
DEFAULT_ISSUERS_DIR = str(Path.home() / ".nvl" / "issuers")
DEFAULT_TIMEOUT = 10.0
ISSUER_ENV_VAR = "NVL_ISSUER"
ISSUERS_DIR_ENV_VAR = "NVL_ISSUERS_DIR"


@dataclass(frozen=True)
class CLIConfig:
    default_issuer: str | None = None
    issuers_dir: str = DEFAULT_ISSUERS_DIR
    timeout: float = DEFAULT_TIMEOUT
    verbose: bool = False


class ConfigError(ValueError):
    """Raised when CLI config is invalid."""


def _load_toml(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")

    try:  # Python 3.11+
        import tomllib  # type: ignore[attr-defined]
        try:
            return tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    except ModuleNotFoundError:
        try:
            import tomli
        except ModuleNotFoundError as exc:
            raise ConfigError("toml parser unavailable; install tomli for Python < 3.11") from exc
        try:
            return tomli.loads(raw)
        except tomli.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc


def _to_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "on"}:
            return True
        if lowered in {"false", "0", "no", "off"}:
            return False
    raise ConfigError(f"{field_name} must be a boolean")


def _to_timeout(value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigError("timeout must be a positive number")
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError("timeout must be a positive number") from exc
    if timeout <= 0:
        raise ConfigError("timeout must be a positive number")
    return timeout


def load_cli_config(path: str | Path | None = None) -> CLIConfig:
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    source: dict[str, Any] = {}
    if config_path.exists():
        parsed = _load_toml(config_path)
        section = parsed.get("cli")
        if isinstance(section, dict):
            source = section
        elif section is None:
            source = parsed
        else:
            raise ConfigError("[cli] must be a table")

    env_issuer = os.getenv(ISSUER_ENV_VAR)
    configured_issuer = source.get("default_issuer")
    if env_issuer and env_issuer.strip():
        default_issuer = env_issuer.strip()
    elif configured_issuer is None:
        default_issuer = None
    else:
        default_issuer = str(configured_issuer).strip() or None

    env_issuers_dir = os.getenv(ISSUERS_DIR_ENV_VAR)
    configured_issuers_dir = str(source.get("issuers_dir", DEFAULT_ISSUERS_DIR)).strip()
    issuers_dir = env_issuers_dir.strip() if env_issuers_dir else configured_issuers_dir
    if not issuers_dir:
        raise ConfigError("issuers_dir must not be empty")

    return CLIConfig(
        default_issuer=default_issuer,
        issuers_dir=str(Path(issuers_dir).expanduser()),
        timeout=_to_timeout(source.get("timeout", DEFAULT_TIMEOUT)),
        verbose=_to_bool(source.get("verbose", False), "verbose"),
    )
