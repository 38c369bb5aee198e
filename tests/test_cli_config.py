from __future__ import annotations

from pathlib import Path

import pytest

from nvl_sdk.cli.config import DEFAULT_ISSUERS_DIR, ConfigError, load_cli_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    monkeypatch.delenv("NVL_ISSUER", raising=False)
    monkeypatch.delenv("NVL_ISSUERS_DIR", raising=False)


def test_defaults_when_file_missing(tmp_path) -> None:
    config = load_cli_config(tmp_path / "missing.toml")
    assert config.default_issuer is None
    assert config.issuers_dir == DEFAULT_ISSUERS_DIR
    assert config.timeout == 10.0
    assert config.verbose is False


def test_cli_table_is_read(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        '[cli]\ndefault_issuer = "prod"\ntimeout = 3\nverbose = "yes"\n',
        encoding="utf-8",
    )
    config = load_cli_config(config_path)
    assert config.default_issuer == "prod"
    assert config.timeout == 3.0
    assert config.verbose is True


def test_env_issuer_overrides_config_file(tmp_path, monkeypatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('default_issuer = "prod"\n', encoding="utf-8")
    monkeypatch.setenv("NVL_ISSUER", "staging")
    assert load_cli_config(config_path).default_issuer == "staging"


def test_env_issuers_dir_overrides_config_file(tmp_path, monkeypatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('issuers_dir = "/from/file"\n', encoding="utf-8")
    monkeypatch.setenv("NVL_ISSUERS_DIR", str(tmp_path / "env"))
    assert load_cli_config(config_path).issuers_dir == str(tmp_path / "env")


def test_issuers_dir_expands_home(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('issuers_dir = "~/nvl-issuers"\n', encoding="utf-8")
    assert load_cli_config(config_path).issuers_dir == str(Path.home() / "nvl-issuers")


@pytest.mark.parametrize(
    "content",
    [
        "timeout = 0\n",
        'timeout = "fast"\n',
        "timeout = true\n",
        'verbose = "maybe"\n',
        'issuers_dir = ""\n',
        'cli = "not a table"\n',
        "not toml at all [\n",
    ],
)
def test_invalid_values_rejected(tmp_path, content: str) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_cli_config(config_path)
