"""Tests for the lazymc configuration CLI."""
from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lazymc import __version__
from lazymc.cli import app
from lazymc.exit_codes import ExitCode

runner = CliRunner()


@pytest.fixture(autouse=True)
def _clean_lazymc_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host's LAZYMC_ variables out of CLI runs."""
    for key in list(os.environ):
        if key.startswith("LAZYMC_"):
            monkeypatch.delenv(key)


def _config_file(tmp_path: Path, extra: str = "") -> Path:
    path = tmp_path / "lazymc.toml"
    path.write_text(
        '[server]\ncommand = "run.sh"\n\n[config]\nversion = "0.2.11"\n' + extra,
        encoding="utf-8",
    )
    return path


def test_version_flag() -> None:
    """--version prints the package version."""
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_config_test_accepts_valid_file(tmp_path: Path) -> None:
    """config test reports success for a valid file."""
    cfg = _config_file(tmp_path)

    result = runner.invoke(app, ["config", "test", "--config", str(cfg)])

    assert result.exit_code == 0
    assert "Config loaded successfully" in result.output


def test_config_test_rejects_invalid_file(tmp_path: Path) -> None:
    """config test exits with the config error code and prints hints."""
    cfg = tmp_path / "lazymc.toml"
    cfg.write_text("[server]\ncommand = 5\n", encoding="utf-8")

    result = runner.invoke(app, ["config", "test", "--config", str(cfg)])

    assert result.exit_code == ExitCode.CONFIG
    assert "server.command" in result.output
    assert "hint:" in result.output


def test_config_test_uses_environment_when_file_missing(tmp_path: Path) -> None:
    """Without a file the environment provides the configuration."""
    result = runner.invoke(
        app,
        ["config", "test", "--config", str(tmp_path / "missing.toml")],
        env={"LAZYMC_SERVER_COMMAND": "java -jar server.jar"},
    )

    assert result.exit_code == 0
    assert "environment variables" in result.output


def test_config_test_directory_uses_environment(tmp_path: Path) -> None:
    """A directory passed as --config is not a file, so the environment is used."""
    result = runner.invoke(
        app,
        ["config", "test", "--config", str(tmp_path)],
        env={"LAZYMC_SERVER_COMMAND": "run.sh"},
    )

    assert result.exit_code == 0
    assert "environment variables" in result.output


def test_config_test_requires_command_in_environment(tmp_path: Path) -> None:
    """A missing start command variable is fatal."""
    result = runner.invoke(app, ["config", "test", "--config", str(tmp_path / "missing.toml")])

    assert result.exit_code == ExitCode.CONFIG
    assert "LAZYMC_SERVER_COMMAND" in result.output


def test_config_show_json(tmp_path: Path) -> None:
    """config show --json emits the resolved tree."""
    cfg = _config_file(tmp_path, '\n[rcon]\npassword = "secret"\n')

    result = runner.invoke(app, ["config", "show", "--config", str(cfg), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["server"]["command"] == "run.sh"
    assert data["server"]["address"] == "127.0.0.1:25566"
    assert data["server_directory"] == str(cfg.resolve().parent)
    assert data["join"]["methods"] == ["hold", "kick"]
    assert data["rcon"]["password"] == "********"


def test_config_show_can_reveal_secrets(tmp_path: Path) -> None:
    """--show-secrets keeps the RCON password."""
    cfg = _config_file(tmp_path, '\n[rcon]\npassword = "secret"\n')

    result = runner.invoke(
        app,
        ["config", "show", "--config", str(cfg), "--json", "--show-secrets"],
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout)["rcon"]["password"] == "secret"


def test_config_show_table(tmp_path: Path) -> None:
    """config show renders a table by default."""
    cfg = _config_file(tmp_path)

    result = runner.invoke(app, ["config", "show", "--config", str(cfg)])

    assert result.exit_code == 0
    assert "server" in result.output
    assert "run.sh" in result.output
