from __future__ import annotations

from typer.testing import CliRunner

from relpub import __version__
from relpub.cli.app import app

runner = CliRunner()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_commands_are_registered() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "publish" in result.output
    assert "plan" in result.output
