"""Tests for the command line entry point."""

from typer.testing import CliRunner

from klaudkod import __version__
from klaudkod.cli.main import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_status_with_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("transport:\n  url: ws://example:9000/ws\n", encoding="utf-8")
    result = runner.invoke(app, ["status", "--config", str(path)])
    assert result.exit_code == 0
    assert "ws://example:9000/ws" in result.stdout


def test_status_missing_config():
    result = runner.invoke(app, ["status", "--config", "/nonexistent/config.yaml"])
    assert result.exit_code == 1


def test_chat_missing_config_exits_cleanly():
    result = runner.invoke(app, ["chat", "--config", "/nonexistent/config.yaml"])
    assert result.exit_code == 1
    assert "Config file not found" in result.stdout
    assert not isinstance(result.exception, FileNotFoundError)


def test_chat_invalid_config_exits_cleanly(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("transport:\n  reconnect_delay: -1\n", encoding="utf-8")
    result = runner.invoke(app, ["chat", "--config", str(path)])
    assert result.exit_code == 1
