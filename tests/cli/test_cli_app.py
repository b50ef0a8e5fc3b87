"""
Tests for the ezkonnect CLI.
"""

from __future__ import annotations

from unittest.mock import patch

from typer.testing import CliRunner

from ezkonnect import __version__
from ezkonnect.cli.app import app

runner = CliRunner()


class TestRootApp:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "serve" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"ezkonnect-server {__version__}" in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code in (0, 2)
        assert "Usage" in result.output


class TestServe:
    def test_serve_help(self):
        result = runner.invoke(app, ["serve", "--help"])
        assert result.exit_code == 0
        assert "--port" in result.output

    def test_defaults_from_settings(self, monkeypatch):
        monkeypatch.setenv("EZKONNECT_PORT", "6060")
        with patch("uvicorn.run") as run:
            result = runner.invoke(app, ["serve"])
        assert result.exit_code == 0
        args, kwargs = run.call_args
        assert args == ("ezkonnect.api:create_app",)
        assert kwargs["factory"] is True
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 6060
        assert kwargs["log_level"] == "info"

    def test_overrides(self):
        with patch("uvicorn.run") as run:
            result = runner.invoke(app, ["serve", "--host", "127.0.0.1", "-p", "9000", "--reload"])
        assert result.exit_code == 0
        kwargs = run.call_args.kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9000
        assert kwargs["reload"] is True
