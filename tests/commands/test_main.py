"""Tests for the top-level `pomo` application."""

from typer.testing import CliRunner

from pomo_cli import __version__
from pomo_cli.main import app

runner = CliRunner()


class TestMain:
    """Command registration and top-level commands."""

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for name in ("run", "stats", "history", "tasks", "tags", "config", "data"):
            assert name in result.stdout

    def test_subcommand_routing(self, patch_storage):
        result = runner.invoke(app, ["tasks", "add", "Write", "docs"])
        assert result.exit_code == 0
        assert patch_storage.load_tasks().value.tasks[0].name == "Write docs"
