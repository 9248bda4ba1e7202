"""Tests for `pomo tags` commands."""

import json

from typer.testing import CliRunner

from pomo_cli.commands.tags import app
from pomo_cli.utils.exit_codes import ERROR_NOT_FOUND

runner = CliRunner()


def seed(storage, *usages):
    tags = storage.load_tags().value
    for names in usages:
        tags.record_usage(names, storage.clock.today())
    storage.save_tags(tags)


class TestTagsList:
    """Tests for `pomo tags list`."""

    def test_empty(self, patch_storage):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "No tags" in result.stdout

    def test_sorted_json(self, patch_storage):
        seed(patch_storage, ["shopping"], ["urgent"], ["urgent"])

        result = runner.invoke(app, ["list", "-o", "json"])

        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert [(r["name"], r["count"]) for r in rows] == [("urgent", 2), ("shopping", 1)]
        assert rows[0]["last_used"] == "2024-01-15"


class TestTagsSuggest:
    """Tests for `pomo tags suggest`."""

    def test_prefix(self, patch_storage):
        seed(patch_storage, ["urgent"], ["shopping"])
        result = runner.invoke(app, ["suggest", "ur"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "urgent"

    def test_leading_hash_ignored(self, patch_storage):
        seed(patch_storage, ["shopping"])
        result = runner.invoke(app, ["suggest", "#sho"])
        assert result.stdout.strip() == "shopping"

    def test_no_match(self, patch_storage):
        seed(patch_storage, ["urgent"])
        result = runner.invoke(app, ["suggest", "xyz"])
        assert result.exit_code == ERROR_NOT_FOUND
