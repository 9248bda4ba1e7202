"""Tests for JSON persistence of config, history, tags and tasks."""

from __future__ import annotations

import json
from datetime import timedelta
from unittest.mock import patch

from pomo_cli.models.config_models import AppConfig
from pomo_cli.models.focus.history import Session, SessionHistory, SessionType
from pomo_cli.models.focus.tags import TagStore
from pomo_cli.services.storage_service import StorageService, get_storage_service


# ---------------------------------------------------------------------------
# Paths and first run
# ---------------------------------------------------------------------------


class TestPaths:
    """File locations."""

    def test_paths(self, storage, tmp_path) -> None:
        assert storage.config_path == tmp_path / "config" / "config.json"
        assert storage.sessions_path == tmp_path / "data" / "sessions.json"
        assert storage.tags_path == tmp_path / "data" / "tags.json"
        assert storage.tasks_path == tmp_path / "data" / "tasks.json"

    def test_platform_dirs_default(self, tmp_path) -> None:
        with patch(
            "pomo_cli.services.storage_service.user_config_dir",
            return_value=str(tmp_path / "cfg"),
        ), patch(
            "pomo_cli.services.storage_service.user_data_dir",
            return_value=str(tmp_path / "dat"),
        ):
            svc = StorageService()

        assert svc.config_dir == tmp_path / "cfg"
        assert svc.data_dir == tmp_path / "dat"

    def test_get_storage_service_is_cached(self) -> None:
        get_storage_service.cache_clear()
        try:
            assert get_storage_service() is get_storage_service()
        finally:
            get_storage_service.cache_clear()


class TestFirstLoad:
    """Missing files are created with defaults."""

    def test_missing_config_created(self, storage) -> None:
        result = storage.load_config()

        assert result.ok
        assert result.created
        assert result.value == AppConfig()
        assert storage.config_path.exists()

    def test_missing_data_files_created(self, storage) -> None:
        assert storage.load_history().value == SessionHistory()
        assert storage.load_tags().value == TagStore()
        assert storage.load_tasks().value.tasks == []
        assert storage.sessions_path.exists()
        assert storage.tags_path.exists()
        assert storage.tasks_path.exists()


# ---------------------------------------------------------------------------
# Round trips
# ---------------------------------------------------------------------------


class TestRoundTrip:
    """Saving then loading yields an equal value."""

    def test_config(self, storage) -> None:
        config = AppConfig(work_duration_mins=50, theme="light", auto_start_breaks=True)
        assert storage.save_config(config).ok

        result = storage.load_config()
        assert result.ok and not result.created
        assert result.value == config

    def test_history(self, storage, clock) -> None:
        history = SessionHistory()
        history.add(Session.create(SessionType.WORK, 1500, clock, task_name="A", note="n"))
        history.add(Session.create(SessionType.SHORT_BREAK, 300, clock))
        storage.save_history(history)

        assert storage.load_history().value == history

    def test_tags(self, storage, clock) -> None:
        tags = TagStore()
        tags.record_usage(["work", "home", "work"], clock.today())
        storage.save_tags(tags)

        assert storage.load_tags().value == tags

    def test_tasks(self, storage, tasks) -> None:
        tasks.tasks[0].pomodoros_spent = 3
        tasks.tasks[1].completed = True
        storage.save_tasks(tasks)

        loaded = storage.load_tasks().value
        assert loaded.tasks == tasks.tasks
        assert loaded.tasks[0].created_at == tasks.tasks[0].created_at

    def test_pretty_printed(self, storage) -> None:
        storage.save_config(AppConfig())
        text = storage.config_path.read_text(encoding="utf-8")
        assert text.startswith("{\n  ")


# ---------------------------------------------------------------------------
# Load-time maintenance
# ---------------------------------------------------------------------------


class TestLoadMaintenance:
    """Streak expiry and tag cleanup run on load."""

    def test_lapsed_streak_zeroed(self, storage, clock) -> None:
        history = SessionHistory(
            current_streak=4,
            longest_streak=6,
            last_session_date=clock.today() - timedelta(days=3),
        )
        storage.save_history(history)

        loaded = storage.load_history().value
        assert loaded.current_streak == 0
        assert loaded.longest_streak == 6

    def test_stale_tags_forgotten(self, storage, clock) -> None:
        tags = TagStore()
        tags.record_usage(["old"], clock.today() - timedelta(days=40))
        tags.record_usage(["new"], clock.today())
        storage.save_tags(tags)

        assert [t.name for t in storage.load_tags().value.tags] == ["new"]


# ---------------------------------------------------------------------------
# Malformed files
# ---------------------------------------------------------------------------


class TestMalformed:
    """Bad files fall back to defaults and are reported, not raised."""

    def _write(self, path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    def test_invalid_json(self, storage) -> None:
        self._write(storage.config_path, "{not json")
        result = storage.load_config()

        assert not result.ok
        assert result.error
        assert result.value == AppConfig()
        # Left alone until the next explicit save
        assert storage.config_path.read_text(encoding="utf-8") == "{not json"

    def test_non_object(self, storage) -> None:
        self._write(storage.tasks_path, "[1, 2, 3]")
        result = storage.load_tasks()
        assert not result.ok
        assert result.value.tasks == []

    def test_missing_and_unknown_fields(self, storage) -> None:
        self._write(storage.config_path, json.dumps({"work_duration_mins": 40, "x": 1}))
        result = storage.load_config()

        assert result.ok
        assert result.value.work_duration_mins == 40
        assert result.value.short_break_mins == 5

    def test_out_of_range_clamped(self, storage) -> None:
        self._write(storage.config_path, json.dumps({"work_duration_mins": 1000}))
        assert storage.load_config().value.work_duration_mins == 120

    def test_null_number_takes_default(self, storage) -> None:
        self._write(
            storage.config_path,
            json.dumps({"work_duration_mins": None, "short_break_mins": 7}),
        )
        result = storage.load_config()

        assert result.ok
        assert result.value.work_duration_mins == 25
        assert result.value.short_break_mins == 7

    def test_infinite_number_takes_default(self, storage) -> None:
        self._write(storage.config_path, '{"daily_goal_pomodoros": 1e400}')
        result = storage.load_config()

        assert result.ok
        assert result.value.daily_goal_pomodoros == 8

    def test_invalid_items_dropped(self, storage, clock) -> None:
        good = Session.create(SessionType.WORK, 1500, clock).model_dump(mode="json")
        bad = {"timestamp": "yesterday", "session_type": "nap", "duration_secs": -5}
        self._write(
            storage.sessions_path,
            json.dumps({"sessions": [good, bad], "current_streak": 1}),
        )

        result = storage.load_history()
        assert result.ok
        assert result.dropped_items == 1
        assert len(result.value.sessions) == 1
        assert result.value.sessions[0].id == good["id"]

    def test_task_missing_created_at_kept(self, storage) -> None:
        self._write(
            storage.tasks_path,
            json.dumps({"tasks": [{"id": "abc", "name": "Write report"}]}),
        )
        result = storage.load_tasks()

        assert result.ok
        assert result.dropped_items == 0
        assert [t.name for t in result.value.tasks] == ["Write report"]

    def test_list_field_wrong_type(self, storage) -> None:
        self._write(storage.tags_path, json.dumps({"tags": "oops"}))
        result = storage.load_tags()
        assert result.ok
        assert result.value.tags == []

    def test_bad_scalar_field(self, storage) -> None:
        self._write(storage.sessions_path, json.dumps({"current_streak": "many"}))
        result = storage.load_history()
        assert not result.ok
        assert result.value == SessionHistory()


# ---------------------------------------------------------------------------
# Save failures and reset
# ---------------------------------------------------------------------------


class TestSaveFailures:
    """Write errors are captured in the result."""

    def test_unwritable_directory(self, tmp_path, clock) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        svc = StorageService(config_dir=blocker / "cfg", data_dir=blocker / "dat", clock=clock)

        result = svc.save_config(AppConfig())
        assert not result.ok
        assert result.error

    def test_load_reports_failed_create(self, tmp_path, clock) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        svc = StorageService(config_dir=blocker, data_dir=blocker, clock=clock)

        result = svc.load_tasks()
        assert result.created
        assert not result.ok
        assert result.value.tasks == []


class TestResetData:
    """reset_data clears history, tags and tasks but not config."""

    def test_reset(self, storage, clock, tasks) -> None:
        config = AppConfig(work_duration_mins=30)
        storage.save_config(config)
        storage.save_tasks(tasks)
        history = SessionHistory()
        history.add(Session.create(SessionType.WORK, 1500, clock))
        storage.save_history(history)

        results = storage.reset_data()

        assert all(r.ok for r in results)
        assert storage.load_history().value == SessionHistory()
        assert storage.load_tasks().value.tasks == []
        assert storage.load_tags().value == TagStore()
        assert storage.load_config().value == config
