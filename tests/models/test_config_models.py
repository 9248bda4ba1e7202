"""Tests for AppConfig validation and the editable settings list."""

from __future__ import annotations

import pytest

from pomo_cli.models.config_models import AppConfig, SettingsCategory, SettingsField


class TestAppConfigDefaults:
    """Defaults and schema tolerance."""

    def test_defaults(self) -> None:
        config = AppConfig()

        assert config.work_duration_mins == 25
        assert config.short_break_mins == 5
        assert config.long_break_mins == 15
        assert config.sessions_before_long_break == 4
        assert config.daily_goal_pomodoros == 8
        assert config.default_mode == "pomodoro"
        assert config.hide_hints_after_secs == 3
        assert config.theme == "dark"
        assert config.notifications_enabled is True
        assert config.auto_start_breaks is False

    def test_seconds_properties(self) -> None:
        config = AppConfig(work_duration_mins=50, short_break_mins=10, long_break_mins=20)
        assert config.work_duration_secs == 3000
        assert config.short_break_secs == 600
        assert config.long_break_secs == 1200

    def test_unknown_fields_ignored(self) -> None:
        config = AppConfig.model_validate({"work_duration_mins": 30, "colour": "red"})
        assert config.work_duration_mins == 30
        assert "colour" not in config.model_dump()

    @pytest.mark.parametrize(
        "field, raw, expected",
        [
            ("work_duration_mins", 0, 1),
            ("work_duration_mins", 500, 120),
            ("short_break_mins", -4, 1),
            ("long_break_mins", 61, 60),
            ("sessions_before_long_break", 11, 10),
            ("daily_goal_pomodoros", 0, 1),
            ("hide_hints_after_secs", -1, 0),
            ("hide_hints_after_secs", 99, 10),
        ],
    )
    def test_out_of_range_clamped(self, field, raw, expected) -> None:
        config = AppConfig.model_validate({field: raw})
        assert getattr(config, field) == expected

    @pytest.mark.parametrize("raw", [None, [25], float("inf"), float("nan"), "soon"])
    def test_non_numeric_takes_default(self, raw) -> None:
        config = AppConfig.model_validate({"work_duration_mins": raw, "daily_goal_pomodoros": 12})
        assert config.work_duration_mins == 25
        assert config.daily_goal_pomodoros == 12

    def test_unknown_default_mode_falls_back(self) -> None:
        assert AppConfig(default_mode="stopwatch").default_mode == "pomodoro"
        assert AppConfig(default_mode=" Timer ").default_mode == "timer"


class TestAdjust:
    """Tests for AppConfig.adjust."""

    def test_numeric_step(self) -> None:
        config = AppConfig()
        assert config.adjust(SettingsField.WORK_DURATION, 1) is True
        assert config.work_duration_mins == 26

    def test_numeric_clamped_at_minimum(self) -> None:
        config = AppConfig(short_break_mins=1)
        assert config.adjust(SettingsField.SHORT_BREAK, -1) is False
        assert config.short_break_mins == 1

    def test_numeric_clamped_at_maximum(self) -> None:
        config = AppConfig(daily_goal_pomodoros=20)
        config.adjust(SettingsField.DAILY_GOAL, 1)
        assert config.daily_goal_pomodoros == 20

    def test_toggle_ignores_delta_sign(self) -> None:
        config = AppConfig()
        config.adjust(SettingsField.AUTO_START_BREAKS, -1)
        assert config.auto_start_breaks is True
        config.adjust(SettingsField.AUTO_START_BREAKS, 1)
        assert config.auto_start_breaks is False

    def test_reset_data_is_not_a_setting(self) -> None:
        config = AppConfig()
        assert config.adjust(SettingsField.RESET_DATA, 1) is False
        assert config == AppConfig()


class TestSetValue:
    """Tests for AppConfig.set_value (used by `pomo config set`)."""

    def test_int(self) -> None:
        config = AppConfig()
        assert config.set_value("work_duration_mins", "45") == 45

    def test_int_clamped(self) -> None:
        config = AppConfig()
        assert config.set_value("work_duration_mins", "999") == 120

    @pytest.mark.parametrize("raw, expected", [("on", True), ("false", False), ("1", True)])
    def test_bool(self, raw, expected) -> None:
        config = AppConfig()
        assert config.set_value("show_streak", raw) is expected

    def test_str(self) -> None:
        config = AppConfig()
        assert config.set_value("theme", "light") == "light"

    def test_unknown_key(self) -> None:
        with pytest.raises(KeyError):
            AppConfig().set_value("nope", "1")

    @pytest.mark.parametrize("key, raw", [("work_duration_mins", "abc"), ("show_streak", "maybe")])
    def test_bad_value(self, key, raw) -> None:
        with pytest.raises(ValueError):
            AppConfig().set_value(key, raw)


class TestSettingsField:
    """Tests for settings navigation metadata."""

    def test_navigation_wraps(self) -> None:
        assert SettingsField.WORK_DURATION.next() is SettingsField.SHORT_BREAK
        assert SettingsField.WORK_DURATION.prev() is SettingsField.RESET_DATA
        assert SettingsField.RESET_DATA.next() is SettingsField.WORK_DURATION

    def test_every_field_has_metadata(self) -> None:
        for field in SettingsField:
            assert isinstance(field.category, SettingsCategory)
            assert field.label

    def test_values_are_config_fields(self) -> None:
        for field in SettingsField:
            if field is not SettingsField.RESET_DATA:
                assert field.value in AppConfig.model_fields

    def test_toggles(self) -> None:
        assert SettingsField.SHOW_STREAK.is_toggle
        assert not SettingsField.DAILY_GOAL.is_toggle
        assert not SettingsField.RESET_DATA.is_toggle
        assert SettingsField.RESET_DATA.category is SettingsCategory.DANGER
