"""Tests for `pomo run`, the interactive loop."""

import pytest
from typer.testing import CliRunner

from pomo_cli.main import app

runner = CliRunner()


class FakeKeyboard:
    """Replays scripted keys, then quits.

    A callable entry is run in place of a key press (returning its result),
    an exception instance is raised.
    """

    def __init__(self, keys):
        self.keys = list(keys)
        self.stopped = False

    def get_key(self, timeout: float = 0.0):
        if not self.keys:
            return "q"
        key = self.keys.pop(0)
        if isinstance(key, BaseException):
            raise key
        if callable(key):
            return key()
        return key

    def stop(self):
        self.stopped = True


@pytest.fixture()
def live(mocker):
    return mocker.patch("pomo_cli.commands.run_command.Live")


def use_keyboard(mocker, keyboard):
    mocker.patch(
        "pomo_cli.commands.run_command.create_keyboard_handler", return_value=keyboard
    )


class TestRunCommand:
    """Tests for the run loop wiring."""

    def test_keys_drive_app_and_state_is_saved(self, patch_storage, live, mocker):
        keyboard = FakeKeyboard(["a", "W", "r", "i", "t", "e", "enter", "q"])
        use_keyboard(mocker, keyboard)

        result = runner.invoke(app, ["run"])

        assert result.exit_code == 0
        assert keyboard.stopped
        assert patch_storage.load_tasks().value.tasks[0].name == "Write"
        assert "0/8" in result.stdout
        assert live.return_value.__enter__.return_value.update.called

    def test_ctrl_c_saves(self, patch_storage, live, mocker):
        keyboard = FakeKeyboard(["a", "x", "enter", KeyboardInterrupt()])
        use_keyboard(mocker, keyboard)

        result = runner.invoke(app, ["run"])

        assert result.exit_code == 0
        assert keyboard.stopped
        assert patch_storage.load_tasks().value.tasks[0].name == "x"

    def test_completed_session_is_recorded(self, patch_storage, live, mocker):
        clock = patch_storage.clock
        mocker.patch(
            "pomo_cli.commands.run_command.ConsoleNotifier.notify", return_value=True
        )
        # Start, let a whole work interval pass, dismiss the note prompt, quit.
        keyboard = FakeKeyboard([" ", lambda: clock.advance(25 * 60), "esc"])
        use_keyboard(mocker, keyboard)

        result = runner.invoke(app, ["run"])

        assert result.exit_code == 0
        sessions = patch_storage.load_history().value.sessions
        assert len(sessions) == 1
        assert sessions[0].duration_secs == 25 * 60
        assert "1/8" in result.stdout
