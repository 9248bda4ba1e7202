"""Interactive focus session: the object the terminal driver talks to.

FocusApp owns every piece of mutable state for one run of the app (timer
engine, session history, tag store, task list and config) and is passed
explicitly to whatever renders or drives it. The driver calls ``tick()``
roughly every 100 ms and forwards key presses to ``handle_key()``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from pomo_cli.models.config_models import SettingsField
from pomo_cli.models.focus.celebrations import Celebration, check_celebration
from pomo_cli.models.focus.clock import Clock
from pomo_cli.models.focus.engine import CompletionEvent, TimerEngine, TimerState
from pomo_cli.models.focus.history import Session, SessionHistory, SessionType
from pomo_cli.models.focus.tags import TagStore
from pomo_cli.models.task import Task
from pomo_cli.services.notification_service import (
    Notifier,
    NullNotifier,
    build_notification,
)
from pomo_cli.services.storage_service import LoadResult, SaveResult, StorageService

logger = logging.getLogger(__name__)

NOTE_MAX_LEN = 60
CONFIRM_MAX_LEN = 10
CONFIRM_WORD = "DELETE"
RECENT_TAGS = 5
BREATHING_STEP = 2
BREATHING_PERIOD = 100


class CurrentView(Enum):
    TIMER = "timer"
    DASHBOARD = "dashboard"
    SETTINGS = "settings"


class ActivePane(Enum):
    TASKS = "tasks"
    TIMER = "timer"


class InputMode(Enum):
    NORMAL = "normal"
    ADDING_TASK = "adding_task"
    QUICK_CAPTURE = "quick_capture"
    SESSION_NOTE = "session_note"
    CONFIRM_RESET = "confirm_reset"


@dataclass(frozen=True)
class PendingSession:
    """A finished work interval waiting for its note."""

    session_type: SessionType
    duration_secs: int
    task_name: str | None


VIEW_KEYS = {"1": CurrentView.TIMER, "2": CurrentView.DASHBOARD, "3": CurrentView.SETTINGS}


class FocusApp:
    """One interactive session over the persisted focus data."""

    def __init__(
        self,
        storage: StorageService,
        clock: Clock | None = None,
        notifier: Notifier | None = None,
    ):
        self.storage = storage
        self.clock = clock or storage.clock
        self.notifier = notifier or NullNotifier()

        self.config = self._loaded(storage.load_config())
        self.history = self._loaded(storage.load_history())
        self.tags = self._loaded(storage.load_tags())
        self.tasks = self._loaded(storage.load_tasks())

        self.engine = TimerEngine(self.config, self.clock, self.tasks)

        # Navigation
        self.current_view = CurrentView.TIMER
        self.active_pane = ActivePane.TASKS
        self.input_mode = InputMode.NORMAL
        self.input_buffer = ""
        self.focus_mode = False
        self.show_help = False
        self.should_quit = False
        self.selected_setting = SettingsField.WORK_DURATION

        self.tag_suggestion: str | None = None
        self.pending_session: PendingSession | None = None
        self.celebration: Celebration | None = None
        self.celebration_ticks = 0
        self.breathing_phase = 0

        self._tasks_dirty = False
        self._last_key_instant = self.clock.now_instant()

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _loaded(result: LoadResult):
        if not result.ok:
            logger.warning("Using defaults for %s: %s", result.path, result.error)
        elif result.dropped_items:
            logger.warning(
                "Dropped %d invalid item(s) from %s", result.dropped_items, result.path
            )
        return result.value

    @staticmethod
    def _saved(result: SaveResult) -> SaveResult:
        if not result.ok:
            logger.warning("Could not save %s: %s", result.path, result.error)
        return result

    def save_history(self) -> SaveResult:
        return self._saved(self.storage.save_history(self.history))

    def save_tasks(self) -> SaveResult:
        self._tasks_dirty = False
        return self._saved(self.storage.save_tasks(self.tasks))

    def save_tags(self) -> SaveResult:
        return self._saved(self.storage.save_tags(self.tags))

    def save_config(self) -> SaveResult:
        return self._saved(self.storage.save_config(self.config))

    def save_all(self) -> list[SaveResult]:
        """Flush everything, including a work session still awaiting a note."""
        if self.pending_session is not None:
            self._complete_pending(None)
        return [self.save_tasks(), self.save_config(), self.save_history()]

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def toggle_pause(self) -> None:
        if self.engine.toggle_pause():
            self.focus_mode = True

    def tick(self, now: float | None = None) -> CompletionEvent | None:
        """Advance the timer and the transient UI counters."""
        if self.is_breathing():
            self.breathing_phase = (self.breathing_phase + BREATHING_STEP) % BREATHING_PERIOD

        event = self.engine.tick(now)
        if event is not None:
            self._on_complete(event)

        if self.celebration_ticks > 0:
            self.celebration_ticks -= 1
            if self.celebration_ticks == 0:
                self.celebration = None

        if self._tasks_dirty:
            self.save_tasks()
        return event

    def _on_complete(self, event: CompletionEvent) -> None:
        if event.state is TimerState.WORK:
            if event.task_id is not None:
                self._tasks_dirty = True
            self._celebrate(
                check_celebration(self.history, self.config.daily_goal_pomodoros, self.clock)
            )
            self.pending_session = PendingSession(
                SessionType.WORK, event.duration_secs, event.task_name
            )
            self.input_mode = InputMode.SESSION_NOTE
            self.input_buffer = ""
        else:
            self._record(event.state.session_type, event.duration_secs, event.task_name)

        self._notify(event)

    def _celebrate(self, celebration: Celebration | None) -> None:
        if celebration is None:
            return
        self.celebration = celebration
        self.celebration_ticks = celebration.ticks

    def _notify(self, event: CompletionEvent) -> None:
        if not self.config.notifications_enabled:
            return
        title, body = build_notification(event)
        try:
            delivered = self.notifier.notify(title, body)
        except Exception:
            logger.exception("Notification delivery failed")
            return
        if not delivered:
            logger.info("Notification not delivered: %s", title)

    def _record(
        self,
        session_type: SessionType,
        duration_secs: int,
        task_name: str | None,
        note: str | None = None,
    ) -> Session:
        session = Session.create(
            session_type, duration_secs, self.clock, task_name=task_name, note=note
        )
        self.history.add(session)
        self.save_history()
        return session

    # ------------------------------------------------------------------
    # Session note
    # ------------------------------------------------------------------

    def _complete_pending(self, note: str | None) -> Session | None:
        pending = self.pending_session
        if pending is None:
            return None
        self.pending_session = None
        if note is not None and not note.strip():
            note = None
        return self._record(
            pending.session_type, pending.duration_secs, pending.task_name, note
        )

    def _leave_input_mode(self) -> None:
        self.input_mode = InputMode.NORMAL
        self.input_buffer = ""

    def submit_note(self, text: str) -> Session | None:
        """Record the pending session with *text* and stay paused."""
        session = self._complete_pending(text)
        self._leave_input_mode()
        if not self.engine.is_paused:
            self.engine.toggle_pause()
        return session

    def dismiss_note(self) -> Session | None:
        """Record the pending session without a note and stay paused."""
        return self.submit_note("")

    def continue_without_note(self) -> Session | None:
        """Record the pending session without a note and start the next interval."""
        session = self._complete_pending(None)
        self._leave_input_mode()
        if self.engine.is_paused:
            self.toggle_pause()
        return session

    # ------------------------------------------------------------------
    # Tasks and tags
    # ------------------------------------------------------------------

    def add_task(self, text: str) -> Task | None:
        """Create a task from raw input, learning any ``#tags`` it carries."""
        task = self.tasks.add_from_input(text, self.clock)
        if task is None:
            return None
        if task.tags:
            self.tags.record_usage(task.tags, self.clock.today())
            self.save_tags()
        self._tasks_dirty = True
        return task

    def update_tag_suggestion(self) -> None:
        """Suggest a completion for the ``#tag`` currently being typed."""
        hash_pos = self.input_buffer.rfind("#")
        if hash_pos == -1:
            self.tag_suggestion = None
            return
        partial = self.input_buffer[hash_pos + 1 :]
        if partial and " " not in partial:
            self.tag_suggestion = self.tags.suggest(partial)
        else:
            self.tag_suggestion = None

    def accept_tag_suggestion(self) -> None:
        suggestion, self.tag_suggestion = self.tag_suggestion, None
        if suggestion is None:
            return
        hash_pos = self.input_buffer.rfind("#")
        if hash_pos != -1:
            self.input_buffer = self.input_buffer[: hash_pos + 1] + suggestion + " "

    def recent_tags(self) -> list[str]:
        return self.tags.recent(RECENT_TAGS)

    def _mark_tasks_dirty(self) -> None:
        self._tasks_dirty = True

    # ------------------------------------------------------------------
    # Settings and reset
    # ------------------------------------------------------------------

    def adjust_setting(self, delta: int) -> None:
        field = self.selected_setting
        if field is SettingsField.RESET_DATA:
            self.input_mode = InputMode.CONFIRM_RESET
            self.input_buffer = ""
            return

        if self.config.adjust(field, delta):
            logger.info("Setting %s -> %s", field.value, getattr(self.config, field.value))
        if field is SettingsField.SESSIONS_BEFORE_LONG:
            self.engine.set_sessions_before_long(self.config.sessions_before_long_break)
        self.save_config()

    def reset_all_data(self) -> list[SaveResult]:
        """Forget all sessions, tasks and tags and restart the cycle."""
        logger.info("Resetting all data")
        self.history = SessionHistory()
        self.tags = TagStore()
        self.tasks.tasks.clear()
        self.tasks.select(0)
        self.pending_session = None
        self.engine.full_reset()
        self._tasks_dirty = False
        return [self.save_history(), self.save_tasks(), self.save_tags()]

    # ------------------------------------------------------------------
    # Derived values for display
    # ------------------------------------------------------------------

    def is_breathing(self) -> bool:
        return self.config.breathing_enabled and self.engine.is_paused

    def breathing_intensity(self) -> float:
        """Brightness factor between 0.5 and 1.0 for the paused timer."""
        angle = self.breathing_phase / BREATHING_PERIOD * 2 * math.pi
        return 0.5 + 0.5 * abs(math.sin(angle))

    def daily_goal_progress(self) -> tuple[int, int]:
        return self.history.daily_goal_progress(
            self.config.daily_goal_pomodoros, self.clock
        )

    def greeting(self) -> str:
        hour = self.clock.now().hour
        if 5 <= hour <= 11:
            return "Good morning"
        if 12 <= hour <= 16:
            return "Good afternoon"
        if 17 <= hour <= 20:
            return "Good evening"
        return "Good night"

    def estimated_end_time(self) -> str:
        end = self.clock.now() + timedelta(
            seconds=int(self.engine.remaining().total_seconds())
        )
        return end.strftime("%H:%M")

    def is_late_night(self) -> bool:
        return self.clock.now().hour >= 23

    def hints_visible(self) -> bool:
        """Key hints fade after ``hide_hints_after_secs`` without input (0 = never)."""
        limit = self.config.hide_hints_after_secs
        if limit == 0:
            return True
        return self.clock.now_instant() - self._last_key_instant < limit

    # ------------------------------------------------------------------
    # Key dispatch
    # ------------------------------------------------------------------

    def handle_key(self, key: str) -> None:
        """Route one key press (a character or a name like ``"enter"``)."""
        self._last_key_instant = self.clock.now_instant()

        if key == "/" and self.input_mode is InputMode.NORMAL and not self.show_help:
            self.input_mode = InputMode.QUICK_CAPTURE
            self.input_buffer = ""
            return

        if self.input_mode in (InputMode.ADDING_TASK, InputMode.QUICK_CAPTURE):
            self._handle_input_key(key)
        elif self.input_mode is InputMode.SESSION_NOTE:
            self._handle_note_key(key)
        elif self.input_mode is InputMode.CONFIRM_RESET:
            self._handle_confirm_reset_key(key)
        elif self.current_view is CurrentView.TIMER:
            self._handle_timer_key(key)
        elif self.current_view is CurrentView.DASHBOARD:
            self._handle_dashboard_key(key)
        else:
            self._handle_settings_key(key)

    def _handle_common_key(self, key: str) -> bool:
        if key in ("q", "Q"):
            self.save_all()
            self.should_quit = True
            return True
        if key in VIEW_KEYS:
            self.current_view = VIEW_KEYS[key]
            self.focus_mode = False
            return True
        return False

    def _handle_timer_key(self, key: str) -> None:
        if self.show_help:
            self.show_help = False
            return
        if self._handle_common_key(key):
            return

        tasks_active = self.active_pane is ActivePane.TASKS or self.focus_mode
        lowered = key.lower() if len(key) == 1 else key

        if key == "?":
            self.show_help = True
        elif lowered == "f":
            self.focus_mode = not self.focus_mode
        elif key == " ":
            self.toggle_pause()
        elif lowered == "r":
            self.engine.reset()
        elif lowered == "n":
            self.engine.skip()
        elif lowered == "m":
            self.engine.switch_mode()
        elif key == "tab":
            if not self.focus_mode:
                self.active_pane = (
                    ActivePane.TIMER
                    if self.active_pane is ActivePane.TASKS
                    else ActivePane.TASKS
                )
        elif key in ("k", "up"):
            if self.active_pane is ActivePane.TASKS:
                self.tasks.select_prev()
        elif key in ("j", "down"):
            if self.active_pane is ActivePane.TASKS:
                self.tasks.select_next()
        elif lowered == "a":
            if tasks_active:
                self.input_mode = InputMode.ADDING_TASK
                self.input_buffer = ""
        elif lowered == "d":
            if tasks_active and self.tasks.remove_selected() is not None:
                self._mark_tasks_dirty()
        elif lowered == "c":
            if tasks_active:
                self.tasks.clear_completed()
                self._mark_tasks_dirty()
        elif key == "enter":
            if tasks_active and self.tasks.toggle_selected() is not None:
                self._mark_tasks_dirty()
        elif key == "esc":
            self.focus_mode = False

    def _handle_dashboard_key(self, key: str) -> None:
        if self._handle_common_key(key):
            return
        if key == "esc":
            self.current_view = CurrentView.TIMER

    def _handle_settings_key(self, key: str) -> None:
        if self._handle_common_key(key):
            return
        if key == "esc":
            self.current_view = CurrentView.TIMER
        elif key in ("j", "down"):
            self.selected_setting = self.selected_setting.next()
        elif key in ("k", "up"):
            self.selected_setting = self.selected_setting.prev()
        elif key in ("l", "right", "enter"):
            self.adjust_setting(1)
        elif key in ("h", "left"):
            self.adjust_setting(-1)

    def _handle_input_key(self, key: str) -> None:
        if key == "enter":
            if self.input_buffer:
                self.add_task(self.input_buffer)
            self._leave_input_mode()
            self.tag_suggestion = None
        elif key == "esc":
            self._leave_input_mode()
            self.tag_suggestion = None
        elif key == "tab":
            self.accept_tag_suggestion()
        elif key == "backspace":
            self.input_buffer = self.input_buffer[:-1]
            self.update_tag_suggestion()
        elif len(key) == 1:
            self.input_buffer += key
            self.update_tag_suggestion()

    def _handle_note_key(self, key: str) -> None:
        if key == "enter":
            self.submit_note(self.input_buffer)
        elif key == " " and not self.input_buffer:
            self.continue_without_note()
        elif key == "esc":
            self.dismiss_note()
        elif key == "backspace":
            self.input_buffer = self.input_buffer[:-1]
        elif len(key) == 1 and len(self.input_buffer) < NOTE_MAX_LEN:
            self.input_buffer += key

    def _handle_confirm_reset_key(self, key: str) -> None:
        if key == "enter":
            if self.input_buffer == CONFIRM_WORD:
                self.reset_all_data()
            self._leave_input_mode()
        elif key == "esc":
            self._leave_input_mode()
        elif key == "backspace":
            self.input_buffer = self.input_buffer[:-1]
        elif len(key) == 1 and len(self.input_buffer) < CONFIRM_MAX_LEN:
            self.input_buffer += key.upper()
