"""JSON persistence for config, session history, tags and tasks.

Every record lives in its own pretty-printed JSON file. Loading and saving
never raise: each call returns a result object describing what happened, and
the caller decides whether to log, retry or ignore. A missing file is created
with defaults; an unreadable one falls back to defaults without being
overwritten until the next save.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Generic, TypeVar

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ValidationError

from pomo_cli.models.config_models import AppConfig
from pomo_cli.models.focus.clock import Clock, SystemClock
from pomo_cli.models.focus.history import Session, SessionHistory
from pomo_cli.models.focus.tags import TagInfo, TagStore
from pomo_cli.models.task import Task, TaskList

logger = logging.getLogger(__name__)

APP_NAME = "pomo_cli"
CONFIG_FILE = "config.json"
SESSIONS_FILE = "sessions.json"
TAGS_FILE = "tags.json"
TASKS_FILE = "tasks.json"

M = TypeVar("M", bound=BaseModel)

# Record -> (list field, item model) whose items are validated one by one
_LIST_ITEMS: dict[type[BaseModel], tuple[str, type[BaseModel]]] = {
    SessionHistory: ("sessions", Session),
    TagStore: ("tags", TagInfo),
    TaskList: ("tasks", Task),
}


@dataclass
class SaveResult:
    """Outcome of writing one record."""

    path: Path
    ok: bool
    error: str | None = None


@dataclass
class LoadResult(Generic[M]):
    """Outcome of reading one record. ``value`` is always usable."""

    value: M
    path: Path
    ok: bool = True
    created: bool = False
    error: str | None = None
    dropped_items: int = 0


class StorageService:
    """Loads and saves the four persisted records."""

    def __init__(
        self,
        config_dir: Path | None = None,
        data_dir: Path | None = None,
        clock: Clock | None = None,
    ):
        self.config_dir = Path(config_dir or user_config_dir(APP_NAME))
        self.data_dir = Path(data_dir or user_data_dir(APP_NAME))
        self.clock = clock or SystemClock()

    @property
    def config_path(self) -> Path:
        return self.config_dir / CONFIG_FILE

    @property
    def sessions_path(self) -> Path:
        return self.data_dir / SESSIONS_FILE

    @property
    def tags_path(self) -> Path:
        return self.data_dir / TAGS_FILE

    @property
    def tasks_path(self) -> Path:
        return self.data_dir / TASKS_FILE

    # ------------------------------------------------------------------
    # Generic record I/O
    # ------------------------------------------------------------------

    def _save(self, record: BaseModel, path: Path) -> SaveResult:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(record.model_dump_json(indent=2) + "\n", encoding="utf-8")
        except (OSError, ValueError) as e:
            logger.warning("Failed to save %s: %s", path, e)
            return SaveResult(path=path, ok=False, error=str(e))
        return SaveResult(path=path, ok=True)

    def _load(self, model: type[M], path: Path) -> LoadResult[M]:
        if not path.exists():
            value = model()
            saved = self._save(value, path)
            return LoadResult(
                value=value, path=path, ok=saved.ok, created=True, error=saved.error
            )

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Unreadable %s, using defaults: %s", path, e)
            return LoadResult(value=model(), path=path, ok=False, error=str(e))

        if not isinstance(raw, dict):
            error = "top-level JSON value must be an object"
            logger.warning("Invalid %s, using defaults: %s", path, error)
            return LoadResult(value=model(), path=path, ok=False, error=error)

        dropped = self._drop_invalid_items(model, raw, path)
        try:
            value = model.model_validate(raw)
        except ValidationError as e:
            logger.warning("Invalid %s, using defaults: %s", path, e)
            return LoadResult(value=model(), path=path, ok=False, error=str(e))

        return LoadResult(value=value, path=path, dropped_items=dropped)

    def _drop_invalid_items(
        self, model: type[BaseModel], raw: dict, path: Path
    ) -> int:
        """Remove list items that fail validation so one bad entry is not fatal."""
        if model not in _LIST_ITEMS:
            return 0
        field_name, item_model = _LIST_ITEMS[model]
        items = raw.get(field_name)
        if not isinstance(items, list):
            raw.pop(field_name, None)
            return 0

        kept = []
        for item in items:
            try:
                item_model.model_validate(item)
            except ValidationError as e:
                logger.warning("Dropping invalid %s entry in %s: %s", field_name, path, e)
                continue
            kept.append(item)
        raw[field_name] = kept
        return len(items) - len(kept)

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def load_config(self) -> LoadResult[AppConfig]:
        return self._load(AppConfig, self.config_path)

    def save_config(self, config: AppConfig) -> SaveResult:
        return self._save(config, self.config_path)

    def load_history(self) -> LoadResult[SessionHistory]:
        """Load session history and expire a lapsed streak."""
        result = self._load(SessionHistory, self.sessions_path)
        result.value.recalculate_on_load(self.clock.today())
        return result

    def save_history(self, history: SessionHistory) -> SaveResult:
        return self._save(history, self.sessions_path)

    def load_tags(self) -> LoadResult[TagStore]:
        """Load learned tags, forgetting ones unused for a month."""
        result = self._load(TagStore, self.tags_path)
        removed = result.value.cleanup(self.clock.today())
        if removed:
            logger.info("Forgot %d stale tag(s)", removed)
        return result

    def save_tags(self, tags: TagStore) -> SaveResult:
        return self._save(tags, self.tags_path)

    def load_tasks(self) -> LoadResult[TaskList]:
        return self._load(TaskList, self.tasks_path)

    def save_tasks(self, tasks: TaskList) -> SaveResult:
        return self._save(tasks, self.tasks_path)

    def reset_data(self) -> list[SaveResult]:
        """Overwrite history, tags and tasks with empty records."""
        logger.info("Resetting all data")
        return [
            self.save_history(SessionHistory()),
            self.save_tags(TagStore()),
            self.save_tasks(TaskList()),
        ]


@lru_cache
def get_storage_service() -> StorageService:
    """Get the process-wide StorageService."""
    return StorageService()
