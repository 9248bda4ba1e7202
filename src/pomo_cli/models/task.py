"""Task list data models."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from pomo_cli.models.focus.clock import Clock


def parse_task_input(text: str) -> tuple[str, list[str]]:
    """Split raw input like ``"Buy milk #shopping #urgent"`` into name and tags."""
    tags: list[str] = []
    name_parts: list[str] = []

    for word in text.split():
        if word.startswith("#") and len(word) > 1:
            tags.append(word[1:])
        else:
            name_parts.append(word)

    return " ".join(name_parts), tags


class Task(BaseModel):
    """Task model."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    completed: bool = False
    pomodoros_spent: int = Field(default=0, ge=0)
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now().astimezone())


class TaskList(BaseModel):
    """Ordered task list with a cursor for the selected task."""

    model_config = ConfigDict(extra="ignore")

    tasks: list[Task] = Field(default_factory=list)
    _selected_index: int = PrivateAttr(default=0)

    @property
    def selected_index(self) -> int:
        return self._selected_index

    def __len__(self) -> int:
        return len(self.tasks)

    def _clamp_selection(self) -> None:
        if not self.tasks:
            self._selected_index = 0
        elif self._selected_index >= len(self.tasks):
            self._selected_index = len(self.tasks) - 1

    def select(self, index: int) -> None:
        self._selected_index = max(index, 0)
        self._clamp_selection()

    def selected(self) -> Task | None:
        if not self.tasks:
            return None
        return self.tasks[self._selected_index]

    def select_next(self) -> None:
        if self.tasks:
            self._selected_index = (self._selected_index + 1) % len(self.tasks)

    def select_prev(self) -> None:
        if self.tasks:
            self._selected_index = (self._selected_index - 1) % len(self.tasks)

    def add(self, name: str, tags: list[str], clock: Clock) -> Task:
        """Append a new task and select it."""
        task = Task(name=name, tags=list(tags), created_at=clock.now())
        self.tasks.append(task)
        self._selected_index = len(self.tasks) - 1
        return task

    def add_from_input(self, text: str, clock: Clock) -> Task | None:
        """Parse *text* and add it. Input holding only tags adds nothing."""
        name, tags = parse_task_input(text)
        if not name.strip():
            return None
        return self.add(name, tags, clock)

    def toggle_selected(self) -> Task | None:
        task = self.selected()
        if task is not None:
            task.completed = not task.completed
        return task

    def remove_selected(self) -> Task | None:
        if not self.tasks:
            return None
        task = self.tasks.pop(self._selected_index)
        self._clamp_selection()
        return task

    def clear_completed(self) -> int:
        """Remove completed tasks. Returns how many were removed."""
        before = len(self.tasks)
        self.tasks = [t for t in self.tasks if not t.completed]
        self._clamp_selection()
        return before - len(self.tasks)

    def find(self, id_prefix: str) -> Task | None:
        """Find a task by (unique) id prefix or 1-based position."""
        if id_prefix.isdigit():
            position = int(id_prefix)
            if 1 <= position <= len(self.tasks):
                return self.tasks[position - 1]
        matches = [t for t in self.tasks if t.id.startswith(id_prefix)]
        if len(matches) == 1:
            return matches[0]
        return None

    def remove(self, task: Task) -> None:
        self.tasks = [t for t in self.tasks if t.id != task.id]
        self._clamp_selection()
