"""Shared test fixtures and configuration.

Provides a controllable clock and isolates tests from the real
config/data/log directories.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from pomo_cli.models.config_models import AppConfig
from pomo_cli.models.task import TaskList
from pomo_cli.services.storage_service import StorageService

# Monday, so week boundaries are easy to reason about
START = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock whose monotonic and wall time only move when told to."""

    def __init__(self, start: datetime = START, instant: float = 1000.0):
        self.instant = instant
        self.wall = start

    def now_instant(self) -> float:
        return self.instant

    def now(self) -> datetime:
        return self.wall

    def today(self) -> date:
        return self.wall.date()

    def advance(self, seconds: float) -> None:
        """Move both clocks forward by *seconds*."""
        self.instant += seconds
        self.wall += timedelta(seconds=seconds)

    def set_now(self, when: datetime) -> None:
        """Jump the wall clock without touching the monotonic one."""
        self.wall = when


# ---------------------------------------------------------------------------
# Clock and records
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def config() -> AppConfig:
    return AppConfig()


@pytest.fixture()
def tasks(clock) -> TaskList:
    """Task list with two tasks, the first one selected."""
    task_list = TaskList()
    task_list.add("Write report", ["work"], clock)
    task_list.add("Read paper", [], clock)
    task_list.select(0)
    return task_list


# ---------------------------------------------------------------------------
# Storage isolation
# ---------------------------------------------------------------------------


@pytest.fixture()
def storage(tmp_path, clock) -> StorageService:
    """StorageService rooted at *tmp_path* and driven by the fake clock."""
    return StorageService(
        config_dir=tmp_path / "config",
        data_dir=tmp_path / "data",
        clock=clock,
    )


@pytest.fixture()
def patch_storage(storage, mocker) -> StorageService:
    """Make every command module use the temporary storage."""
    for module in ("stats", "tasks", "tags", "config", "data", "run_command"):
        mocker.patch(
            f"pomo_cli.commands.{module}.get_storage_service", return_value=storage
        )
    return storage


# ---------------------------------------------------------------------------
# Logger isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path):
    """Point the application log file at *tmp_path* for every test."""
    from pomo_cli.utils import logger as logger_mod

    logger_mod.reset_logger()
    logger_mod.get_logger(tmp_path / "logs")
    yield
    logger_mod.reset_logger()
