# tests/conftest.py

from __future__ import annotations

import datetime as dt
from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest
import tzlocal

from quest_planner.cli.bootstrap import create_initial_state
from quest_planner.core.state import PlannerState
from quest_planner.planner import timeutil
from quest_planner.tasks.task_store import TaskStore

UTC = dt.timezone.utc
BERLIN = ZoneInfo("Europe/Berlin")
DAY = dt.date(2024, 3, 12)  # a Tuesday


def at(day: dt.date, hour: int, minute: int = 0) -> int:
    """Epoch ms of a UTC wall-clock time (tests run the planner in UTC)."""
    return timeutil.at_ms(day, UTC, hour, minute)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with PlannerEngine and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's .env.
    """
    return SimpleNamespace(
        app_name="quest-planner-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "quests.sqlite3",
        timezone="UTC",
        day_pixels_per_hour=80.0,
        week_pixels_per_hour=30.0,
        week_view_days=7,
        hidden_hour_start=0,
        hidden_hour_end=0,
        overlap_tolerance_hours=0.1,
        min_display_hours=0.5,
        show_completed=False,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path)


@pytest.fixture()
def state(settings: SimpleNamespace) -> PlannerState:
    """
    PlannerState wired through the real composition root.

    NOTE: We keep the real SQLite TaskStore here because drag commits going
    through it are part of what we want to test.
    """
    st = create_initial_state(settings=settings, tz=UTC)
    yield st
    st.engine.close()
    st.task_store.close()


@pytest.fixture()
def berlin_local() -> Iterator[None]:
    """Make the machine-local zone Europe/Berlin for the duration of a test."""
    with pytest.MonkeyPatch.context() as mp:
        mp.setenv("TZ", "Europe/Berlin")
        tzlocal.reload_localzone()
        yield
    tzlocal.reload_localzone()
