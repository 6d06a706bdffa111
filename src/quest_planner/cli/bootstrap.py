# src/quest_planner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the quest store, pointer hub and planner engine into PlannerState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import PlannerState
from ..planner.engine import PlannerEngine
from ..planner.pointer import PointerHub
from ..planner.time_window import TimeWindow, ViewKind
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, tz=None) -> PlannerState:
    """
    Create PlannerState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(settings.tasks_db_path)
    engine = PlannerEngine(store, settings, pointer_source=PointerHub(), tz=tz)

    window = TimeWindow.today(
        ViewKind.WEEK,
        engine.tz,
        num_days=settings.week_view_days,
        hidden_start_hour=settings.hidden_hour_start,
        hidden_end_hour=settings.hidden_hour_end,
    )
    logger.debug("Initial window %s (%s)", window.title(), window.kind)

    return PlannerState(
        settings=settings,
        task_store=store,
        engine=engine,
        window=window,
        show_completed=bool(settings.show_completed),
    )
