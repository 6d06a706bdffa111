# src/quest_planner/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..planner.engine import PlannerEngine
from ..planner.time_window import TimeWindow
from ..tasks.task_store import TaskStore


@dataclass
class PlannerState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    task_store: TaskStore
    engine: PlannerEngine
    window: TimeWindow
    show_completed: bool = False
