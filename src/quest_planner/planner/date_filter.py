# src/quest_planner/planner/date_filter.py

"""
Selects the quests relevant to a planner view.

Matching rules, in order:
- start and end present: either endpoint inside the window, or the quest
  spans the whole window
- only a start: the start falls inside the window
- otherwise a deadline: the deadline falls inside the window
- no time fields at all: always shown (the view lists it as unscheduled)
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable

from ..tasks.task_models import Task, TaskStatus
from .time_window import TimeWindow


def _inside(ms: int, lo: int, hi: int) -> bool:
    return lo <= ms <= hi


def matches_range(task: Task, range_start: int, range_end: int) -> bool:
    start, end = task.start, task.end

    if start is not None and end is not None:
        return (
            _inside(start, range_start, range_end)
            or _inside(end, range_start, range_end)
            or (start <= range_start and end >= range_end)
        )

    if start is not None:
        return _inside(start, range_start, range_end)

    deadline = task.deadline
    if deadline is not None:
        return _inside(deadline, range_start, range_end)

    return True


def filter_tasks(
    tasks: Iterable[Task],
    window: TimeWindow,
    *,
    show_completed: bool = False,
    tz: dt.tzinfo,
) -> list[Task]:
    """
    Quests visible in window, input order preserved.

    With show_completed=False failed quests are dropped; completed ones stay
    (they are rendered dimmed).
    """
    range_start, range_end = window.range_ms(tz)
    out: list[Task] = []
    for task in tasks:
        if not show_completed and task.status == TaskStatus.FAILED:
            continue
        if matches_range(task, range_start, range_end):
            out.append(task)
    return out


def unscheduled_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Quests that cannot be placed on the time axis (no usable start)."""
    return [t for t in tasks if not t.has_start]
