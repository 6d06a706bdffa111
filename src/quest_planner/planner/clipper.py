# src/quest_planner/planner/clipper.py

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from dataclasses import dataclass

from ..tasks.task_models import Task
from . import timeutil

DEFAULT_MIN_DISPLAY_HOURS = 0.5


@dataclass(frozen=True, slots=True)
class DisplayInterval:
    """
    The part of a quest visible on one calendar day, in fractional hours.

    start_hour/end_hour are wall-clock hours used for overlap packing;
    axis_start_hour is where the box starts on the rendered axis once the
    hidden hour range has been collapsed.
    """

    task_id: int
    day: dt.date
    start_hour: float
    end_hour: float
    axis_start_hour: float

    @property
    def duration_hours(self) -> float:
        return self.end_hour - self.start_hour


def is_all_day(task: Task, tz: dt.tzinfo) -> bool:
    """
    All-day quests are stored as local 00:00 -> 23:59 (possibly on a later date).

    Only hours and minutes are compared, so a timed quest that happens to run
    from exactly midnight to 23:59 is indistinguishable from an all-day one.
    """
    start, end = task.start, task.end
    if start is None or end is None:
        return False
    s = timeutil.local_dt(start, tz)
    e = timeutil.local_dt(end, tz)
    return s.hour == 0 and s.minute == 0 and e.hour == 23 and e.minute == 59


def intersects_day(task: Task, day: dt.date, tz: dt.tzinfo) -> bool:
    start = task.start
    if start is None:
        return False
    end = task.end if task.end is not None else start
    day_start, day_end = timeutil.day_bounds_ms(day, tz)
    return start <= day_end and end >= day_start


def all_day_tasks(tasks: Iterable[Task], day: dt.date, tz: dt.tzinfo) -> list[Task]:
    return [t for t in tasks if is_all_day(t, tz) and intersects_day(t, day, tz)]


def clip_to_day(
    task: Task,
    day: dt.date,
    hidden_start_hour: int = 0,
    hidden_end_hour: int = 0,
    *,
    tz: dt.tzinfo,
    min_display_hours: float = DEFAULT_MIN_DISPLAY_HOURS,
) -> DisplayInterval | None:
    """
    Clip a quest to one day and convert it to axis hours.

    Returns None for quests without a start, all-day quests and quests that do
    not touch the day. Starts inside the hidden range are left unshifted.
    """
    start = task.start
    end = task.effective_end_ms()
    if start is None or end is None:
        return None
    if is_all_day(task, tz):
        return None

    day_start, day_end = timeutil.day_bounds_ms(day, tz)
    if start > day_end or end < day_start:
        return None

    display_start = max(start, day_start)
    display_end = min(end, day_end)

    start_hour = timeutil.hour_of_day(timeutil.local_dt(display_start, tz))
    if display_end >= day_end:
        end_hour = 24.0
    else:
        end_hour = timeutil.hour_of_day(timeutil.local_dt(display_end, tz))

    duration = max(float(min_display_hours), end_hour - start_hour)
    end_hour = min(24.0, start_hour + duration)

    axis_start = start_hour
    if hidden_end_hour > hidden_start_hour and start_hour >= hidden_end_hour:
        axis_start = start_hour - (hidden_end_hour - hidden_start_hour)

    return DisplayInterval(
        task_id=task.id,
        day=day,
        start_hour=start_hour,
        end_hour=end_hour,
        axis_start_hour=axis_start,
    )
