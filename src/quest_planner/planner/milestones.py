# src/quest_planner/planner/milestones.py

from __future__ import annotations

import calendar
import datetime as dt
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..tasks.task_models import MilestoneTag, Task, TaskStatus
from . import timeutil
from .time_window import TimeWindow, ViewKind


@dataclass(slots=True)
class MilestoneGroup:
    key: str
    label: str
    tasks: list[Task] = field(default_factory=list)


def period_key(tag: MilestoneTag, day: dt.date) -> tuple[str, str]:
    """(key, label) of the calendar period containing day."""
    if tag == MilestoneTag.WEEK:
        monday = timeutil.week_start(day)
        sunday = monday + dt.timedelta(days=6)
        return monday.isoformat(), f"{monday.isoformat()} - {sunday.isoformat()}"
    if tag == MilestoneTag.MONTH:
        return f"{day.year:04d}-{day.month:02d}", f"{calendar.month_name[day.month]} {day.year}"
    return f"{day.year:04d}", f"{day.year}"


def group_milestones(
    tasks: Iterable[Task],
    tag: MilestoneTag,
    window: TimeWindow,
    *,
    tz: dt.tzinfo,
) -> dict[str, MilestoneGroup]:
    """
    Bucket milestone quests touching window by the period their start falls in.

    Failed quests and quests without a start are skipped; groups keep the order
    in which they were first seen.
    """
    view_start, view_end = window.range_ms(tz)
    grouped: dict[str, MilestoneGroup] = {}

    for task in tasks:
        if tag not in task.milestones or task.status == TaskStatus.FAILED:
            continue
        start = task.start
        if start is None:
            continue
        end = task.end if task.end is not None else start
        if end < view_start or start > view_end:
            continue

        key, label = period_key(tag, timeutil.day_of(start, tz))
        group = grouped.get(key)
        if group is None:
            group = grouped[key] = MilestoneGroup(key=key, label=label)
        group.tasks.append(task)

    return grouped


def milestones_for_day(
    tasks: Iterable[Task],
    day: dt.date,
    *,
    tz: dt.tzinfo,
) -> dict[MilestoneTag, list[Task]]:
    """Week and month highlight panels shown above a single-day view."""
    task_list = list(tasks)
    monday = timeutil.week_start(day)
    week = TimeWindow(ViewKind.WEEK, monday, 7)
    month = TimeWindow(ViewKind.MONTH, day)

    out: dict[MilestoneTag, list[Task]] = {}
    for tag, window in ((MilestoneTag.WEEK, week), (MilestoneTag.MONTH, month)):
        out[tag] = [t for g in group_milestones(task_list, tag, window, tz=tz).values() for t in g.tasks]
    return out
