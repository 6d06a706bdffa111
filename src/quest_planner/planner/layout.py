# src/quest_planner/planner/layout.py

"""
Side-by-side layout of overlapping quests within one day column.

Packing is greedy: intervals sorted by start go into the first column whose
last interval ends no later than the candidate's start plus a small tolerance.
Widths are per interval: the denominator is the number of columns holding
anything that overlaps *this* interval, not the column count of the whole
cluster, so two boxes in one stack may end up with different widths.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..tasks.task_models import Task
from .clipper import DEFAULT_MIN_DISPLAY_HOURS, DisplayInterval, clip_to_day, intersects_day
from .time_window import TimeWindow

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE_HOURS = 0.1


@dataclass(frozen=True, slots=True)
class LayoutBox:
    task_id: int
    top_px: float
    height_px: float
    width_percent: float
    left_percent: float
    column: int
    column_count: int


def _overlaps(a: DisplayInterval, b: DisplayInterval) -> bool:
    return not (a.end_hour <= b.start_hour or a.start_hour >= b.end_hour)


class OverlapLayoutEngine:
    def __init__(
        self,
        pixels_per_hour: float,
        *,
        tolerance_hours: float = DEFAULT_TOLERANCE_HOURS,
    ) -> None:
        if pixels_per_hour <= 0:
            raise ValueError("pixels_per_hour must be positive")
        self.pixels_per_hour = float(pixels_per_hour)
        self.tolerance_hours = float(tolerance_hours)

    def assign_columns(self, intervals: Sequence[DisplayInterval]) -> list[list[int]]:
        """Greedy packing; returns columns as lists of indices into intervals."""
        # sorted() is stable: equal starts keep input order.
        order = sorted(range(len(intervals)), key=lambda i: intervals[i].start_hour)
        columns: list[list[int]] = []

        for idx in order:
            candidate = intervals[idx]
            for column in columns:
                last = intervals[column[-1]]
                if candidate.start_hour >= last.end_hour - self.tolerance_hours:
                    column.append(idx)
                    break
            else:
                columns.append([idx])

        return columns

    def layout(self, intervals: Sequence[DisplayInterval]) -> list[LayoutBox]:
        """One box per interval, in input order."""
        if not intervals:
            return []

        columns = self.assign_columns(intervals)
        column_of = {idx: col for col, members in enumerate(columns) for idx in members}

        boxes: list[LayoutBox] = []
        for idx, iv in enumerate(intervals):
            effective = sum(
                1
                for members in columns
                if any(_overlaps(intervals[other], iv) for other in members)
            )
            width = 100.0 / max(1, effective)
            column = column_of[idx]
            boxes.append(
                LayoutBox(
                    task_id=iv.task_id,
                    top_px=max(0.0, iv.axis_start_hour * self.pixels_per_hour),
                    height_px=iv.duration_hours * self.pixels_per_hour,
                    width_percent=width,
                    left_percent=width * column,
                    column=column,
                    column_count=effective,
                )
            )

        logger.debug("Laid out %d intervals in %d columns", len(boxes), len(columns))
        return boxes


def day_intervals(
    tasks: Iterable[Task],
    day: dt.date,
    window: TimeWindow,
    *,
    tz: dt.tzinfo,
    min_display_hours: float = DEFAULT_MIN_DISPLAY_HOURS,
) -> list[DisplayInterval]:
    """Clipped intervals of every timed quest touching day, input order kept."""
    out: list[DisplayInterval] = []
    for task in tasks:
        if not intersects_day(task, day, tz):
            continue
        iv = clip_to_day(
            task,
            day,
            window.hidden_start_hour,
            window.hidden_end_hour,
            tz=tz,
            min_display_hours=min_display_hours,
        )
        if iv is not None:
            out.append(iv)
    return out


def compute_day_layout(
    tasks: Iterable[Task],
    day: dt.date,
    window: TimeWindow,
    *,
    pixels_per_hour: float,
    tz: dt.tzinfo,
    tolerance_hours: float = DEFAULT_TOLERANCE_HOURS,
    min_display_hours: float = DEFAULT_MIN_DISPLAY_HOURS,
) -> list[LayoutBox]:
    engine = OverlapLayoutEngine(pixels_per_hour, tolerance_hours=tolerance_hours)
    return engine.layout(day_intervals(tasks, day, window, tz=tz, min_display_hours=min_display_hours))


def compute_week_layout(
    tasks: Iterable[Task],
    window: TimeWindow,
    *,
    pixels_per_hour: float,
    tz: dt.tzinfo,
    tolerance_hours: float = DEFAULT_TOLERANCE_HOURS,
    min_display_hours: float = DEFAULT_MIN_DISPLAY_HOURS,
) -> dict[dt.date, list[LayoutBox]]:
    """Per-day layout for every day of window (multi-day quests appear on each day)."""
    task_list = list(tasks)
    engine = OverlapLayoutEngine(pixels_per_hour, tolerance_hours=tolerance_hours)
    return {
        day: engine.layout(
            day_intervals(task_list, day, window, tz=tz, min_display_hours=min_display_hours)
        )
        for day in window.days()
    }
