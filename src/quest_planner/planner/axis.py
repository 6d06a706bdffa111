# src/quest_planner/planner/axis.py

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass

from .time_window import TimeWindow


@dataclass(frozen=True, slots=True)
class SlotTarget:
    """A point on the time axis the user clicked to create a quest."""

    day: dt.date
    hour: int
    minute: int

    def label(self) -> str:
        return f"{self.day.isoformat()} {self.hour:02d}:{self.minute:02d}"


def slot_at(day: dt.date, hour: int, offset_y: float, pixels_per_hour: float) -> SlotTarget:
    """Slot for a click offset_y pixels below the top of the given hour row."""
    minute = math.floor((offset_y / pixels_per_hour) * 60)
    return SlotTarget(day=day, hour=int(hour), minute=min(59, max(0, minute)))


def slot_from_axis_offset(
    day: dt.date,
    axis_y: float,
    window: TimeWindow,
    pixels_per_hour: float,
) -> SlotTarget:
    """Slot for a click axis_y pixels below the top of a whole day column."""
    hours = window.visible_hours()
    row = min(len(hours) - 1, max(0, int(axis_y // pixels_per_hour)))
    offset = axis_y - row * pixels_per_hour
    return slot_at(day, hours[row], offset, pixels_per_hour)


def axis_height_px(window: TimeWindow, pixels_per_hour: float) -> float:
    return len(window.visible_hours()) * pixels_per_hour
