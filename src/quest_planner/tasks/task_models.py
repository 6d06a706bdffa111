# src/quest_planner/tasks/task_models.py

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

HOUR_MS = 60 * 60 * 1000


class TaskStatus(StrEnum):
    """
    Quest lifecycle status.

    Completed quests stay visible (dimmed) in the planner; failed ones are
    hidden unless the view explicitly asks for them.
    """

    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.ACTIVE
        try:
            return cls(raw)
        except ValueError:
            return cls.ACTIVE


class MilestoneTag(StrEnum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @classmethod
    def parse_many(cls, raw: Iterable[str] | None) -> frozenset[MilestoneTag]:
        out: set[MilestoneTag] = set()
        for item in raw or ():
            try:
                out.add(cls(str(item).strip().lower()))
            except ValueError:
                continue
        return frozenset(out)


def finite_ms(value: float | int | None) -> int | None:
    """Return value as int milliseconds, or None when missing or non-finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(f):
        return None
    return int(value) if isinstance(value, int) else int(round(f))


@dataclass(slots=True)
class Task:
    id: int
    title: str = ""
    status: TaskStatus = TaskStatus.ACTIVE

    start_ms: int | None = None
    end_ms: int | None = None
    deadline_ms: int | None = None

    milestones: frozenset[MilestoneTag] = field(default_factory=frozenset)
    parent_id: int | None = None
    color: str | None = None

    created_at: float = 0.0
    updated_at: float = 0.0

    @property
    def start(self) -> int | None:
        return finite_ms(self.start_ms)

    @property
    def end(self) -> int | None:
        return finite_ms(self.end_ms)

    @property
    def deadline(self) -> int | None:
        return finite_ms(self.deadline_ms)

    @property
    def has_start(self) -> bool:
        return self.start is not None

    @property
    def has_range(self) -> bool:
        return self.start is not None and self.end is not None

    def effective_end_ms(self, default_duration_ms: int = HOUR_MS) -> int | None:
        """End used for the time axis; a timed task without an end lasts one hour."""
        start = self.start
        if start is None:
            return None
        end = self.end
        return end if end is not None else start + default_duration_ms
