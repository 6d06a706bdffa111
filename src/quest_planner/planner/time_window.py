# src/quest_planner/planner/time_window.py

from __future__ import annotations

import calendar
import datetime as dt
from dataclasses import dataclass, replace
from enum import StrEnum

from . import timeutil

MIN_WEEK_DAYS = 1
MAX_WEEK_DAYS = 30


class ViewKind(StrEnum):
    DAY = "day"
    WEEK = "week"  # N consecutive days starting at the reference date
    MONTH = "month"
    YEAR = "year"


def clamp_hour(value: int) -> int:
    return min(23, max(0, int(value)))


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """
    Visible date range of a planner view plus its collapsed hour range.

    The hidden range [hidden_start_hour, hidden_end_hour) only takes effect when
    hidden_end_hour > hidden_start_hour; anything else means "nothing hidden".
    """

    kind: ViewKind
    reference: dt.date
    num_days: int = 7
    hidden_start_hour: int = 0
    hidden_end_hour: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "num_days", min(MAX_WEEK_DAYS, max(MIN_WEEK_DAYS, int(self.num_days))))
        object.__setattr__(self, "hidden_start_hour", clamp_hour(self.hidden_start_hour))
        object.__setattr__(self, "hidden_end_hour", clamp_hour(self.hidden_end_hour))

    @classmethod
    def for_day(cls, day: dt.date, *, hidden_start_hour: int = 0, hidden_end_hour: int = 0) -> TimeWindow:
        return cls(ViewKind.DAY, day, 1, hidden_start_hour, hidden_end_hour)

    @classmethod
    def today(cls, kind: ViewKind, tz: dt.tzinfo, **kwargs: int) -> TimeWindow:
        return cls(kind, dt.datetime.now(tz=tz).date(), **kwargs)

    # ---- dates ----

    def first_day(self) -> dt.date:
        if self.kind == ViewKind.MONTH:
            return timeutil.month_start(self.reference)
        if self.kind == ViewKind.YEAR:
            return dt.date(self.reference.year, 1, 1)
        return self.reference

    def last_day(self) -> dt.date:
        if self.kind == ViewKind.DAY:
            return self.reference
        if self.kind == ViewKind.WEEK:
            return self.reference + dt.timedelta(days=self.num_days - 1)
        if self.kind == ViewKind.MONTH:
            return timeutil.month_end(self.reference)
        return dt.date(self.reference.year, 12, 31)

    def days(self) -> list[dt.date]:
        first = self.first_day()
        return timeutil.consecutive_days(first, (self.last_day() - first).days + 1)

    def range_ms(self, tz: dt.tzinfo) -> tuple[int, int]:
        """Inclusive [start, end] in epoch ms; end is 23:59:59.999 of the last day."""
        return timeutil.range_bounds_ms(self.first_day(), self.last_day(), tz)

    # ---- hour axis ----

    @property
    def hides_hours(self) -> bool:
        return self.hidden_end_hour > self.hidden_start_hour

    @property
    def hidden_span(self) -> int:
        return self.hidden_end_hour - self.hidden_start_hour if self.hides_hours else 0

    def visible_hours(self) -> list[int]:
        if not self.hides_hours:
            return list(range(24))
        return [h for h in range(24) if h < self.hidden_start_hour or h >= self.hidden_end_hour]

    # ---- navigation ----

    def shift(self, step: int) -> TimeWindow:
        if self.kind in (ViewKind.DAY, ViewKind.WEEK):
            ref = self.reference + dt.timedelta(days=step)
        elif self.kind == ViewKind.MONTH:
            ref = timeutil.add_months(self.reference, step)
        else:
            ref = timeutil.add_months(self.reference, 12 * step)
        return replace(self, reference=ref)

    def with_kind(self, kind: ViewKind) -> TimeWindow:
        return replace(self, kind=kind)

    def title(self) -> str:
        if self.kind == ViewKind.DAY:
            return self.reference.isoformat()
        if self.kind == ViewKind.WEEK:
            return f"{self.first_day().isoformat()} - {self.last_day().isoformat()}"
        if self.kind == ViewKind.MONTH:
            return f"{calendar.month_name[self.reference.month]} {self.reference.year}"
        return str(self.reference.year)
