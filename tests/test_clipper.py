# tests/test_clipper.py

from __future__ import annotations

import datetime as dt

import pytest

from quest_planner.planner import timeutil
from quest_planner.planner.clipper import all_day_tasks, clip_to_day, is_all_day
from quest_planner.planner.date_filter import filter_tasks
from quest_planner.planner.layout import day_intervals
from quest_planner.planner.time_window import TimeWindow, ViewKind
from quest_planner.tasks.task_models import Task

from .conftest import BERLIN, DAY, UTC, at

NEXT = DAY + dt.timedelta(days=1)


def _all_day(task_id: int, first: dt.date, last: dt.date) -> Task:
    return Task(
        id=task_id,
        title="all day",
        start_ms=timeutil.day_bounds_ms(first, UTC)[0],
        end_ms=timeutil.day_bounds_ms(last, UTC)[1],
    )


def test_clip_is_repeatable() -> None:
    task = Task(id=1, title="x", start_ms=at(DAY, 9, 15), end_ms=at(DAY, 11, 45))
    a = clip_to_day(task, DAY, tz=UTC)
    b = clip_to_day(task, DAY, tz=UTC)

    assert a == b
    assert a.start_hour == pytest.approx(9.25)
    assert a.end_hour == pytest.approx(11.75)
    assert a.axis_start_hour == pytest.approx(9.25)


def test_overnight_quest_is_split_across_days() -> None:
    task = Task(id=1, title="night shift", start_ms=at(DAY, 22), end_ms=at(NEXT, 2))

    first = clip_to_day(task, DAY, tz=UTC)
    second = clip_to_day(task, NEXT, tz=UTC)

    assert (first.start_hour, first.end_hour) == (pytest.approx(22.0), 24.0)
    assert (second.start_hour, second.end_hour) == (pytest.approx(0.0), pytest.approx(2.0))
    assert clip_to_day(task, NEXT + dt.timedelta(days=1), tz=UTC) is None
    assert clip_to_day(task, DAY - dt.timedelta(days=1), tz=UTC) is None


def test_short_quest_gets_minimum_height() -> None:
    task = Task(id=1, title="x", start_ms=at(DAY, 9), end_ms=at(DAY, 9, 10))
    iv = clip_to_day(task, DAY, tz=UTC)
    assert iv.end_hour == pytest.approx(9.5)
    assert iv.duration_hours == pytest.approx(0.5)


def test_minimum_height_never_runs_past_midnight() -> None:
    task = Task(id=1, title="x", start_ms=at(DAY, 23, 50), end_ms=at(DAY, 23, 55))
    iv = clip_to_day(task, DAY, tz=UTC)
    assert iv.end_hour == pytest.approx(24.0)


def test_quest_without_end_lasts_one_hour() -> None:
    task = Task(id=1, title="x", start_ms=at(DAY, 9))
    iv = clip_to_day(task, DAY, tz=UTC)
    assert (iv.start_hour, iv.end_hour) == (pytest.approx(9.0), pytest.approx(10.0))


def test_quest_without_start_is_not_clipped() -> None:
    assert clip_to_day(Task(id=1, title="x", end_ms=at(DAY, 9)), DAY, tz=UTC) is None
    assert clip_to_day(Task(id=2, title="x", start_ms=float("nan")), DAY, tz=UTC) is None


def test_all_day_quests_are_kept_off_the_axis() -> None:
    single = _all_day(1, DAY, DAY)
    multi = _all_day(2, DAY, NEXT + dt.timedelta(days=1))
    timed = Task(id=3, title="x", start_ms=at(DAY, 9), end_ms=at(DAY, 10))

    assert is_all_day(single, UTC)
    assert is_all_day(multi, UTC)
    assert not is_all_day(timed, UTC)
    assert clip_to_day(single, DAY, tz=UTC) is None
    assert clip_to_day(multi, NEXT, tz=UTC) is None

    assert [t.id for t in all_day_tasks([single, multi, timed], NEXT, UTC)] == [2]
    assert [t.id for t in all_day_tasks([single, multi, timed], DAY, UTC)] == [1, 2]


def test_hidden_range_shifts_only_later_starts() -> None:
    late = Task(id=1, title="x", start_ms=at(DAY, 7), end_ms=at(DAY, 8))
    early = Task(id=2, title="x", start_ms=at(DAY, 2), end_ms=at(DAY, 3))

    assert clip_to_day(late, DAY, 0, 6, tz=UTC).axis_start_hour == pytest.approx(1.0)
    assert clip_to_day(early, DAY, 0, 6, tz=UTC).axis_start_hour == pytest.approx(2.0)
    # inverted range hides nothing
    assert clip_to_day(late, DAY, 6, 0, tz=UTC).axis_start_hour == pytest.approx(7.0)


def test_deadline_only_quest_is_visible_but_not_positioned() -> None:
    window = TimeWindow(ViewKind.WEEK, DAY, num_days=7)
    task = Task(id=1, title="report", deadline_ms=at(DAY + dt.timedelta(days=3), 17))

    assert filter_tasks([task], window, tz=UTC) == [task]
    assert clip_to_day(task, DAY + dt.timedelta(days=3), tz=UTC) is None
    for day in window.days():
        assert day_intervals([task], day, window, tz=UTC) == []


WINTER = dt.date(2024, 1, 15)
SUMMER = dt.date(2024, 7, 15)
SPRING_FORWARD = dt.date(2024, 3, 31)  # 23 hours long in Europe/Berlin


@pytest.mark.parametrize("tz", [UTC, BERLIN], ids=["utc", "berlin"])
@pytest.mark.parametrize("day", [WINTER, SUMMER, SPRING_FORWARD], ids=str)
def test_all_day_detection_in_local_time(tz: dt.tzinfo, day: dt.date) -> None:
    lo, hi = timeutil.day_bounds_ms(day, tz)
    task = Task(id=1, title="fest", start_ms=lo, end_ms=hi)

    assert is_all_day(task, tz)
    assert clip_to_day(task, day, tz=tz) is None
    assert [t.id for t in all_day_tasks([task], day, tz)] == [1]


@pytest.mark.parametrize("tz", [UTC, BERLIN], ids=["utc", "berlin"])
@pytest.mark.parametrize("day", [WINTER, SUMMER, SPRING_FORWARD], ids=str)
def test_clip_hours_are_local_wall_clock(tz: dt.tzinfo, day: dt.date) -> None:
    task = Task(id=1, title="x", start_ms=timeutil.at_ms(day, tz, 9), end_ms=timeutil.at_ms(day, tz, 10, 30))
    iv = clip_to_day(task, day, tz=tz)

    assert iv.start_hour == pytest.approx(9.0)
    assert iv.end_hour == pytest.approx(10.5)


@pytest.mark.parametrize("tz", [UTC, BERLIN], ids=["utc", "berlin"])
def test_short_day_end_maps_to_24(tz: dt.tzinfo) -> None:
    nxt = SPRING_FORWARD + dt.timedelta(days=1)
    task = Task(id=1, title="x", start_ms=timeutil.at_ms(SPRING_FORWARD, tz, 20), end_ms=timeutil.at_ms(nxt, tz, 2))

    first = clip_to_day(task, SPRING_FORWARD, tz=tz)
    second = clip_to_day(task, nxt, tz=tz)

    assert (first.start_hour, first.end_hour) == (pytest.approx(20.0), 24.0)
    assert (second.start_hour, second.end_hour) == (pytest.approx(0.0), pytest.approx(2.0))


def test_hour_after_the_gap_keeps_its_wall_clock_position() -> None:
    # 02:00-03:00 does not exist on this day; 03:00 CEST is still hour 3
    task = Task(
        id=1,
        title="x",
        start_ms=timeutil.at_ms(SPRING_FORWARD, BERLIN, 3),
        end_ms=timeutil.at_ms(SPRING_FORWARD, BERLIN, 4),
    )
    iv = clip_to_day(task, SPRING_FORWARD, tz=BERLIN)
    assert (iv.start_hour, iv.end_hour) == (pytest.approx(3.0), pytest.approx(4.0))
