# tests/test_time_window.py

from __future__ import annotations

import datetime as dt

import pytest

from quest_planner.planner import timeutil
from quest_planner.planner.axis import axis_height_px, slot_at, slot_from_axis_offset
from quest_planner.planner.clipper import clip_to_day, is_all_day
from quest_planner.planner.time_window import TimeWindow, ViewKind
from quest_planner.tasks.task_models import Task

from .conftest import BERLIN, DAY, UTC, at


def test_day_range_is_midnight_to_last_millisecond() -> None:
    lo, hi = TimeWindow.for_day(DAY).range_ms(UTC)
    assert lo == at(DAY, 0)
    assert hi == at(DAY + dt.timedelta(days=1), 0) - 1


def test_week_spans_configured_number_of_days() -> None:
    window = TimeWindow(ViewKind.WEEK, DAY, num_days=3)
    assert window.days() == [DAY, DAY + dt.timedelta(days=1), DAY + dt.timedelta(days=2)]
    assert window.title() == "2024-03-12 - 2024-03-14"


@pytest.mark.parametrize(("requested", "expected"), [(0, 1), (-4, 1), (7, 7), (99, 30)])
def test_week_length_is_clamped(requested: int, expected: int) -> None:
    assert len(TimeWindow(ViewKind.WEEK, DAY, num_days=requested).days()) == expected


def test_month_and_year_ranges() -> None:
    feb = TimeWindow(ViewKind.MONTH, dt.date(2024, 2, 14))
    assert feb.first_day() == dt.date(2024, 2, 1)
    assert feb.last_day() == dt.date(2024, 2, 29)
    assert feb.title() == "February 2024"

    year = TimeWindow(ViewKind.YEAR, DAY)
    lo, hi = year.range_ms(UTC)
    assert lo == at(dt.date(2024, 1, 1), 0)
    assert hi == at(dt.date(2025, 1, 1), 0) - 1
    assert year.title() == "2024"


def test_shift_moves_by_view_unit() -> None:
    assert TimeWindow.for_day(DAY).shift(1).reference == DAY + dt.timedelta(days=1)
    assert TimeWindow(ViewKind.WEEK, DAY).shift(-1).reference == DAY - dt.timedelta(days=1)
    assert TimeWindow(ViewKind.MONTH, dt.date(2024, 1, 31)).shift(1).reference == dt.date(2024, 2, 29)
    assert TimeWindow(ViewKind.YEAR, dt.date(2024, 2, 29)).shift(1).reference == dt.date(2025, 2, 28)


def test_hidden_hours() -> None:
    window = TimeWindow.for_day(DAY, hidden_start_hour=0, hidden_end_hour=6)
    assert window.hides_hours
    assert window.hidden_span == 6
    assert window.visible_hours() == list(range(6, 24))

    inverted = TimeWindow.for_day(DAY, hidden_start_hour=6, hidden_end_hour=2)
    assert not inverted.hides_hours
    assert inverted.hidden_span == 0
    assert inverted.visible_hours() == list(range(24))

    clamped = TimeWindow.for_day(DAY, hidden_start_hour=-3, hidden_end_hour=40)
    assert (clamped.hidden_start_hour, clamped.hidden_end_hour) == (0, 23)


def test_slot_minutes_are_floored_and_clamped() -> None:
    assert slot_at(DAY, 9, 40.0, 80.0).label() == "2024-03-12 09:30"
    assert slot_at(DAY, 9, 79.9, 80.0).minute == 59
    assert slot_at(DAY, 9, 200.0, 80.0).minute == 59
    assert slot_at(DAY, 9, -10.0, 80.0).minute == 0


def test_slot_from_axis_skips_hidden_rows() -> None:
    window = TimeWindow.for_day(DAY, hidden_start_hour=0, hidden_end_hour=6)

    first = slot_from_axis_offset(DAY, 0.0, window, 80.0)
    assert (first.hour, first.minute) == (6, 0)

    third = slot_from_axis_offset(DAY, 200.0, window, 80.0)
    assert (third.hour, third.minute) == (8, 30)

    below = slot_from_axis_offset(DAY, 10_000.0, window, 80.0)
    assert below.hour == 23

    assert axis_height_px(window, 80.0) == pytest.approx(18 * 80.0)


def test_resolve_tz() -> None:
    assert timeutil.resolve_tz("UTC") is dt.timezone.utc
    assert timeutil.resolve_tz("+02:30").utcoffset(None) == dt.timedelta(hours=2, minutes=30)
    assert str(timeutil.resolve_tz("Europe/Berlin")) == "Europe/Berlin"
    assert timeutil.resolve_tz("local") is not None
    with pytest.raises(ValueError):
        timeutil.resolve_tz("Not/AZone")
    with pytest.raises(ValueError):
        timeutil.resolve_tz("+25:00")


def test_day_bounds_follow_dst() -> None:
    berlin = timeutil.resolve_tz("Europe/Berlin")
    # clocks go forward on 2024-03-31, so that local day is 23 hours long
    lo, hi = timeutil.day_bounds_ms(dt.date(2024, 3, 31), berlin)
    assert hi - lo + 1 == 23 * timeutil.HOUR_MS


def test_local_zone_keeps_dst_rules(berlin_local) -> None:
    local = timeutil.resolve_tz("local")

    winter = dt.date(2024, 1, 15)
    summer = dt.date(2024, 7, 15)
    assert local.utcoffset(dt.datetime(2024, 1, 15, 12)) == dt.timedelta(hours=1)
    assert local.utcoffset(dt.datetime(2024, 7, 15, 12)) == dt.timedelta(hours=2)

    # quests stored in real Berlin time, read back through the local zone
    for day in (winter, summer):
        assert timeutil.day_bounds_ms(day, local) == timeutil.day_bounds_ms(day, BERLIN)
        lo, hi = timeutil.day_bounds_ms(day, BERLIN)
        fest = Task(id=1, title="fest", start_ms=lo, end_ms=hi)
        assert is_all_day(fest, local)

        meeting = Task(id=2, title="x", start_ms=timeutil.at_ms(day, BERLIN, 9), end_ms=timeutil.at_ms(day, BERLIN, 10))
        iv = clip_to_day(meeting, day, tz=local)
        assert (iv.start_hour, iv.end_hour) == (pytest.approx(9.0), pytest.approx(10.0))
