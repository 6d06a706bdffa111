# src/quest_planner/planner/timeutil.py

from __future__ import annotations

import datetime as dt
import re
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tzlocal import get_localzone

DAY_MS = 24 * 60 * 60 * 1000
HOUR_MS = 60 * 60 * 1000

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def resolve_tz(name: str | None) -> dt.tzinfo:
    """Resolve a timezone name into a tzinfo.

    Supported forms:
      - None/"" / "local" / "system" -> machine local zone (with its DST rules)
      - "UTC" / "Z" / "GMT" -> dt.timezone.utc
      - fixed offsets: "+02:00", "+0200", "-05:00"
      - IANA names, e.g. "Europe/Berlin"

    Raises ValueError for invalid identifiers.
    """
    s = (name or "").strip()
    low = s.lower()
    if not s or low in {"local", "system"}:
        return get_localzone()
    if low in {"utc", "z", "gmt"}:
        return dt.timezone.utc

    m = _OFFSET_RE.match(s)
    if m:
        sign_s, hh_s, mm_s = m.groups()
        hh, mm = int(hh_s), int(mm_s)
        if hh > 23 or mm > 59:
            raise ValueError(f"Invalid timezone offset: {s!r}")
        sign = 1 if sign_s == "+" else -1
        return dt.timezone(sign * dt.timedelta(hours=hh, minutes=mm))

    try:
        return ZoneInfo(s)
    except (ZoneInfoNotFoundError, ValueError) as ex:
        raise ValueError(f"Invalid timezone identifier: {s!r}") from ex


def local_dt(ms: int, tz: dt.tzinfo) -> dt.datetime:
    return dt.datetime.fromtimestamp(ms / 1000.0, tz=tz)


def to_ms(value: dt.datetime) -> int:
    return int(round(value.timestamp() * 1000))


def at_ms(day: dt.date, tz: dt.tzinfo, hour: int = 0, minute: int = 0) -> int:
    """Epoch ms of a local wall-clock time on day."""
    return to_ms(dt.datetime(day.year, day.month, day.day, hour, minute, tzinfo=tz))


def day_bounds_ms(day: dt.date, tz: dt.tzinfo) -> tuple[int, int]:
    """Local midnight and 23:59:59.999 of day, inclusive."""
    start = at_ms(day, tz)
    nxt = day + dt.timedelta(days=1)
    return start, at_ms(nxt, tz) - 1


def range_bounds_ms(first: dt.date, last: dt.date, tz: dt.tzinfo) -> tuple[int, int]:
    return day_bounds_ms(first, tz)[0], day_bounds_ms(last, tz)[1]


def day_of(ms: int, tz: dt.tzinfo) -> dt.date:
    return local_dt(ms, tz).date()


def hour_of_day(value: dt.datetime) -> float:
    """Fractional hour of a local datetime, 0 <= h < 24."""
    return (
        value.hour
        + value.minute / 60.0
        + value.second / 3600.0
        + value.microsecond / 3_600_000_000.0
    )


def week_start(day: dt.date) -> dt.date:
    """Monday of the ISO week containing day."""
    return day - dt.timedelta(days=day.weekday())


def month_start(day: dt.date) -> dt.date:
    return day.replace(day=1)


def month_end(day: dt.date) -> dt.date:
    if day.month == 12:
        return dt.date(day.year, 12, 31)
    return dt.date(day.year, day.month + 1, 1) - dt.timedelta(days=1)


def add_months(day: dt.date, months: int) -> dt.date:
    """Shift by whole months, clamping the day to the target month's length."""
    idx = day.year * 12 + (day.month - 1) + months
    year, month0 = divmod(idx, 12)
    first = dt.date(year, month0 + 1, 1)
    return first.replace(day=min(day.day, month_end(first).day))


def consecutive_days(start: dt.date, num_days: int) -> list[dt.date]:
    return [start + dt.timedelta(days=i) for i in range(max(0, int(num_days)))]


def format_hm(ms: int, tz: dt.tzinfo) -> str:
    return local_dt(ms, tz).strftime("%H:%M")
