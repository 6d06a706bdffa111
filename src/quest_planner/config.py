# src/quest_planner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every key has a default.
- Bad values fall back to defaults instead of failing startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "PLANNER"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Local .env values never override variables already set in the environment.
load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path

    # ---- Calendar ----
    timezone: str

    # ---- Time axis ----
    day_pixels_per_hour: float
    week_pixels_per_hour: float
    week_view_days: int
    hidden_hour_start: int
    hidden_hour_end: int
    overlap_tolerance_minutes: float
    min_display_minutes: float

    # ---- Filtering ----
    show_completed: bool

    @property
    def overlap_tolerance_hours(self) -> float:
        return self.overlap_tolerance_minutes / 60.0

    @property
    def min_display_hours(self) -> float:
        return self.min_display_minutes / 60.0

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "quest-planner") or "quest-planner"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/quest_planner"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "quests.sqlite3")

        timezone = _env(_k("TIMEZONE"), "local").strip() or "local"

        day_pph = _env_float(_k("DAY_PIXELS_PER_HOUR"), 80.0)
        week_pph = _env_float(_k("WEEK_PIXELS_PER_HOUR"), 30.0)
        if day_pph <= 0:
            day_pph = 80.0
        if week_pph <= 0:
            week_pph = 30.0

        week_view_days = min(30, max(1, _env_int(_k("WEEK_VIEW_DAYS"), 7)))

        hidden_hour_start = min(23, max(0, _env_int(_k("HIDDEN_HOUR_START"), 0)))
        hidden_hour_end = min(23, max(0, _env_int(_k("HIDDEN_HOUR_END"), 6)))

        overlap_tolerance_minutes = max(0.0, _env_float(_k("OVERLAP_TOLERANCE_MINUTES"), 6.0))
        min_display_minutes = max(1.0, _env_float(_k("MIN_DISPLAY_MINUTES"), 30.0))

        show_completed = _env_bool(_k("SHOW_COMPLETED"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            timezone=timezone,
            day_pixels_per_hour=day_pph,
            week_pixels_per_hour=week_pph,
            week_view_days=week_view_days,
            hidden_hour_start=hidden_hour_start,
            hidden_hour_end=hidden_hour_end,
            overlap_tolerance_minutes=overlap_tolerance_minutes,
            min_display_minutes=min_display_minutes,
            show_completed=show_completed,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
