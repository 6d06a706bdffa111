# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "PLANNER_APP_NAME": "App display name (default: quest-planner).",
    "PLANNER_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "PLANNER_DATA_DIR": "Local data directory, also holds planner.log (default: .local/quest_planner).",
    "PLANNER_TASKS_DB_PATH": "Quest store SQLite path (default: <data_dir>/quests.sqlite3).",
    # Calendar
    "PLANNER_TIMEZONE": "local | UTC | IANA name | +HH:MM (default: local).",
    # Time axis
    "PLANNER_DAY_PIXELS_PER_HOUR": "Day view scale (default: 80).",
    "PLANNER_WEEK_PIXELS_PER_HOUR": "Week view scale (default: 30).",
    "PLANNER_WEEK_VIEW_DAYS": "Consecutive days in the week view, 1-30 (default: 7).",
    "PLANNER_HIDDEN_HOUR_START": "First collapsed hour (default: 0).",
    "PLANNER_HIDDEN_HOUR_END": "First visible hour after the collapsed range (default: 6).",
    "PLANNER_OVERLAP_TOLERANCE_MINUTES": "Back-to-back slack when packing columns (default: 6).",
    "PLANNER_MIN_DISPLAY_MINUTES": "Minimum rendered duration of a quest box (default: 30).",
    # Filtering
    "PLANNER_SHOW_COMPLETED": "Also show failed quests (true/false, default: false).",
}
