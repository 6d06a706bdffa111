# src/quest_planner/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds PlannerState, then runs the console REPL.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown: release any in-flight drag, close the store."""
    try:
        state.engine.close()
    except Exception:
        logger.exception("Planner engine close failed.")

    try:
        state.task_store.close()
    except Exception:
        logger.debug("TaskStore close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/quest_planner")
    setup_logging(
        log_dir=log_dir,
        console_level=console_level,
        drag_trace=console_level <= logging.DEBUG,
    )

    logger.info("Starting %s...", getattr(settings, "app_name", "quest-planner"))

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    try:
        run_console_loop(state)
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
