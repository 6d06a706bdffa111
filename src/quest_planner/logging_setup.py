# src/quest_planner/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the planner console readable while a gesture is running.

    A single drag emits one store write per pointer move, so the drag, pointer
    and layout loggers are held to WARNING+ on the console unless drag tracing
    is on. Everything still reaches planner.log.
    """

    _PER_EVENT = ("quest_planner.planner.layout", "quest_planner.planner.pointer")
    _DRAG = "quest_planner.planner.drag"
    _STORE = "quest_planner.tasks.task_store"

    def __init__(self, *, drag_trace: bool = False) -> None:
        super().__init__()
        self.drag_trace = drag_trace

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("quest_planner."):
            if name.startswith((self._DRAG, *self._PER_EVENT)):
                return self.drag_trace or record.levelno >= logging.WARNING
            # drag commits show up here as "Quest updated" DEBUG lines
            if name == self._STORE and record.levelno < logging.INFO:
                return self.drag_trace
            return True

        # warnings.warn(...) captured into logging
        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/quest_planner",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    drag_trace: bool = False,
) -> None:
    """
    Configure logging with:
    - Console handler: readable + filtered for interactive use
    - File handler: full logs for debugging

    drag_trace lets per-pointer-event drag logs through to the console.

    Call this ONCE, very early (before first logger.info).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "planner.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter(drag_trace=drag_trace))
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
