# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

from quest_planner.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_levels() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("quest_planner.cli.commands", logging.DEBUG))
    assert not f.filter(_record("quest_planner.planner.layout", logging.INFO))
    assert f.filter(_record("quest_planner.planner.pointer", logging.WARNING))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert not f.filter(_record("sqlite3", logging.WARNING))
    assert f.filter(_record("sqlite3", logging.ERROR))


def test_drag_chatter_needs_drag_trace() -> None:
    quiet = _ConsoleNoiseFilter()
    assert not quiet.filter(_record("quest_planner.planner.drag", logging.DEBUG))
    assert not quiet.filter(_record("quest_planner.tasks.task_store", logging.DEBUG))
    assert quiet.filter(_record("quest_planner.tasks.task_store", logging.INFO))
    assert quiet.filter(_record("quest_planner.planner.drag", logging.WARNING))

    traced = _ConsoleNoiseFilter(drag_trace=True)
    assert traced.filter(_record("quest_planner.planner.drag", logging.DEBUG))
    assert traced.filter(_record("quest_planner.planner.pointer", logging.DEBUG))
    assert traced.filter(_record("quest_planner.tasks.task_store", logging.DEBUG))


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("quest_planner.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in (tmp_path / "logs" / "planner.log").read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
