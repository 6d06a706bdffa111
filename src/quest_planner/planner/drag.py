# src/quest_planner/planner/drag.py

"""
Drag-to-move / drag-to-resize of a quest on the time axis.

State is a single optional DragSession: None means idle. Pointer deltas are
re-based after every committed update (the anchor follows the pointer), so a
gesture is a sequence of small relative edits, each written to the store in
pointer-event order. Ending a gesture never rolls anything back.
"""

from __future__ import annotations

import contextlib
import datetime as dt
import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass, replace
from enum import StrEnum

from ..core.ports import PointerEventSource, PointerSubscription, TaskRepo
from ..tasks.task_models import Task
from .timeutil import HOUR_MS

logger = logging.getLogger(__name__)


class DragMode(StrEnum):
    MOVE = "move"  # quest body
    RESIZE_START = "resize_start"  # top edge
    RESIZE_END = "resize_end"  # bottom edge


@dataclass(frozen=True, slots=True)
class DragSession:
    task_id: int
    mode: DragMode
    anchor_y: float
    day: dt.date | None
    pixels_per_hour: float


@dataclass(frozen=True, slots=True)
class TimeUpdate:
    start_ms: int | None = None
    end_ms: int | None = None


@dataclass(frozen=True, slots=True)
class DragStep:
    session: DragSession
    update: TimeUpdate | None


def step_drag(session: DragSession, task: Task, pointer_y: float) -> DragStep:
    """
    Pure transition for one pointer-move event.

    Rejected resizes (start would reach the end, or the reverse) leave the
    session untouched. So do quests without a complete time range and
    non-finite pointer positions.
    """
    start, end = task.start, task.end
    if start is None or end is None:
        return DragStep(session, None)

    delta_hours = (pointer_y - session.anchor_y) / session.pixels_per_hour
    if not math.isfinite(delta_hours):
        return DragStep(session, None)

    delta_ms = int(round(delta_hours * HOUR_MS))

    if session.mode == DragMode.MOVE:
        update = TimeUpdate(start_ms=start + delta_ms, end_ms=end + delta_ms)
    elif session.mode == DragMode.RESIZE_START:
        new_start = start + delta_ms
        if new_start >= end:
            return DragStep(session, None)
        update = TimeUpdate(start_ms=new_start)
    else:
        new_end = end + delta_ms
        if new_end <= start:
            return DragStep(session, None)
        update = TimeUpdate(end_ms=new_end)

    return DragStep(replace(session, anchor_y=pointer_y), update)


class DragController:
    """
    Owns the one drag gesture that may exist at a time.

    The pointer subscription lives exactly as long as the session: it is taken
    in begin_drag() and closed by end_drag()/cancel(), including when the
    pointer source itself reports the release.
    """

    def __init__(
        self,
        task_repo: TaskRepo,
        pointer_source: PointerEventSource | None = None,
        *,
        pixels_per_hour: float = 80.0,
    ) -> None:
        self._repo = task_repo
        self._pointer = pointer_source
        self.pixels_per_hour = float(pixels_per_hour)
        self._session: DragSession | None = None
        self._subscription: PointerSubscription | None = None
        self._generation = 0

    @property
    def session(self) -> DragSession | None:
        return self._session

    @property
    def is_dragging(self) -> bool:
        return self._session is not None

    def _find_task(self, task_id: int) -> Task | None:
        for task in self._repo.list_tasks():
            if task.id == task_id:
                return task
        return None

    def begin_drag(
        self,
        task_id: int,
        mode: DragMode,
        pointer_y: float,
        day: dt.date | None = None,
        *,
        pixels_per_hour: float | None = None,
    ) -> DragSession:
        if self._session is not None:
            logger.debug("Drag on task %s replaced by new drag on %s", self._session.task_id, task_id)
            self._finish("replaced")

        pph = float(pixels_per_hour or self.pixels_per_hour)
        session = DragSession(
            task_id=task_id,
            mode=DragMode(mode),
            anchor_y=float(pointer_y),
            day=day,
            pixels_per_hour=pph,
        )
        self._session = session
        self._generation += 1

        if self._pointer is not None:
            try:
                self._subscription = self._pointer.subscribe(self.continue_drag, self.end_drag)
            except BaseException:
                self._session = None
                raise

        logger.debug("Drag started task=%s mode=%s y=%.1f day=%s", task_id, session.mode, pointer_y, day)
        return session

    def continue_drag(self, pointer_y: float) -> bool:
        """Apply one pointer move. Returns True when the store was updated."""
        session = self._session
        if session is None:
            return False

        task = self._find_task(session.task_id)
        if task is None:
            logger.debug("Drag target %s no longer exists; ignoring move", session.task_id)
            return False

        step = step_drag(session, task, float(pointer_y))
        if step.update is None:
            return False

        self._repo.update_task(task.id, start_ms=step.update.start_ms, end_ms=step.update.end_ms)
        self._session = step.session
        return True

    def end_drag(self) -> None:
        self._finish("released")

    def cancel(self) -> None:
        """Forced teardown (e.g. the hosting view goes away); edits already made stay."""
        self._finish("cancelled")

    def _finish(self, reason: str) -> None:
        session = self._session
        sub = self._subscription
        self._session = None
        self._subscription = None
        if sub is not None:
            sub.close()
        if session is not None:
            logger.debug("Drag %s task=%s", reason, session.task_id)

    @contextlib.contextmanager
    def dragging(
        self,
        task_id: int,
        mode: DragMode,
        pointer_y: float,
        day: dt.date | None = None,
        *,
        pixels_per_hour: float | None = None,
    ) -> Iterator[DragSession]:
        """Scoped gesture: the session is ended on every exit path."""
        session = self.begin_drag(task_id, mode, pointer_y, day, pixels_per_hour=pixels_per_hour)
        generation = self._generation
        try:
            yield session
        finally:
            if self._generation == generation and self._session is not None:
                self.end_drag()
