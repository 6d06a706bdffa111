# src/quest_planner/planner/engine.py

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Callable

from ..core.ports import PointerEventSource, TaskRepo
from ..tasks.task_models import MilestoneTag, Task
from . import axis, clipper, date_filter, layout
from .drag import DragController, DragMode, DragSession
from .milestones import MilestoneGroup, group_milestones
from .pointer import PointerHub
from .time_window import TimeWindow, ViewKind
from .timeutil import resolve_tz

logger = logging.getLogger(__name__)

SlotCallback = Callable[[axis.SlotTarget], None]


class PlannerEngine:
    """
    Presentation-facing surface of the planner core.

    Every layout call re-reads the store, so the picture always reflects the
    latest drag commit. The engine owns the single DragController.
    """

    def __init__(
        self,
        task_repo: TaskRepo,
        settings: object,
        *,
        pointer_source: PointerEventSource | None = None,
        tz: dt.tzinfo | None = None,
    ) -> None:
        self.repo = task_repo
        self.settings = settings
        self.tz = tz if tz is not None else resolve_tz(getattr(settings, "timezone", "local"))
        self.pointer = pointer_source if pointer_source is not None else PointerHub()

        self.day_pixels_per_hour = float(getattr(settings, "day_pixels_per_hour", 80.0))
        self.week_pixels_per_hour = float(getattr(settings, "week_pixels_per_hour", 30.0))
        self.tolerance_hours = float(getattr(settings, "overlap_tolerance_hours", layout.DEFAULT_TOLERANCE_HOURS))
        self.min_display_hours = float(getattr(settings, "min_display_hours", clipper.DEFAULT_MIN_DISPLAY_HOURS))

        self.drag = DragController(task_repo, self.pointer, pixels_per_hour=self.day_pixels_per_hour)
        self._slot_callbacks: list[SlotCallback] = []

    def pixels_per_hour(self, kind: ViewKind) -> float:
        return self.day_pixels_per_hour if kind == ViewKind.DAY else self.week_pixels_per_hour

    # ---- reading ----

    def visible_tasks(self, window: TimeWindow, *, show_completed: bool | None = None) -> list[Task]:
        if show_completed is None:
            show_completed = bool(getattr(self.settings, "show_completed", False))
        return date_filter.filter_tasks(
            self.repo.list_tasks(), window, show_completed=show_completed, tz=self.tz
        )

    def unscheduled_tasks(self, window: TimeWindow, *, show_completed: bool | None = None) -> list[Task]:
        return date_filter.unscheduled_tasks(self.visible_tasks(window, show_completed=show_completed))

    def all_day_tasks(self, day: dt.date, window: TimeWindow, *, show_completed: bool | None = None) -> list[Task]:
        return clipper.all_day_tasks(self.visible_tasks(window, show_completed=show_completed), day, self.tz)

    def compute_day_layout(
        self,
        day: dt.date,
        window: TimeWindow | None = None,
        *,
        show_completed: bool | None = None,
    ) -> list[layout.LayoutBox]:
        if window is None:
            window = TimeWindow.for_day(day)
        return layout.compute_day_layout(
            self.visible_tasks(window, show_completed=show_completed),
            day,
            window,
            pixels_per_hour=self.pixels_per_hour(window.kind),
            tz=self.tz,
            tolerance_hours=self.tolerance_hours,
            min_display_hours=self.min_display_hours,
        )

    def compute_week_layout(
        self,
        window: TimeWindow,
        *,
        show_completed: bool | None = None,
    ) -> dict[dt.date, list[layout.LayoutBox]]:
        return layout.compute_week_layout(
            self.visible_tasks(window, show_completed=show_completed),
            window,
            pixels_per_hour=self.pixels_per_hour(window.kind),
            tz=self.tz,
            tolerance_hours=self.tolerance_hours,
            min_display_hours=self.min_display_hours,
        )

    def milestones(self, tag: MilestoneTag, window: TimeWindow) -> dict[str, MilestoneGroup]:
        # Highlight panels read the whole store, not the filtered view.
        return group_milestones(self.repo.list_tasks(), tag, window, tz=self.tz)

    # ---- empty-slot activation ----

    def on_empty_slot_activated(self, callback: SlotCallback) -> None:
        self._slot_callbacks.append(callback)

    def activate_slot(self, day: dt.date, axis_y: float, window: TimeWindow) -> axis.SlotTarget:
        target = axis.slot_from_axis_offset(day, axis_y, window, self.pixels_per_hour(window.kind))
        logger.debug("Empty slot activated %s", target.label())
        for cb in list(self._slot_callbacks):
            cb(target)
        return target

    # ---- drag gestures ----

    def begin_drag(
        self,
        task_id: int,
        mode: DragMode,
        pointer_y: float,
        day: dt.date | None = None,
        *,
        kind: ViewKind = ViewKind.DAY,
    ) -> DragSession:
        return self.drag.begin_drag(task_id, mode, pointer_y, day, pixels_per_hour=self.pixels_per_hour(kind))

    def continue_drag(self, pointer_y: float) -> bool:
        return self.drag.continue_drag(pointer_y)

    def end_drag(self) -> None:
        self.drag.end_drag()

    def close(self) -> None:
        """View teardown: any gesture in flight is cancelled and its subscription released."""
        self.drag.cancel()
