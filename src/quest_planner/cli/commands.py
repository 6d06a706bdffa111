# src/quest_planner/cli/commands.py

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Callable
from dataclasses import replace

from ..core.state import PlannerState
from ..planner import timeutil
from ..planner.drag import DragMode
from ..planner.layout import LayoutBox
from ..planner.pointer import PointerHub
from ..planner.time_window import MAX_WEEK_DAYS, ViewKind
from ..tasks.task_models import MilestoneTag, Task, TaskStatus

CommandHandler = Callable[[PlannerState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /view, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: PlannerState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing / formatting helpers ----


def _parse_date(raw: str) -> dt.date:
    return dt.date.fromisoformat(raw)


def _parse_hm(raw: str) -> tuple[int, int]:
    hh, _, mm = raw.partition(":")
    hour, minute = int(hh), int(mm or 0)
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"bad time {raw!r}")
    return hour, minute


def _find(state: PlannerState, args: list[str]) -> Task | None:
    if not args:
        return None
    try:
        return state.task_store.get_task(int(args[0]))
    except ValueError:
        return None


def _fmt_span(state: PlannerState, task: Task) -> str:
    tz = state.engine.tz
    start, end = task.start, task.end
    if start is not None and end is not None:
        s = timeutil.local_dt(start, tz)
        e = timeutil.local_dt(end, tz)
        if s.date() == e.date():
            return f"{s:%Y-%m-%d %H:%M}-{e:%H:%M}"
        return f"{s:%Y-%m-%d %H:%M} - {e:%Y-%m-%d %H:%M}"
    if start is not None:
        return f"{timeutil.local_dt(start, tz):%Y-%m-%d %H:%M}"
    if task.deadline is not None:
        return f"due {timeutil.local_dt(task.deadline, tz):%Y-%m-%d %H:%M}"
    return "unscheduled"


def _fmt_task(state: PlannerState, task: Task) -> str:
    marks = ""
    if task.milestones:
        marks = " [" + ",".join(sorted(str(m) for m in task.milestones)) + "]"
    status = "" if task.status == TaskStatus.ACTIVE else f" ({task.status})"
    return f"#{task.id} {task.title}  {_fmt_span(state, task)}{marks}{status}"


def _fmt_box(box: LayoutBox, title: str) -> str:
    return (
        f"#{box.task_id} {title}  top={box.top_px:.0f}px h={box.height_px:.0f}px "
        f"col={box.column}/{box.column_count} w={box.width_percent:.1f}% l={box.left_percent:.1f}%"
    )


def render_view(state: PlannerState) -> str:
    window = state.window
    engine = state.engine
    show = state.show_completed
    lines = [f"{window.kind.value.upper()} {window.title()}"]

    if window.kind in (ViewKind.DAY, ViewKind.WEEK):
        titles = {t.id: t.title for t in state.task_store.list_tasks()}
        if window.kind == ViewKind.DAY:
            per_day = {window.reference: engine.compute_day_layout(window.reference, window, show_completed=show)}
        else:
            per_day = engine.compute_week_layout(window, show_completed=show)

        for day, boxes in per_day.items():
            lines.append(f"-- {day.isoformat()} {day:%a}")
            for task in engine.all_day_tasks(day, window, show_completed=show):
                lines.append(f"   all-day #{task.id} {task.title}")
            for box in sorted(boxes, key=lambda b: (b.top_px, b.column)):
                lines.append("   " + _fmt_box(box, titles.get(box.task_id, "?")))
            if lines[-1].startswith("--"):
                lines.append("   (free)")
    else:
        visible = engine.visible_tasks(window, show_completed=show)
        for task in visible:
            if task.has_start or task.deadline is not None:
                lines.append("   " + _fmt_task(state, task))

    unscheduled = engine.unscheduled_tasks(window, show_completed=show)
    if unscheduled:
        lines.append("-- unscheduled")
        lines.extend("   " + _fmt_task(state, t) for t in unscheduled)

    return "\n".join(lines)


# ---- handlers ----


def cmd_help(state: PlannerState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: PlannerState, args: list[str]) -> str:
    w = state.window
    engine = state.engine
    hidden = f"{w.hidden_start_hour:02d}:00-{w.hidden_end_hour:02d}:00" if w.hides_hours else "none"
    return (
        "Status:\n"
        f"  View: {w.kind} {w.title()}\n"
        f"  Timezone: {engine.tz}\n"
        f"  Pixels per hour: day={engine.day_pixels_per_hour:g} week={engine.week_pixels_per_hour:g}\n"
        f"  Hidden hours: {hidden}\n"
        f"  Show failed: {'ON' if state.show_completed else 'OFF'}\n"
        f"  Quests: {state.task_store.count_tasks()}"
    )


def cmd_add(state: PlannerState, args: list[str]) -> str:
    """
    /add 2026-10-17 09:00 10:30 Title words [+week] [+month] [+year]
    /add 2026-10-17 allday Title words
    /add 2026-10-17 due Title words
    /add - Title words
    """
    usage = (
        "Usage: /add <date> <HH:MM> <HH:MM> <title> [+week|+month|+year]\n"
        "       /add <date> allday <title>\n"
        "       /add <date> due <title>\n"
        "       /add - <title>"
    )
    if len(args) < 2:
        return usage

    tags = MilestoneTag.parse_many(a[1:] for a in args if a.startswith("+"))
    words = [a for a in args if not a.startswith("+")]
    tz = state.engine.tz

    start_ms = end_ms = deadline_ms = None
    try:
        if words[0] == "-":
            title_words = words[1:]
        else:
            day = _parse_date(words[0])
            if words[1].lower() == "allday":
                start_ms, end_ms = timeutil.day_bounds_ms(day, tz)
                title_words = words[2:]
            elif words[1].lower() == "due":
                deadline_ms = timeutil.at_ms(day, tz, 23, 59)
                title_words = words[2:]
            else:
                if len(words) < 4:
                    return usage
                sh, sm = _parse_hm(words[1])
                eh, em = _parse_hm(words[2])
                start_ms = timeutil.at_ms(day, tz, sh, sm)
                end_ms = timeutil.at_ms(day, tz, eh, em)
                if end_ms <= start_ms:
                    # 22:00 -> 01:00 runs into the next day
                    end_ms = timeutil.at_ms(day + dt.timedelta(days=1), tz, eh, em)
                title_words = words[3:]
        task_id = state.task_store.add_task(
            title=" ".join(title_words),
            start_ms=start_ms,
            end_ms=end_ms,
            deadline_ms=deadline_ms,
            milestones=tags,
        )
    except (ValueError, IndexError) as e:
        return f"Cannot add quest: {e}\n{usage}"

    logger.info("Quest %s created from console", task_id)
    return f"Added quest #{task_id}."


def cmd_list(state: PlannerState, args: list[str]) -> str:
    tasks = state.task_store.list_tasks()
    if not tasks:
        return "No quests yet. Use /add to create one."
    return "\n".join(_fmt_task(state, t) for t in tasks)


def _set_status(state: PlannerState, args: list[str], status: TaskStatus) -> str:
    task = _find(state, args)
    if task is None:
        return "Unknown quest id."
    state.task_store.update_task_status(task.id, status)
    return f"Quest #{task.id} -> {status}."


def cmd_done(state: PlannerState, args: list[str]) -> str:
    return _set_status(state, args, TaskStatus.COMPLETED)


def cmd_fail(state: PlannerState, args: list[str]) -> str:
    return _set_status(state, args, TaskStatus.FAILED)


def cmd_delete(state: PlannerState, args: list[str]) -> str:
    task = _find(state, args)
    if task is None:
        return "Unknown quest id."
    state.task_store.delete_task(task.id)
    return f"Deleted quest #{task.id}."


def cmd_view(state: PlannerState, args: list[str]) -> str:
    """
    /view          -> render current view
    /view week     -> switch view kind and render
    """
    if args:
        try:
            kind = ViewKind(args[0].lower())
        except ValueError:
            return "Usage: /view [day|week|month|year]"
        state.window = state.window.with_kind(kind)
    return render_view(state)


def cmd_next(state: PlannerState, args: list[str]) -> str:
    state.window = state.window.shift(1)
    return render_view(state)


def cmd_prev(state: PlannerState, args: list[str]) -> str:
    state.window = state.window.shift(-1)
    return render_view(state)


def cmd_today(state: PlannerState, args: list[str]) -> str:
    state.window = replace(state.window, reference=dt.datetime.now(tz=state.engine.tz).date())
    return render_view(state)


def cmd_goto(state: PlannerState, args: list[str]) -> str:
    try:
        state.window = replace(state.window, reference=_parse_date(args[0]))
    except (ValueError, IndexError):
        return "Usage: /goto YYYY-MM-DD"
    return render_view(state)


def cmd_days(state: PlannerState, args: list[str]) -> str:
    try:
        n = int(args[0])
    except (ValueError, IndexError):
        return f"Usage: /days <1-{MAX_WEEK_DAYS}>"
    if not 0 < n <= MAX_WEEK_DAYS:
        return f"Usage: /days <1-{MAX_WEEK_DAYS}>"
    state.window = replace(state.window, num_days=n)
    return f"Week view now spans {n} days."


def cmd_hide(state: PlannerState, args: list[str]) -> str:
    """
    /hide 0 6   -> collapse 00:00-06:00 on the time axis
    /hide off   -> show all 24 hours
    """
    if args and args[0].lower() == "off":
        state.window = replace(state.window, hidden_start_hour=0, hidden_end_hour=0)
        return "All hours visible."
    try:
        start, end = int(args[0]), int(args[1])
    except (ValueError, IndexError):
        return "Usage: /hide <start-hour> <end-hour> | /hide off"
    state.window = replace(state.window, hidden_start_hour=start, hidden_end_hour=end)
    w = state.window
    if not w.hides_hours:
        return "Invalid hour range; nothing hidden."
    return f"Hiding {w.hidden_start_hour:02d}:00 - {w.hidden_end_hour:02d}:00."


def cmd_completed(state: PlannerState, args: list[str]) -> str:
    if not args:
        state.show_completed = not state.show_completed
    elif args[0].lower() in ("on", "1", "true", "yes"):
        state.show_completed = True
    elif args[0].lower() in ("off", "0", "false", "no"):
        state.show_completed = False
    else:
        return "Usage: /completed [on|off]"
    return f"Failed quests are now {'shown' if state.show_completed else 'hidden'}."


_DRAG_MODES = {
    "move": DragMode.MOVE,
    "start": DragMode.RESIZE_START,
    "top": DragMode.RESIZE_START,
    "end": DragMode.RESIZE_END,
    "bottom": DragMode.RESIZE_END,
}


def cmd_drag(state: PlannerState, args: list[str]) -> str:
    """
    /drag <id> <move|start|end> <y0> <y1> [y2 ...]

    Replays a pointer gesture: press at y0, move through y1.., release.
    """
    usage = "Usage: /drag <id> <move|start|end> <y0> <y1> [y2 ...]"
    task = _find(state, args)
    if task is None or len(args) < 4:
        return usage
    mode = _DRAG_MODES.get(args[1].lower())
    if mode is None:
        return usage
    try:
        ys = [float(v) for v in args[2:]]
    except ValueError:
        return usage

    engine = state.engine
    pointer = engine.pointer
    if not isinstance(pointer, PointerHub):
        return "Pointer replay is not available for this host."

    kind = ViewKind.DAY if state.window.kind == ViewKind.DAY else ViewKind.WEEK
    engine.begin_drag(task.id, mode, ys[0], state.window.reference, kind=kind)
    try:
        for y in ys[1:]:
            pointer.move(y)
        pointer.release()
    finally:
        engine.end_drag()

    updated = state.task_store.get_task(task.id)
    if updated is None:
        return f"Quest #{task.id} disappeared during the drag."
    return "Now: " + _fmt_task(state, updated)


def cmd_slot(state: PlannerState, args: list[str]) -> str:
    """/slot <YYYY-MM-DD> <y> -> which time an empty-axis click at y pixels targets."""
    try:
        day = _parse_date(args[0])
        y = float(args[1])
    except (ValueError, IndexError):
        return "Usage: /slot <YYYY-MM-DD> <y-pixels>"
    target = state.engine.activate_slot(day, y, state.window)
    return f"Empty slot {target.label()}. Create a quest there with /add."


def cmd_milestones(state: PlannerState, args: list[str]) -> str:
    try:
        tag = MilestoneTag(args[0].lower()) if args else MilestoneTag.WEEK
    except ValueError:
        return "Usage: /milestones [week|month|year]"
    groups = state.engine.milestones(tag, state.window)
    if not groups:
        return f"No {tag} milestones in {state.window.title()}."
    lines: list[str] = []
    for group in groups.values():
        lines.append(f"* {group.label}")
        lines.extend("   " + _fmt_task(state, t) for t in group.tasks)
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show current view and settings.")
registry.register("add", cmd_add, help_text="Create a quest: /add <date> <HH:MM> <HH:MM> <title> [+week].")
registry.register("list", cmd_list, help_text="List all quests.", aliases=["ls"])
registry.register("done", cmd_done, help_text="Mark a quest completed: /done <id>.")
registry.register("fail", cmd_fail, help_text="Mark a quest failed: /fail <id>.")
registry.register("delete", cmd_delete, help_text="Delete a quest: /delete <id>.", aliases=["rm"])
registry.register("view", cmd_view, help_text="Render the view: /view [day|week|month|year].", aliases=["show"])
registry.register("next", cmd_next, help_text="Move the view forward.", aliases=["n"])
registry.register("prev", cmd_prev, help_text="Move the view back.", aliases=["p"])
registry.register("today", cmd_today, help_text="Jump to today.")
registry.register("goto", cmd_goto, help_text="Jump to a date: /goto YYYY-MM-DD.")
registry.register("days", cmd_days, help_text="Days shown by the week view: /days <n>.")
registry.register("hide", cmd_hide, help_text="Collapse hours: /hide <start> <end> | /hide off.")
registry.register("completed", cmd_completed, help_text="Show/hide failed quests: /completed [on|off].")
registry.register("drag", cmd_drag, help_text="Replay a drag: /drag <id> <move|start|end> <y0> <y1> ...")
registry.register("slot", cmd_slot, help_text="Resolve an empty-axis click: /slot <date> <y>.")
registry.register("milestones", cmd_milestones, help_text="Milestone panels: /milestones [week|month|year].")
