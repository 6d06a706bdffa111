# src/quest_planner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the planner core.

The core depends on Protocols instead of concrete implementations.
This keeps the quest store and the pointer event source swappable and makes
testing easier.
"""

from collections.abc import Callable
from typing import Protocol

from ..tasks.task_models import Task

PointerMoveHandler = Callable[[float], None]
PointerReleaseHandler = Callable[[], None]


class TaskRepo(Protocol):
    """
    The quest store as seen by the planner.

    update_task is assumed synchronous and always-succeeding; failure handling
    belongs to the store.
    """

    def list_tasks(self) -> list[Task]: ...

    def update_task(
            self,
            task_id: int,
            *,
            start_ms: int | None = None,
            end_ms: int | None = None,
    ) -> None: ...


class PointerSubscription(Protocol):
    def close(self) -> None: ...


class PointerEventSource(Protocol):
    """
    Window-level pointer stream.

    A drag subscribes when it starts and closes the subscription when it ends,
    so moves outside the task box are still delivered.
    """

    def subscribe(
            self,
            on_move: PointerMoveHandler,
            on_release: PointerReleaseHandler,
    ) -> PointerSubscription: ...
