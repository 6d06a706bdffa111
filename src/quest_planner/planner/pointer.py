# src/quest_planner/planner/pointer.py

from __future__ import annotations

import logging

from ..core.ports import PointerMoveHandler, PointerReleaseHandler

logger = logging.getLogger(__name__)


class _Subscription:
    __slots__ = ("_hub", "on_move", "on_release", "closed")

    def __init__(self, hub: PointerHub, on_move: PointerMoveHandler, on_release: PointerReleaseHandler) -> None:
        self._hub = hub
        self.on_move = on_move
        self.on_release = on_release
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._hub._remove(self)


class PointerHub:
    """
    In-process window-level pointer stream.

    Hosts (a GUI shell, the console REPL, tests) feed raw events in with
    move()/release(); whoever subscribed gets them in arrival order.
    """

    def __init__(self) -> None:
        self._subs: list[_Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subs)

    def subscribe(self, on_move: PointerMoveHandler, on_release: PointerReleaseHandler) -> _Subscription:
        sub = _Subscription(self, on_move, on_release)
        self._subs.append(sub)
        logger.debug("Pointer subscribed (total=%d)", len(self._subs))
        return sub

    def _remove(self, sub: _Subscription) -> None:
        if sub in self._subs:
            self._subs.remove(sub)
            logger.debug("Pointer unsubscribed (total=%d)", len(self._subs))

    def move(self, pointer_y: float) -> None:
        # Handlers may close their own subscription while we iterate.
        for sub in list(self._subs):
            if not sub.closed:
                sub.on_move(pointer_y)

    def release(self) -> None:
        for sub in list(self._subs):
            if not sub.closed:
                sub.on_release()
