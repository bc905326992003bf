"""
repaint_ticker.py
=================
RepaintTicker — QTimer subscription that calls ``on_tick`` while ``is_active()``.

attach() on panel show, detach() on hide/close. Nothing runs while detached.
One extra call is made on the tick where ``is_active()`` turns false, so the
panel shows the final state (clip ended, player stopped after an error).
"""
from __future__ import annotations

from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer

from tutorial_config import TUTORIAL_REPAINT_MS


class RepaintTicker(QObject):
    def __init__(self, is_active: Callable[[], bool], on_tick: Callable[[], None],
                 interval_ms: int = TUTORIAL_REPAINT_MS, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._is_active = is_active
        self._on_tick = on_tick
        self._was_active = False
        self._timer = QTimer(self)
        self._timer.setInterval(max(1, int(interval_ms)))
        self._timer.timeout.connect(self.tick)

    @property
    def attached(self) -> bool:
        return self._timer.isActive()

    def attach(self):
        if not self._timer.isActive():
            self._timer.start()

    def detach(self):
        self._timer.stop()
        self._was_active = False

    def tick(self):
        active = bool(self._is_active())
        if active or self._was_active:
            self._on_tick()
        self._was_active = active
