"""QTimer adapter for the animation scheduler."""

from __future__ import annotations

from typing import Callable, Optional

from PyQt6.QtCore import QObject, Qt, QTimer


class QtTimer(QObject):
    """Periodic Qt timer satisfying ``launchatlas.core.scheduler.Timer``.

    Ticks are delivered on the Qt event loop, so a tick never overlaps
    another one.
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._on_timeout)
        self._callback: Optional[Callable[[], None]] = None

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.setInterval(interval_ms)
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()
        self._callback = None

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    def _on_timeout(self) -> None:
        if self._callback is not None:
            self._callback()
