"""Periodic scheduling backends for the timer engine.

A scheduler invokes a callback every *interval* seconds, the first call
arriving one full interval after scheduling.  It hands back a
``ScheduledCall`` that cancels the registration.

``QtScheduler`` is the production backend (a ``QTimer`` per
registration).  Tests substitute a manual double with the same shape.
"""

from __future__ import annotations

from typing import Callable, Protocol

from PyQt6.QtCore import Qt, QTimer


class ScheduledCall(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule_every(
        self, interval: float, callback: Callable[[], None]
    ) -> ScheduledCall: ...


def interval_ms(seconds: float) -> int:
    """Convert *seconds* to a QTimer interval (whole ms, never below 1)."""
    return max(1, round(seconds * 1000))


# ── Qt backend ────────────────────────────────────────────────────────────


class _QtScheduledCall:
    def __init__(self, qt_timer: QTimer, callback: Callable[[], None]) -> None:
        self._qt_timer: QTimer | None = qt_timer
        self._callback = callback

    @property
    def active(self) -> bool:
        return self._qt_timer is not None and self._qt_timer.isActive()

    def cancel(self) -> None:
        if self._qt_timer is None:
            return
        self._qt_timer.stop()
        self._qt_timer.timeout.disconnect(self._callback)
        self._qt_timer = None


class QtScheduler:
    """Schedules callbacks on the current thread's Qt event loop.

    The QTimer is owned by the returned handle rather than parented to a
    QObject, so dropping the handle also tears the timer down.
    """

    def __init__(self, precise: bool = True) -> None:
        self._timer_type = (
            Qt.TimerType.PreciseTimer if precise else Qt.TimerType.CoarseTimer
        )

    def schedule_every(
        self, interval: float, callback: Callable[[], None]
    ) -> _QtScheduledCall:
        qt_timer = QTimer()
        qt_timer.setTimerType(self._timer_type)
        qt_timer.setSingleShot(False)
        qt_timer.setInterval(interval_ms(interval))
        qt_timer.timeout.connect(callback)
        qt_timer.start()
        return _QtScheduledCall(qt_timer, callback)
