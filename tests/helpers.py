"""Shared test helpers for Cadence."""

from PyQt6.QtCore import QEventLoop, QTimer

from cadence.timer.engine import TimerState


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    @property
    def states(self) -> list[TimerState]:
        """States of collected ``TimerAction`` items."""
        return [item.state for item in self.items]

    def clear(self):
        self.items.clear()


class ManualCall:
    def __init__(self, interval, callback, next_due):
        self.interval = interval
        self.callback = callback
        self.next_due = next_due
        self.active = True

    def cancel(self):
        self.active = False


class ManualScheduler:
    """Deterministic stand-in for ``QtScheduler``.

    Time only moves through ``advance()``; ``now`` doubles as the Timer's
    clock so elapsed-time readings are exact.
    """

    def __init__(self, start: float = 0.0):
        self.time = start
        self.calls: list[ManualCall] = []

    def now(self) -> float:
        return self.time

    def schedule_every(self, interval, callback):
        interval = max(interval, 0.001)
        call = ManualCall(interval, callback, self.time + interval)
        self.calls.append(call)
        return call

    @property
    def active_calls(self) -> list[ManualCall]:
        return [c for c in self.calls if c.active]

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every tick that falls due."""
        target = self.time + seconds
        while True:
            due = [c for c in self.active_calls if c.next_due <= target + 1e-9]
            if not due:
                break
            call = min(due, key=lambda c: c.next_due)
            self.time = max(self.time, call.next_due)
            call.next_due += call.interval
            call.callback()
        self.time = target


def wait(ms: int) -> None:
    """Spin the Qt event loop for *ms* milliseconds."""
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec()
