"""Timer state machine for Cadence.

States
------
IDLE        Not running, waiting for ``start()``.
RUNNING     A run is active; the scheduler will tick after ``duration``.
PAUSED      Frozen.  Remembers the time elapsed when it was paused.
COMPLETED   Transient, published once per tick.
STOPPED     Terminal.  The notification channel is closed.

Transitions
-----------
IDLE → RUNNING                      (start)
RUNNING → PAUSED                    (pause)
PAUSED → RUNNING                    (resume)
RUNNING → COMPLETED → RUNNING       (tick, repeats)
RUNNING → COMPLETED → IDLE          (tick, no repeat)
IDLE | RUNNING | PAUSED → STOPPED   (stop)
any (but STOPPED) → RUNNING         (start; restart resets elapsed)

Elapsed time, not time to go
----------------------------
``time_remaining`` reports how long the current run has been going, and
``pause()`` remembers that same elapsed value.  ``resume()`` then arms a
fresh run whose duration *is* the remembered elapsed value: a 5 s timer
paused at 1 s resumes as a 1 s timer.  A pause at zero elapsed resumes as
a ``MIN_DURATION`` (1 ms) run, which for a repeating timer means a tick
every millisecond.
"""

from __future__ import annotations

import logging
import math
import time
import weakref
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from PyQt6.QtCore import QObject, pyqtSignal

from .scheduler import QtScheduler, ScheduledCall, Scheduler

logger = logging.getLogger(__name__)

# Floor for the run length armed by resume(); a pause at zero elapsed
# would otherwise arm a zero-second run.
MIN_DURATION = 0.001


# ── enums / values ────────────────────────────────────────────────────────


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    STOPPED = "stopped"


@dataclass(frozen=True)
class TimerAction:
    """One value on the ``state_changed`` stream.

    ``seconds`` is only set for ``PAUSED`` and carries the elapsed time at
    the moment of pausing.
    """

    state: TimerState
    seconds: float | None = None

    @classmethod
    def idle(cls) -> TimerAction:
        return cls(TimerState.IDLE)

    @classmethod
    def start(cls) -> TimerAction:
        return cls(TimerState.RUNNING)

    @classmethod
    def pause(cls, seconds: float) -> TimerAction:
        return cls(TimerState.PAUSED, seconds)

    @classmethod
    def completed(cls) -> TimerAction:
        return cls(TimerState.COMPLETED)

    @classmethod
    def stop(cls) -> TimerAction:
        return cls(TimerState.STOPPED)

    def __str__(self) -> str:
        if self.state is TimerState.PAUSED:
            return f"pause({self.seconds:.3f})"
        if self.state is TimerState.RUNNING:
            return "start"
        if self.state is TimerState.STOPPED:
            return "stop"
        return self.state.value


class TimerDelegate(Protocol):
    """Single completion listener.

    Held through ``weakref.ref``, so the delegate must support weak
    references: instances of classes that define ``__slots__`` without
    ``__weakref__`` raise ``TypeError`` when assigned.
    """

    def timer_fired(self, timer: Timer) -> None: ...


class Subscription:
    """Handle returned by :meth:`Timer.subscribe`.  ``cancel()`` disconnects."""

    def __init__(self, signal=None, connection=None) -> None:
        self._signal = signal
        self._connection = connection

    @property
    def active(self) -> bool:
        return self._connection is not None

    def cancel(self) -> None:
        if self._connection is None:
            return
        self._signal.disconnect(self._connection)
        self._signal = None
        self._connection = None


class _Registration:
    """Holds the single outstanding scheduled call.

    Kept apart from the Timer so the GC finalizer can release it without
    holding a reference back to the Timer.
    """

    def __init__(self) -> None:
        self.call: ScheduledCall | None = None

    def replace(self, call: ScheduledCall) -> None:
        self.release()
        self.call = call

    def release(self) -> None:
        if self.call is not None:
            self.call.cancel()
            self.call = None


def _validate_duration(duration) -> float:
    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        raise TypeError(
            f"duration must be a number of seconds, got {type(duration).__name__}"
        )
    if not math.isfinite(duration) or duration <= 0:
        raise ValueError(f"duration must be a positive number of seconds, got {duration}")
    return float(duration)


# ── engine ────────────────────────────────────────────────────────────────


class Timer(QObject):
    """Qt-based interval timer with pause/resume and a published lifecycle.

    Signals
    -------
    state_changed(action: TimerAction)
        Emitted on every transition, in order.  A non-repeating tick
        emits ``completed`` then ``idle``; a repeating tick emits
        ``completed`` then ``start``.
    fired()
        Emitted once per tick, after the state stream has been updated.
    finished()
        Emitted once, right after ``stop``.  Nothing is emitted afterwards.

    An optional *delegate* (anything with ``timer_fired(timer)``) is called
    after ``fired``.  It is held weakly.
    """

    state_changed = pyqtSignal(object)
    fired = pyqtSignal()
    finished = pyqtSignal()

    def __init__(
        self,
        duration: float,
        repeats: bool = False,
        autostart: bool = True,
        *,
        delegate: TimerDelegate | None = None,
        scheduler: Scheduler | None = None,
        clock: Callable[[], float] | None = None,
        parent: QObject | None = None,
    ) -> None:
        seconds = _validate_duration(duration)
        super().__init__(parent)

        # ── configuration ─────────────────────────────────────────────
        self._duration: float = seconds
        self._repeats: bool = bool(repeats)
        self._scheduler: Scheduler = scheduler if scheduler is not None else QtScheduler()
        self._clock: Callable[[], float] = clock or time.monotonic

        # ── run state ─────────────────────────────────────────────────
        self._state: TimerState = TimerState.IDLE
        self._action: TimerAction = TimerAction.idle()
        self._started_at: float | None = None
        self._paused_remaining: float | None = None
        self._finished: bool = False
        self._generation: int = 0  # bumped on every arm; stale ticks are dropped

        self._delegate_ref: weakref.ref | None = None
        self.delegate = delegate

        # ── scheduled call ────────────────────────────────────────────
        self._registration = _Registration()
        self._finalizer = weakref.finalize(self, self._registration.release)

        if autostart:
            self.start()

    @classmethod
    def from_settings(cls, settings, **kwargs) -> Timer:
        kwargs.setdefault("repeats", settings.repeats)
        kwargs.setdefault("autostart", settings.autostart)
        return cls(settings.duration, **kwargs)

    def __enter__(self) -> Timer:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def duration(self) -> float:
        """Length of a run.  Replaced by the paused value on ``resume()``."""
        return self._duration

    @property
    def repeats(self) -> bool:
        return self._repeats

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def action(self) -> TimerAction:
        """The most recently published action."""
        return self._action

    @property
    def is_running(self) -> bool:
        return self._registration.call is not None

    @property
    def is_paused(self) -> bool:
        return self._paused_remaining is not None

    @property
    def is_finished(self) -> bool:
        """True once the notification channel has closed."""
        return self._finished

    @property
    def paused_remaining(self) -> float | None:
        return self._paused_remaining

    @property
    def time_remaining(self) -> float | None:
        """Seconds elapsed in the current run (ms precision), or None."""
        if self._started_at is None:
            return None
        return round(self._clock() - self._started_at, 3)

    @property
    def delegate(self) -> TimerDelegate | None:
        if self._delegate_ref is None:
            return None
        return self._delegate_ref()

    @delegate.setter
    def delegate(self, value: TimerDelegate | None) -> None:
        self._delegate_ref = weakref.ref(value) if value is not None else None

    def subscribe(self, slot: Callable[[TimerAction], None]) -> Subscription:
        """Connect *slot* to ``state_changed`` and replay the current action."""
        if self._finished:
            return Subscription()
        connection = self.state_changed.connect(slot)
        slot(self._action)
        return Subscription(self.state_changed, connection)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Arm a fresh run of ``duration`` seconds.  Restarts if running."""
        if self._finished:
            logger.debug("start() ignored: timer is stopped")
            return
        self._cancel()
        self._generation += 1
        generation = self._generation
        timer_ref = weakref.ref(self)

        def on_timeout() -> None:
            timer = timer_ref()
            if timer is not None:
                timer._handle_tick(generation)

        self._registration.replace(
            self._scheduler.schedule_every(self._duration, on_timeout)
        )
        self._started_at = self._clock()
        self._set_state(TimerState.RUNNING, TimerAction.start())

    def stop(self) -> None:
        """Cancel for good and close the notification channel."""
        if self._finished:
            logger.debug("stop() ignored: timer is already stopped")
            return
        self._cancel()
        self._set_state(TimerState.STOPPED, TimerAction.stop())
        self._finished = True
        self.finished.emit()

    def pause(self) -> None:
        if self._finished or not self.is_running or self._started_at is None:
            logger.debug("pause() ignored in state %s", self._state.value)
            return
        elapsed = self._clock() - self._started_at
        self._cancel()
        self._paused_remaining = elapsed
        self._set_state(TimerState.PAUSED, TimerAction.pause(elapsed))

    def resume(self) -> None:
        """Start a new run lasting the elapsed time remembered by ``pause()``."""
        if self._finished or self._paused_remaining is None:
            logger.debug("resume() ignored in state %s", self._state.value)
            return
        self._duration = max(self._paused_remaining, MIN_DURATION)
        self._paused_remaining = None
        self.start()

    def dispose(self) -> None:
        """Release the scheduled call and close the channel without emitting."""
        self._cancel()
        self._finished = True
        self._state = TimerState.STOPPED
        self._action = TimerAction.stop()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _handle_tick(self, generation: int) -> None:
        if generation != self._generation or not self.is_running:
            return  # cancelled after this tick was queued

        if self._repeats:
            self._started_at = self._clock()
            self._set_state(TimerState.COMPLETED, TimerAction.completed())
            if generation == self._generation and self.is_running:
                self._set_state(TimerState.RUNNING, TimerAction.start())
        else:
            self._cancel()
            self._set_state(TimerState.COMPLETED, TimerAction.completed())
            # a subscriber may have restarted the timer from the slot above
            if generation == self._generation:
                self._set_state(TimerState.IDLE, TimerAction.idle())

        self._notify_fired()

    def _notify_fired(self) -> None:
        if self._finished:
            return
        self.fired.emit()
        delegate = self.delegate
        if delegate is not None:
            delegate.timer_fired(self)

    def _cancel(self) -> None:
        self._registration.release()
        self._started_at = None
        self._paused_remaining = None

    def _set_state(self, new_state: TimerState, action: TimerAction) -> None:
        if self._finished:
            return
        logger.debug("timer %s -> %s", self._state.value, action)
        self._state = new_state
        self._action = action
        self.state_changed.emit(action)
