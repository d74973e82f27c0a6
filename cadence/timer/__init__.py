"""Timer package."""

from .engine import (
    MIN_DURATION,
    Timer,
    TimerAction,
    TimerDelegate,
    TimerState,
    Subscription,
)
from .scheduler import QtScheduler, ScheduledCall, Scheduler, interval_ms

__all__ = [
    "MIN_DURATION",
    "Timer",
    "TimerAction",
    "TimerDelegate",
    "TimerState",
    "Subscription",
    "QtScheduler",
    "ScheduledCall",
    "Scheduler",
    "interval_ms",
]
