"""Cadence: an interval timer with pause/resume and an observable lifecycle."""

from .settings import Settings, load_settings, save_settings
from .timer import Timer, TimerAction, TimerDelegate, TimerState, Subscription

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "load_settings",
    "save_settings",
    "Timer",
    "TimerAction",
    "TimerDelegate",
    "TimerState",
    "Subscription",
]
