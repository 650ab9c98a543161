"""Deferred, loop-guarded scheduling of reconciliations."""

from .timers import (
    AsyncioTimerService,
    ManualTimer,
    ManualTimerService,
    TimerHandle,
    TimerService,
)
from .change_scheduler import (
    DEFAULT_COOLDOWN_MS,
    DEFAULT_DEBOUNCE_MS,
    ChangeScheduler,
    ConnectionMarker,
    MarkerState,
)

__all__ = [
    "AsyncioTimerService",
    "ManualTimer",
    "ManualTimerService",
    "TimerHandle",
    "TimerService",
    "DEFAULT_COOLDOWN_MS",
    "DEFAULT_DEBOUNCE_MS",
    "ChangeScheduler",
    "ConnectionMarker",
    "MarkerState",
]
