"""Debounced, loop-guarded scheduling of connection reconciliations."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from .timers import TimerHandle, TimerService

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 50
DEFAULT_COOLDOWN_MS = 100


class MarkerState(str, Enum):
    """Per-connection scheduling state."""

    IDLE = "idle"
    SCHEDULED = "scheduled"  # Waiting for the debounce timer
    PROCESSING = "processing"  # Reconciliation running
    COOLDOWN = "cooldown"  # Grace period absorbing our own write's echo


@dataclass
class ConnectionMarker:
    """Scheduling state of one connection."""

    connection_id: str
    state: MarkerState = MarkerState.IDLE
    force: bool = False
    rerun: bool = False
    timer: TimerHandle | None = None


ProcessFn = Callable[[str, bool], Any]


class ChangeScheduler:
    """Coalesces change notifications into one reconciliation per connection.

    Each connection moves through idle -> scheduled -> processing -> cooldown
    -> idle. While a connection is processing or cooling down, echoes of its
    own write are dropped unless forced; any other request makes it run again
    once the current pass is over. A connection is never processed
    re-entrantly.

    Args:
        timers: Timer service providing `call_later`.
        process: Callback `(connection_id, force)` doing the actual work.
        debounce_ms: Delay between the last request and processing.
        cooldown_ms: Grace delay before a processed connection goes idle.
        shared_timer: Use one debounce timer for all pending connections; any
            new request then delays every pending one.
    """

    def __init__(
        self,
        timers: TimerService,
        process: ProcessFn,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        cooldown_ms: int = DEFAULT_COOLDOWN_MS,
        shared_timer: bool = False,
    ):
        self.timers = timers
        self.debounce_ms = debounce_ms
        self.cooldown_ms = cooldown_ms
        self.shared_timer = shared_timer
        self._process = process
        self._markers: dict[str, ConnectionMarker] = {}
        self._shared: TimerHandle | None = None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def state_of(self, connection_id: str) -> MarkerState:
        """Get the scheduling state of a connection."""
        marker = self._markers.get(connection_id)
        return marker.state if marker is not None else MarkerState.IDLE

    def pending(self) -> list[str]:
        """Get the ids of connections waiting for their debounce timer."""
        return [
            m.connection_id
            for m in self._markers.values()
            if m.state == MarkerState.SCHEDULED
        ]

    def is_busy(self) -> bool:
        """Check whether any connection is not idle."""
        return bool(self._markers)

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------

    def schedule(self, connection_id: str, force: bool = False, echo: bool = False) -> bool:
        """Request a reconciliation of a connection.

        Args:
            connection_id: The connection id.
            force: Clear and recompute instead of an incremental update.
            echo: The request may stem from the connection's own write.

        Returns:
            True if the request was accepted, False if it was dropped.
        """
        if not connection_id:
            return False

        marker = self._markers.get(connection_id) or ConnectionMarker(connection_id)

        if marker.state in (MarkerState.PROCESSING, MarkerState.COOLDOWN):
            if echo and not force:
                logger.debug("Dropping echo for in-flight connection %s", connection_id)
                return False
            if marker.state == MarkerState.PROCESSING:
                marker.rerun = True
                marker.force = marker.force or force
                return True
            self._cancel(marker)

        marker.force = marker.force or force
        marker.state = MarkerState.SCHEDULED
        self._markers[connection_id] = marker
        self._arm(marker)
        logger.debug("Scheduled %s (force=%s)", connection_id, marker.force)
        return True

    def cancel_all(self) -> None:
        """Cancel every timer and forget all markers."""
        for marker in self._markers.values():
            self._cancel(marker)
        if self._shared is not None:
            self._shared.cancel()
            self._shared = None
        self._markers.clear()

    def _arm(self, marker: ConnectionMarker) -> None:
        if self.shared_timer:
            if self._shared is not None:
                self._shared.cancel()
            self._shared = self.timers.call_later(self.debounce_ms, self._flush)
            return

        self._cancel(marker)
        connection_id = marker.connection_id
        marker.timer = self.timers.call_later(
            self.debounce_ms, lambda: self._run(connection_id)
        )

    def _cancel(self, marker: ConnectionMarker) -> None:
        if marker.timer is not None:
            marker.timer.cancel()
            marker.timer = None

    # -------------------------------------------------------------------------
    # Processing
    # -------------------------------------------------------------------------

    def _flush(self) -> None:
        self._shared = None
        for connection_id in self.pending():
            self._run(connection_id)

    def _run(self, connection_id: str) -> None:
        marker = self._markers.get(connection_id)
        if marker is None or marker.state != MarkerState.SCHEDULED:
            return

        marker.timer = None
        force, marker.force = marker.force, False
        marker.state = MarkerState.PROCESSING

        try:
            self._process(connection_id, force)
        except Exception:
            # One failing connection must not stop the others
            logger.exception("Reconciliation of %s failed", connection_id)
        finally:
            if marker.rerun:
                marker.rerun = False
                marker.state = MarkerState.SCHEDULED
                self._arm(marker)
            else:
                marker.state = MarkerState.COOLDOWN
                marker.timer = self.timers.call_later(
                    self.cooldown_ms, lambda: self._release(connection_id)
                )

    def _release(self, connection_id: str) -> None:
        marker = self._markers.get(connection_id)
        if marker is not None and marker.state == MarkerState.COOLDOWN:
            del self._markers[connection_id]
