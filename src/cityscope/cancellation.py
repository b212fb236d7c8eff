"""Supersede-and-timeout cancellation for per-viewport clustering requests."""

from __future__ import annotations

import logging
import threading
from typing import Hashable

from cityscope.config import CLUSTER_TIMEOUT_MS

logger = logging.getLogger(__name__)


class ViewportCoordinator:
    """Tracks the in-flight request for each viewport.

    ``begin`` hands out a fresh cancel event for a viewport and sets the event
    of any older request for that viewport, so stale work is abandoned. Each
    event is also set automatically once its timeout elapses.
    """

    def __init__(self, timeout_ms: int = CLUSTER_TIMEOUT_MS):
        self.timeout_ms = timeout_ms
        self._lock = threading.Lock()
        self._active: dict[Hashable, tuple[threading.Event, threading.Timer]] = {}

    def begin(self, viewport_key: Hashable) -> threading.Event:
        event = threading.Event()
        timer = threading.Timer(self.timeout_ms / 1000.0, event.set)
        timer.daemon = True

        with self._lock:
            previous = self._active.get(viewport_key)
            self._active[viewport_key] = (event, timer)

        if previous is not None:
            prev_event, prev_timer = previous
            prev_timer.cancel()
            if not prev_event.is_set():
                logger.debug("Superseding in-flight request for viewport %r", viewport_key)
                prev_event.set()

        timer.start()
        return event

    def finish(self, viewport_key: Hashable, event: threading.Event) -> None:
        """Release ``event``; a no-op if a newer request already replaced it."""
        with self._lock:
            current = self._active.get(viewport_key)
            if current is None or current[0] is not event:
                return
            del self._active[viewport_key]
        current[1].cancel()

    def active_count(self) -> int:
        with self._lock:
            return len(self._active)
