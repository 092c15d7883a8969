"""Shared state of one managed server and its event bus."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable

from .models import MetricsData, ServerStatus

logger = logging.getLogger(__name__)

EVENT_LOG = "log"
EVENT_STATUS_CHANGED = "status_changed"
EVENT_METRICS_UPDATED = "metrics_updated"
EVENT_ALERT = "alert"

Listener = Callable[[str, Any], None]


class AppState:
    """Configuration, status and metrics of the server, guarded by ``lock``."""

    def __init__(self, server_directory, java_path: str, server_jar: str) -> None:
        self.server_directory = Path(server_directory)
        self.java_path = java_path
        self.server_jar = server_jar
        self.server_args = ["-Xmx2G", "-jar"]
        self.server_status = ServerStatus.STOPPED
        self.metrics = MetricsData()
        self.lock = threading.RLock()
        self._listeners: list[Listener] = []
        self._listeners_lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it again."""
        with self._listeners_lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, kind: str, payload: Any) -> None:
        """Deliver an event to every listener; a failing listener is logged and skipped."""
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(kind, payload)
            except Exception:
                logger.exception("event listener failed for %s", kind)