"""Rolling history of metrics with periodic persistence."""

from __future__ import annotations

import dataclasses
import json
import time
from collections import deque
from datetime import datetime, timedelta
from typing import Callable

from .app_state import AppState
from .models import MetricsData

MAX_HISTORY_SIZE = 3600
PERSIST_INTERVAL = 300.0


class MetricsCollector:
    """Keeps the last hour of samples and writes them to the logs directory every 5 minutes."""

    def __init__(self, state: AppState, clock: Callable[[], float] = time.monotonic) -> None:
        self.state = state
        self._clock = clock
        self._history: deque[MetricsData] = deque(maxlen=MAX_HISTORY_SIZE)
        self._last_persisted = clock()

    def add_metrics(self, metrics: MetricsData) -> None:
        self._history.append(metrics)
        if self._clock() - self._last_persisted > PERSIST_INTERVAL:
            self._persist()
            self._last_persisted = self._clock()

    def get_history(self) -> list[MetricsData]:
        return list(self._history)

    def get_average_metrics(self, duration: float | timedelta) -> MetricsData | None:
        """Average CPU and memory over samples within ``duration`` of the newest one."""
        if not self._history:
            return None
        seconds = duration.total_seconds() if isinstance(duration, timedelta) else duration
        latest = self._history[-1]
        threshold = latest.timestamp - int(seconds)
        relevant = [m for m in self._history if m.timestamp >= threshold]
        if not relevant:
            return None
        count = len(relevant)
        return dataclasses.replace(
            latest,
            cpu_usage=sum(m.cpu_usage for m in relevant) / count,
            memory_usage=sum(m.memory_usage for m in relevant) // count,
        )

    def _persist(self) -> None:
        if not self._history:
            return
        path = (
            self.state.server_directory
            / "logs"
            / f"metrics_{datetime.now().strftime('%Y%m%d')}.json"
        )
        try:
            with path.open("w", encoding="utf-8") as handle:
                json.dump([m.to_dict() for m in self._history], handle)
        except OSError:
            pass