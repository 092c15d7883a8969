"""Threshold alerts on server metrics, rate limited per kind."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from .app_state import AppState, EVENT_ALERT, EVENT_LOG
from .models import LogEntry, MetricsData

ALERT_COOLDOWN = 300
ALERT_SOURCE = "alert_manager"


@dataclass
class AlertThresholds:
    cpu_threshold: float = 80.0
    memory_threshold: float = 80.0
    player_threshold: int = 18


class AlertManager:
    """Raises CPU, memory and player-count alerts, at most one per kind every 300 s."""

    def __init__(self, state: AppState) -> None:
        self.state = state
        self._thresholds = AlertThresholds()
        self._last: dict[str, int | None] = {"cpu": None, "memory": None, "players": None}
        self._lock = threading.Lock()

    def set_thresholds(self, thresholds: AlertThresholds) -> None:
        with self._lock:
            self._thresholds = thresholds

    def _due(self, kind: str, now: int) -> bool:
        last = self._last[kind]
        if last is None or now - last > ALERT_COOLDOWN:
            self._last[kind] = now
            return True
        return False

    def check_alerts(self, metrics: MetricsData) -> list[str]:
        """Send any due alerts and return their messages."""
        messages: list[str] = []
        now = metrics.timestamp
        with self._lock:
            t = self._thresholds
            if metrics.cpu_usage > t.cpu_threshold and self._due("cpu", now):
                messages.append(
                    f"High CPU usage: {metrics.cpu_usage:.1f}% "
                    f"(threshold: {t.cpu_threshold:.1f}%)"
                )

            if metrics.memory_total:
                percent = metrics.memory_usage / metrics.memory_total * 100.0
                if percent > t.memory_threshold and self._due("memory", now):
                    messages.append(
                        f"High memory usage: {percent:.1f}% "
                        f"(threshold: {t.memory_threshold:.1f}%)"
                    )

            if metrics.player_count >= t.player_threshold and self._due("players", now):
                messages.append(
                    f"Server almost full: {metrics.player_count}/{metrics.max_players} "
                    f"players (threshold: {t.player_threshold})"
                )

        for message in messages:
            self._send(message)
        return messages

    def _send(self, message: str) -> None:
        entry = LogEntry.warning(message, ALERT_SOURCE)
        self.state.publish(EVENT_ALERT, entry)
        self.state.publish(EVENT_LOG, entry)