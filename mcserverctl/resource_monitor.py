"""Periodic sampling of the server process's resource usage."""

from __future__ import annotations

import dataclasses
import logging
import threading
import time

import psutil

from .app_state import AppState, EVENT_METRICS_UPDATED
from .models import MetricsData, ServerStatus

logger = logging.getLogger(__name__)


class ResourceMonitor:
    """Samples CPU and memory of the running server and publishes the metrics."""

    def __init__(self, state: AppState, interval: float = 1.0) -> None:
        self.state = state
        self.interval = interval
        self._start_time: float | None = None
        self._tracked: psutil.Process | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def _find_server_process(self) -> psutil.Process | None:
        for proc in psutil.process_iter(["name", "cmdline"]):
            name = proc.info.get("name") or ""
            if "java" not in name:
                continue
            command = " ".join(proc.info.get("cmdline") or [])
            if self.state.server_jar in command:
                return proc
        return None

    def _usage(self) -> tuple[float, int]:
        proc = self._find_server_process()
        if proc is None:
            self._tracked = None
            return 0.0, 0
        # Keep the same Process object so cpu_percent measures between samples.
        if self._tracked is None or self._tracked.pid != proc.pid:
            self._tracked = proc
        try:
            with self._tracked.oneshot():
                return self._tracked.cpu_percent(), self._tracked.memory_info().rss
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            self._tracked = None
            return 0.0, 0

    def sample(self) -> MetricsData | None:
        """Take one sample if the server is running; returns the metrics or None."""
        with self.state.lock:
            status = self.state.server_status
        if status != ServerStatus.RUNNING:
            self._start_time = None
            return None

        now = time.monotonic()
        if self._start_time is None:
            self._start_time = now

        cpu, memory = self._usage()
        metrics = MetricsData(
            cpu_usage=cpu,
            memory_usage=memory,
            memory_total=psutil.virtual_memory().total,
            player_count=0,
            max_players=20,
            uptime=int(now - self._start_time),
        )
        with self.state.lock:
            self.state.metrics = dataclasses.replace(metrics)
        self.state.publish(EVENT_METRICS_UPDATED, metrics)
        return metrics

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            try:
                self.sample()
            except Exception:
                logger.exception("resource sampling failed")

    def start(self) -> None:
        """Begin sampling on a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the background thread and wait for it to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=max(self.interval * 5, 5.0))
            self._thread = None