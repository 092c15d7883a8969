import json
import sys
from datetime import timedelta

import pytest

from mcserverctl.app_state import AppState
from mcserverctl.metrics_collector import MAX_HISTORY_SIZE, MetricsCollector
from mcserverctl.models import MetricsData


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def state(tmp_path):
    return AppState(tmp_path, sys.executable, "server.jar")


def sample(ts, cpu=0.0, mem=0, **extra):
    return MetricsData(timestamp=ts, cpu_usage=cpu, memory_usage=mem, **extra)


def test_empty_average_is_none(state):
    assert MetricsCollector(state, FakeClock()).get_average_metrics(60) is None


def test_history_keeps_order(state):
    collector = MetricsCollector(state, FakeClock())
    items = [sample(t) for t in (1, 2, 3)]
    for item in items:
        collector.add_metrics(item)
    assert collector.get_history() == items


def test_history_is_bounded(state):
    collector = MetricsCollector(state, FakeClock())
    for t in range(MAX_HISTORY_SIZE + 1):
        collector.add_metrics(sample(t))
    history = collector.get_history()
    assert len(history) == MAX_HISTORY_SIZE
    assert history[0].timestamp == 1
    assert history[-1].timestamp == MAX_HISTORY_SIZE


def test_average_over_window(state):
    collector = MetricsCollector(state, FakeClock())
    collector.add_metrics(sample(100, cpu=10.0, mem=100))
    collector.add_metrics(sample(200, cpu=20.0, mem=200))
    collector.add_metrics(sample(300, cpu=60.0, mem=400, max_players=42, uptime=9))
    avg = collector.get_average_metrics(timedelta(seconds=150))
    assert avg.cpu_usage == pytest.approx(40.0)
    assert avg.memory_usage == 300
    assert avg.timestamp == 300
    assert avg.max_players == 42
    assert avg.uptime == 9


def test_zero_window_gives_latest(state):
    collector = MetricsCollector(state, FakeClock())
    collector.add_metrics(sample(100, cpu=10.0, mem=100))
    collector.add_metrics(sample(200, cpu=70.0, mem=700))
    avg = collector.get_average_metrics(0)
    assert avg.cpu_usage == pytest.approx(70.0)
    assert avg.memory_usage == 700


def test_persists_after_interval(state, tmp_path):
    (tmp_path / "logs").mkdir()
    clock = FakeClock()
    collector = MetricsCollector(state, clock)
    collector.add_metrics(sample(1, cpu=5.0))
    assert list((tmp_path / "logs").glob("metrics_*.json")) == []
    clock.now = 301.0
    collector.add_metrics(sample(2, cpu=6.0))
    files = list((tmp_path / "logs").glob("metrics_*.json"))
    assert len(files) == 1
    data = json.loads(files[0].read_text(encoding="utf-8"))
    assert data == [m.to_dict() for m in collector.get_history()]


def test_persist_without_logs_dir_is_silent(state, tmp_path):
    clock = FakeClock()
    collector = MetricsCollector(state, clock)
    clock.now = 1000.0
    collector.add_metrics(sample(1))
    assert not (tmp_path / "logs").exists()
    assert len(collector.get_history()) == 1