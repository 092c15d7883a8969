import sys
import textwrap
import threading
import time

import pytest

from mcserverctl.app_state import AppState, EVENT_LOG, EVENT_STATUS_CHANGED
from mcserverctl.errors import ServerError, ServerJarNotFoundError
from mcserverctl.models import LogLevel, ServerStatus
from mcserverctl.process_manager import ProcessManager

SERVER_SCRIPT = textwrap.dedent(
    """
    import sys
    print("Starting minecraft server", flush=True)
    print("oops", file=sys.stderr, flush=True)
    print('Done (0.1s)! For help, type "help"', flush=True)
    for line in sys.stdin:
        cmd = line.strip()
        if cmd == "stop":
            print("Stopping server", flush=True)
            break
        print("got: " + cmd, flush=True)
    """
)

STUBBORN_SCRIPT = textwrap.dedent(
    """
    import sys
    print("Done", flush=True)
    for line in sys.stdin:
        continue
    """
)


class Recorder:
    def __init__(self):
        self.events = []
        self.lock = threading.Lock()

    def __call__(self, kind, payload):
        with self.lock:
            self.events.append((kind, payload))

    def snapshot(self):
        with self.lock:
            return list(self.events)

    def wait_for(self, predicate, timeout=15.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if any(predicate(kind, payload) for kind, payload in self.snapshot()):
                return True
            time.sleep(0.02)
        return False


def make_state(tmp_path, script=None):
    state = AppState(tmp_path, sys.executable, "server.jar")
    state.server_args = []
    if script is not None:
        (tmp_path / "server.jar").write_text(script, encoding="utf-8")
    return state


def status_is(status):
    return lambda kind, payload: kind == EVENT_STATUS_CHANGED and payload == status


def test_start_without_jar_raises_and_resets_status(tmp_path):
    state = make_state(tmp_path)
    manager = ProcessManager(state)
    with pytest.raises(ServerJarNotFoundError) as info:
        manager.start()
    assert info.value.path == tmp_path / "server.jar"
    assert state.server_status == ServerStatus.STOPPED


def test_start_when_not_stopped_raises(tmp_path):
    state = make_state(tmp_path, SERVER_SCRIPT)
    state.server_status = ServerStatus.RUNNING
    with pytest.raises(ServerError, match="already running"):
        ProcessManager(state).start()


def test_send_command_when_stopped_raises(tmp_path):
    manager = ProcessManager(make_state(tmp_path))
    with pytest.raises(ServerError) as info:
        manager.send_command("list")
    assert str(info.value) == "Server error: Server is not running"


def test_send_command_without_process_raises(tmp_path):
    state = make_state(tmp_path)
    state.server_status = ServerStatus.RUNNING
    with pytest.raises(ServerError, match="Failed to send command to server"):
        ProcessManager(state).send_command("list")


def test_stop_when_stopped_is_noop(tmp_path):
    state = make_state(tmp_path)
    ProcessManager(state).stop()
    assert state.server_status == ServerStatus.STOPPED


def test_full_lifecycle(tmp_path):
    state = make_state(tmp_path, SERVER_SCRIPT)
    recorder = Recorder()
    state.subscribe(recorder)
    manager = ProcessManager(state, stop_timeout=10.0)

    manager.start()
    assert recorder.wait_for(status_is(ServerStatus.RUNNING))
    assert state.server_status == ServerStatus.RUNNING

    manager.send_command("say hi")
    assert recorder.wait_for(
        lambda kind, payload: kind == EVENT_LOG and payload.message == "got: say hi"
    )

    manager.stop()
    assert recorder.wait_for(status_is(ServerStatus.STOPPED))
    assert state.server_status == ServerStatus.STOPPED

    messages = [p.message for k, p in recorder.snapshot() if k == EVENT_LOG]
    assert "Stopping server" in messages


def test_stdout_and_stderr_levels(tmp_path):
    state = make_state(tmp_path, SERVER_SCRIPT)
    recorder = Recorder()
    state.subscribe(recorder)
    manager = ProcessManager(state, stop_timeout=10.0)
    manager.start()
    assert recorder.wait_for(
        lambda kind, payload: kind == EVENT_LOG and payload.message == "oops"
    )
    assert recorder.wait_for(status_is(ServerStatus.RUNNING))
    logs = {p.message: p for k, p in recorder.snapshot() if k == EVENT_LOG}
    assert logs["oops"].level is LogLevel.ERROR
    assert logs["Starting minecraft server"].level is LogLevel.INFO
    assert logs["oops"].source == "server"
    manager.stop()
    assert recorder.wait_for(status_is(ServerStatus.STOPPED))


def test_stop_kills_unresponsive_server(tmp_path):
    state = make_state(tmp_path, STUBBORN_SCRIPT)
    recorder = Recorder()
    state.subscribe(recorder)
    manager = ProcessManager(state, stop_timeout=0.3)
    manager.start()
    assert recorder.wait_for(status_is(ServerStatus.RUNNING))
    manager.stop()
    assert state.server_status in (ServerStatus.STOPPING, ServerStatus.STOPPED)
    assert recorder.wait_for(status_is(ServerStatus.STOPPED))
    assert state.server_status == ServerStatus.STOPPED