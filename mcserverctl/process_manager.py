"""Starting, stopping and talking to the game server process."""

from __future__ import annotations

import subprocess
import threading

from .app_state import AppState, EVENT_LOG, EVENT_STATUS_CHANGED
from .errors import ServerError, ServerJarNotFoundError
from .models import LogEntry, ServerStatus

LOG_SOURCE = "server"
READY_MARKER = "Done"


class ProcessManager:
    """Owns the server process of one ``AppState`` and mirrors its lifecycle."""

    def __init__(self, state: AppState, stop_timeout: float = 30.0) -> None:
        self.state = state
        self.stop_timeout = stop_timeout
        self._process: subprocess.Popen[str] | None = None
        self._process_lock = threading.Lock()

    def _set_status(self, status: ServerStatus, announce: bool = True) -> None:
        with self.state.lock:
            self.state.server_status = status
        if announce:
            self.state.publish(EVENT_STATUS_CHANGED, status)

    def start(self) -> None:
        """Launch the server; raises if it is not stopped or the JAR is missing."""
        with self.state.lock:
            if self.state.server_status != ServerStatus.STOPPED:
                raise ServerError("Server is already running")
            self.state.server_status = ServerStatus.STARTING

        server_dir = self.state.server_directory
        jar_path = server_dir / self.state.server_jar
        if not jar_path.exists():
            self._set_status(ServerStatus.STOPPED, announce=False)
            raise ServerJarNotFoundError(jar_path)

        args = [self.state.java_path, *self.state.server_args, self.state.server_jar]
        try:
            process = subprocess.Popen(
                args,
                cwd=server_dir,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError:
            self._set_status(ServerStatus.STOPPED, announce=False)
            raise

        with self._process_lock:
            self._process = process

        threading.Thread(target=self._pump_stdout, args=(process,), daemon=True).start()
        threading.Thread(target=self._pump_stderr, args=(process,), daemon=True).start()

    def _pump_stdout(self, process: subprocess.Popen[str]) -> None:
        assert process.stdout is not None
        for raw in process.stdout:
            line = raw.rstrip("\r\n")
            self.state.publish(EVENT_LOG, LogEntry.info(line, LOG_SOURCE))
            if READY_MARKER in line:
                self._set_status(ServerStatus.RUNNING)
        process.stdout.close()
        with self._process_lock:
            if self._process is process:
                self._process = None
        self._set_status(ServerStatus.STOPPED)

    def _pump_stderr(self, process: subprocess.Popen[str]) -> None:
        assert process.stderr is not None
        for raw in process.stderr:
            self.state.publish(EVENT_LOG, LogEntry.error(raw.rstrip("\r\n"), LOG_SOURCE))
        process.stderr.close()

    @staticmethod
    def _write(process: subprocess.Popen[str] | None, command: str) -> None:
        if process is None or process.stdin is None:
            raise ServerError("Failed to send command to server")
        process.stdin.write(f"{command}\n")
        process.stdin.flush()

    def _await_exit(self, process: subprocess.Popen[str]) -> None:
        try:
            process.wait(timeout=self.stop_timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()

    def stop(self) -> None:
        """Ask the server to stop; it is killed if it does not exit in time."""
        with self.state.lock:
            if self.state.server_status == ServerStatus.STOPPED:
                return
            self.state.server_status = ServerStatus.STOPPING

        with self._process_lock:
            process, self._process = self._process, None
        if process is None:
            return
        try:
            self._write(process, "stop")
        finally:
            threading.Thread(target=self._await_exit, args=(process,), daemon=True).start()

    def send_command(self, command: str) -> None:
        """Write a console command to the running server."""
        with self.state.lock:
            status = self.state.server_status
        if status != ServerStatus.RUNNING:
            raise ServerError("Server is not running")
        with self._process_lock:
            self._write(self._process, command)