"""Request handlers returning uniform success/error envelopes."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from . import eula, server_properties
from .app_state import AppState
from .command_executor import CommandExecutor
from .errors import AppError
from .models import MetricsData, ServerConfig
from .process_manager import ProcessManager

T = TypeVar("T")


@dataclass
class ApiResponse(Generic[T]):
    """Result envelope: either data or an error message."""

    success: bool
    data: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: T) -> "ApiResponse[T]":
        return cls(True, data, None)

    @classmethod
    def failure(cls, message: str) -> "ApiResponse[T]":
        return cls(False, None, message)

    def to_dict(self) -> dict[str, Any]:
        data = self.data
        if hasattr(data, "to_dict"):
            data = data.to_dict()
        return {"success": self.success, "data": data, "error": self.error}


def _guard(action: Callable[[], T]) -> ApiResponse[T]:
    try:
        return ApiResponse.ok(action())
    except AppError as exc:
        return ApiResponse.failure(str(exc))
    except OSError as exc:
        return ApiResponse.failure(f"IO error: {exc}")


class ServerApi:
    """The operations a front end may invoke on one managed server."""

    restart_delay = 2.0

    def __init__(self, state: AppState, manager: ProcessManager | None = None) -> None:
        self.state = state
        self.manager = manager if manager is not None else ProcessManager(state)

    def _executor(self) -> CommandExecutor:
        return CommandExecutor(self.manager, restart_delay=self.restart_delay)

    def get_server_status(self) -> ApiResponse[str]:
        with self.state.lock:
            return ApiResponse.ok(str(self.state.server_status))

    def get_server_metrics(self) -> ApiResponse[MetricsData]:
        with self.state.lock:
            return ApiResponse.ok(dataclasses.replace(self.state.metrics))

    def start_server(self) -> ApiResponse[None]:
        return _guard(self.manager.start)

    def stop_server(self) -> ApiResponse[None]:
        return _guard(self.manager.stop)

    def restart_server(self) -> ApiResponse[None]:
        return _guard(lambda: self._executor().execute("restart"))

    def execute_command(self, command: str) -> ApiResponse[None]:
        return _guard(lambda: self._executor().execute(command))

    def get_server_properties(self) -> ApiResponse[ServerConfig]:
        def build() -> ServerConfig:
            return ServerConfig(
                server_properties=server_properties.read_properties(
                    self.state.server_directory
                ),
                java_args=list(self.state.server_args),
                modpack=None,
            )

        return _guard(build)

    def update_server_properties(self, properties) -> ApiResponse[None]:
        return _guard(
            lambda: server_properties.update_properties(
                self.state.server_directory, properties
            )
        )

    def accept_eula(self) -> ApiResponse[None]:
        return _guard(lambda: eula.accept_eula(self.state.server_directory))

    def is_eula_accepted(self) -> ApiResponse[bool]:
        return _guard(lambda: eula.is_eula_accepted(self.state.server_directory))