"""Exception hierarchy for the server manager."""

from __future__ import annotations

import os


class AppError(Exception):
    """Base class for every error the manager raises."""

    prefix = "Application error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class ProcessError(AppError):
    """An external process failed or could not be driven."""

    prefix = "Process error"


class ConfigError(AppError):
    """A configuration file or template is missing or invalid."""

    prefix = "Configuration error"


class ServerError(AppError):
    """The game server is in a state that does not allow the request."""

    prefix = "Server error"


class WebSocketError(AppError):
    """The event socket failed."""

    prefix = "WebSocket error"


class JavaNotFoundError(AppError):
    """No Java runtime could be located."""

    def __init__(self) -> None:
        super().__init__("Java runtime not found")

    def __str__(self) -> str:
        return self.message


class ServerJarNotFoundError(AppError):
    """The server JAR does not exist at the expected location."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = path
        super().__init__(f'Server JAR not found at: "{os.fspath(path)}"')

    def __str__(self) -> str:
        return self.message