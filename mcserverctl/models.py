"""Data models shared across the manager."""

import dataclasses
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar


def _now() -> int:
    return int(time.time())


class StatusKind(Enum):
    """Lifecycle phase of the game server."""

    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    ERROR = "error"


@dataclass(frozen=True)
class ServerStatus:
    """Current server status, with a message for the error state."""

    kind: StatusKind
    message: str | None = None

    STARTING: ClassVar["ServerStatus"]
    RUNNING: ClassVar["ServerStatus"]
    STOPPING: ClassVar["ServerStatus"]
    STOPPED: ClassVar["ServerStatus"]

    @classmethod
    def error(cls, message: str) -> "ServerStatus":
        return cls(StatusKind.ERROR, message)

    def __str__(self) -> str:
        if self.kind is StatusKind.ERROR:
            return f"error: {self.message}"
        return self.kind.value


ServerStatus.STARTING = ServerStatus(StatusKind.STARTING)
ServerStatus.RUNNING = ServerStatus(StatusKind.RUNNING)
ServerStatus.STOPPING = ServerStatus(StatusKind.STOPPING)
ServerStatus.STOPPED = ServerStatus(StatusKind.STOPPED)


class LogLevel(Enum):
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"
    DEBUG = "Debug"


@dataclass
class LogEntry:
    """A single log line with its level, origin and Unix timestamp."""

    message: str
    level: LogLevel
    source: str
    timestamp: int = field(default_factory=_now)

    @classmethod
    def info(cls, message: str, source: str) -> "LogEntry":
        return cls(message, LogLevel.INFO, source)

    @classmethod
    def warning(cls, message: str, source: str) -> "LogEntry":
        return cls(message, LogLevel.WARNING, source)

    @classmethod
    def error(cls, message: str, source: str) -> "LogEntry":
        return cls(message, LogLevel.ERROR, source)

    @classmethod
    def debug(cls, message: str, source: str) -> "LogEntry":
        return cls(message, LogLevel.DEBUG, source)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "level": self.level.value,
            "message": self.message,
            "source": self.source,
        }


@dataclass
class MetricsData:
    """A snapshot of server resource usage."""

    timestamp: int = field(default_factory=_now)
    cpu_usage: float = 0.0
    memory_usage: int = 0
    memory_total: int = 0
    player_count: int = 0
    max_players: int = 20
    tps: float | None = None
    uptime: int = 0

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass
class ModpackConfig:
    name: str
    version: str
    installer_url: str | None = None
    forge_version: str | None = None
    fabric_version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


def _default_properties() -> dict[str, str]:
    return {
        "server-port": "25565",
        "gamemode": "survival",
        "difficulty": "normal",
        "max-players": "20",
        "spawn-protection": "16",
        "enable-command-block": "false",
    }


@dataclass
class ServerConfig:
    """Server properties, JVM arguments and an optional modpack."""

    server_properties: dict[str, str] = field(default_factory=dict)
    java_args: list[str] = field(default_factory=list)
    modpack: ModpackConfig | None = None

    @classmethod
    def default(cls) -> "ServerConfig":
        return cls(
            server_properties=_default_properties(),
            java_args=["-Xmx2G", "-Xms1G"],
            modpack=None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "server_properties": dict(self.server_properties),
            "java_args": list(self.java_args),
            "modpack": self.modpack.to_dict() if self.modpack else None,
        }