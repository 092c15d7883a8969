"""Reading and writing the server.properties file."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path

PROPERTIES_FILE = "server.properties"

DEFAULT_PROPERTIES = {
    "server-port": "25565",
    "gamemode": "survival",
    "difficulty": "normal",
    "level-seed": "",
    "enable-command-block": "false",
    "max-players": "20",
    "spawn-protection": "16",
    "view-distance": "10",
    "spawn-npcs": "true",
    "spawn-animals": "true",
    "spawn-monsters": "true",
    "pvp": "true",
}


def _properties_path(server_directory: str | os.PathLike[str]) -> Path:
    return Path(server_directory) / PROPERTIES_FILE


def read_properties(server_directory) -> dict[str, str]:
    """Return the key/value pairs of server.properties, or an empty dict if absent."""
    path = _properties_path(server_directory)
    if not path.exists():
        return {}
    properties: dict[str, str] = {}
    with path.open(encoding="utf-8") as handle:
        for raw in handle:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition("=")
            if sep:
                properties[key.strip()] = value.strip()
    return properties


def write_properties(server_directory, properties: Mapping[str, str]) -> None:
    """Write server.properties with a header and keys in sorted order."""
    path = _properties_path(server_directory)
    with path.open("w", encoding="utf-8") as handle:
        handle.write("#Minecraft server properties\n")
        handle.write("#Generated by Minecraft Server Manager\n")
        handle.write(f"#{datetime.now().astimezone().isoformat()}\n")
        for key in sorted(properties):
            handle.write(f"{key}={properties[key]}\n")


def update_properties(
    server_directory, properties: Mapping[str, str] | Iterable[tuple[str, str]]
) -> None:
    """Merge the given properties into the existing file and rewrite it."""
    merged = read_properties(server_directory)
    merged.update(dict(properties))
    write_properties(server_directory, merged)


def create_default_properties(server_directory) -> None:
    """Write the default properties unless server.properties already exists."""
    if _properties_path(server_directory).exists():
        return
    write_properties(server_directory, DEFAULT_PROPERTIES)