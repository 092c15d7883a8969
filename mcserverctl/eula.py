"""Accepting and checking the server EULA."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

EULA_FILE = "eula.txt"


def accept_eula(server_directory) -> None:
    """Write an eula.txt that records acceptance."""
    path = Path(server_directory) / EULA_FILE
    with path.open("w", encoding="utf-8") as handle:
        handle.write(
            "#By changing the setting below to TRUE you are indicating "
            "your agreement to our EULA.\n"
        )
        handle.write(f"#{datetime.now().astimezone().isoformat()}\n")
        handle.write("eula=true\n")


def is_eula_accepted(server_directory) -> bool:
    """Return True if the first ``eula=`` line in eula.txt says true."""
    path = Path(server_directory) / EULA_FILE
    if not path.exists():
        return False
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if line.startswith("eula="):
            parts = line.split("=")
            return parts[1].strip() == "true"
    return False