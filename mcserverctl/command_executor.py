"""Dispatching console and lifecycle commands."""

from __future__ import annotations

import time

from .process_manager import ProcessManager


class CommandExecutor:
    """Maps command strings to lifecycle actions or server console input."""

    def __init__(self, manager: ProcessManager, restart_delay: float = 2.0) -> None:
        self.manager = manager
        self.restart_delay = restart_delay

    def execute(self, command: str) -> None:
        """Run ``start``, ``stop`` or ``restart``; anything else goes to the console."""
        if command.startswith("/"):
            self.manager.send_command(command[1:])
        elif command == "start":
            self.manager.start()
        elif command == "stop":
            self.manager.stop()
        elif command == "restart":
            self.manager.stop()
            time.sleep(self.restart_delay)
            self.manager.start()
        else:
            self.manager.send_command(command)