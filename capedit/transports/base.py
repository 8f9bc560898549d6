"""Command executor interface."""

from __future__ import annotations

from typing import Protocol

from capedit.core.model import CommandRequest, CommandResult


class CommandExecutor(Protocol):
    def execute(self, request: CommandRequest) -> CommandResult:
        """Run the command on the device and return its outcome."""
