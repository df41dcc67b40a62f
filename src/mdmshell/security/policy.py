"""
Privilege policy for agent commands.

Most agent commands need root. A small allowlist of read-only commands may run
as any user. The check happens every time a command is built, because the
caller's privilege can change between calls.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field

from mdmshell._types import PrivilegeChecker
from mdmshell.errors import InsufficientPrivilege, InvalidArguments

logger = logging.getLogger(__name__)

# Agent commands that don't need root privileges
ROOTLESS_AGENT_COMMANDS: frozenset[str] = frozenset(
    {
        "about",
        "checkJSSConnection",
        "getARDFields",
        "getComputerName",
        "help",
        "listUsers",
        "version",
    }
)

_COMMAND_TOKEN = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")


def is_superuser() -> bool:
    """Return True if the effective user id is root."""
    return os.geteuid() == 0


@dataclass
class PrivilegePolicy:
    """
    Decides whether an agent command may run right now.

    Attributes:
        rootless_commands: Commands allowed without elevated privilege.
        checker: Reports whether the caller is currently elevated.
    """

    rootless_commands: frozenset[str] = field(default=ROOTLESS_AGENT_COMMANDS)
    checker: PrivilegeChecker = is_superuser

    @classmethod
    def standard(cls) -> PrivilegePolicy:
        """The stock allowlist, checked against the real effective uid."""
        return cls()

    @classmethod
    def assume(cls, elevated: bool) -> PrivilegePolicy:
        """A policy whose privilege answer is fixed, for tooling and tests."""
        return cls(checker=lambda: elevated)

    def is_rootless(self, command: str) -> bool:
        return command in self.rootless_commands

    def check_command(self, command: str) -> str:
        """
        Validate a command name and the caller's privilege for it.

        Args:
            command: The agent sub-command, e.g. "recon" or "version".

        Returns:
            The command name.

        Raises:
            InvalidArguments: If the name is not a single command token.
            InsufficientPrivilege: If the command needs root and the caller
                isn't elevated.
        """
        if not isinstance(command, str) or not _COMMAND_TOKEN.match(command):
            raise InvalidArguments(f"Invalid agent command name: {command!r}", command)

        if self.is_rootless(command):
            return command

        if not self.checker():
            logger.debug("Refusing '%s': caller is not elevated", command)
            raise InsufficientPrivilege(command)

        return command

    def add_rootless_command(self, command: str) -> None:
        """
        Allow a command to run without elevated privilege.

        Args:
            command: Agent command name.
        """
        self.rootless_commands = self.rootless_commands | {command}
