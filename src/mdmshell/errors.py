"""
Exception hierarchy for mdmshell.

Every condition is raised synchronously where it is detected. Nothing here is
retried internally; callers decide what to do with each kind.
"""

from __future__ import annotations

from typing import Any


class MdmShellError(Exception):
    """Base class for all mdmshell errors."""


class AgentNotInstalled(MdmShellError):
    """Raised when the management agent binary is missing or not executable."""

    def __init__(self, searched: tuple[str, ...] = ()) -> None:
        self.searched = searched
        where = ", ".join(searched) if searched else "any known location"
        super().__init__(f"The agent binary is not installed ({where}).")


class HelperNotInstalled(MdmShellError):
    """Raised when the dialog helper binary is missing or not executable."""

    def __init__(self, path: str = "") -> None:
        self.path = path
        super().__init__(f"The dialog helper is not installed properly: {path}")


class InsufficientPrivilege(MdmShellError):
    """
    Raised when a non-rootless agent command is invoked without elevation.

    Attributes:
        command: The agent command that was refused.
    """

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"Root privileges are required to run the agent command '{command}'")


class InvalidArguments(MdmShellError):
    """Raised when agent arguments are not None, a string, or a sequence of strings."""

    def __init__(self, reason: str, value: Any = None) -> None:
        self.reason = reason
        self.value = value
        super().__init__(reason)


class InvalidWindowType(MdmShellError):
    """Raised when a dialog window type is not recognised."""

    def __init__(self, window_type: Any, valid: tuple[str, ...] = ()) -> None:
        self.window_type = window_type
        self.valid = valid
        super().__init__(
            f"Unknown window type {window_type!r}; expected one of: {', '.join(valid)}"
        )


class InvalidOptionValue(MdmShellError):
    """
    Raised when a dialog option value falls outside its domain.

    Attributes:
        option: The option name.
        value: The rejected value.
    """

    def __init__(self, option: str, value: Any, reason: str) -> None:
        self.option = option
        self.value = value
        self.reason = reason
        super().__init__(f"{option}: {reason} (got {value!r})")


class NoReceiptsFolder(MdmShellError):
    """Raised when the agent's receipts folder does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"The receipts folder doesn't exist on this computer: {path}")


class NetworkUnavailable(MdmShellError):
    """Raised when no route exists to determine a local address."""


class RecordNotFound(MdmShellError):
    """Raised by record lookups when the server has no record for this machine."""
