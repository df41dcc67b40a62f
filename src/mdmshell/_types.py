"""
Core type definitions for mdmshell.

Uses dataclasses, enums and Protocols for lightweight, typed abstractions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from mdmshell.errors import InvalidWindowType

logger = logging.getLogger(__name__)


class WindowType(Enum):
    """Window styles understood by the dialog helper."""

    HUD = "hud"  # Heads-up display
    UTILITY = "utility"
    FULL_SCREEN = "fs"  # Blocks all user input until dismissed

    @classmethod
    def parse(cls, value: WindowType | str) -> WindowType:
        """
        Resolve a window type token, folding synonyms.

        Accepts a WindowType, or a name such as "hud", "util", "utility",
        "fs", "full_screen" or "fullscreen" (a leading ":" is tolerated).

        Raises:
            InvalidWindowType: If the token is not recognised.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            token = value.strip().lstrip(":").lower()
            if token in WINDOW_TYPE_SYNONYMS:
                return WINDOW_TYPE_SYNONYMS[token]
        raise InvalidWindowType(value, tuple(WINDOW_TYPE_SYNONYMS))


WINDOW_TYPE_SYNONYMS: dict[str, WindowType] = {
    "hud": WindowType.HUD,
    "utility": WindowType.UTILITY,
    "util": WindowType.UTILITY,
    "full_screen": WindowType.FULL_SCREEN,
    "fullscreen": WindowType.FULL_SCREEN,
    "fs": WindowType.FULL_SCREEN,
}


class HelperOutcome(Enum):
    """What a dialog helper exit code means."""

    BUTTON_CLICKED = "button_clicked"
    LAUNCH_FAILED = "launch_failed"
    LAUNCHD_STARTED = "launchd_started"
    EXIT_CLICKED = "exit_clicked"
    UNSUPPORTED_OS = "unsupported_os"
    TIMED_OUT = "timed_out"
    BAD_WINDOW_TYPE = "bad_window_type"
    CANCEL_WITH_DELAY = "cancel_with_delay"
    NO_WINDOW_TYPE = "no_window_type"
    UNKNOWN = "unknown"


# Fixed entries of the helper's exit-code table. XX1/XX2 are decoded separately.
HELPER_EXIT_CODES: dict[int, HelperOutcome] = {
    1: HelperOutcome.LAUNCH_FAILED,
    3: HelperOutcome.LAUNCHD_STARTED,
    239: HelperOutcome.EXIT_CLICKED,
    240: HelperOutcome.UNSUPPORTED_OS,
    243: HelperOutcome.TIMED_OUT,
    250: HelperOutcome.BAD_WINDOW_TYPE,
    254: HelperOutcome.CANCEL_WITH_DELAY,
    255: HelperOutcome.NO_WINDOW_TYPE,
}


@dataclass(frozen=True, slots=True)
class HelperResponse:
    """Decoded result of a dialog helper run."""

    exit_code: int
    outcome: HelperOutcome
    button: int | None = None
    delay_seconds: int | None = None

    @classmethod
    def from_exit_code(cls, code: int) -> HelperResponse:
        """
        Interpret a helper exit code.

        0 and 2 mean button 1 and 2. A code ending in 1 or 2 with leading
        digits means that button was clicked with a delay of that many
        seconds chosen from the drop-down (e.g. 3001 is button 1 after 300s).

        A process exit status only keeps the low 8 bits, so delay codes are
        only reliable when read from the helper's own output. See
        read_helper_output().
        """
        if code == 0:
            return cls(code, HelperOutcome.BUTTON_CLICKED, button=1)
        if code == 2:
            return cls(code, HelperOutcome.BUTTON_CLICKED, button=2)
        if code in HELPER_EXIT_CODES:
            return cls(code, HELPER_EXIT_CODES[code])
        if code >= 10 and code % 10 in (1, 2):
            return cls(
                code,
                HelperOutcome.BUTTON_CLICKED,
                button=code % 10,
                delay_seconds=code // 10,
            )
        return cls(code, HelperOutcome.UNKNOWN)


def read_helper_output(path: Path) -> HelperResponse | None:
    """
    Decode the result code the helper printed into path.

    The last non-empty line holds the code. None if the file is missing, empty
    or doesn't end in a number.
    """
    if not path.is_file():
        return None
    lines = [ln.strip() for ln in path.read_text(encoding="utf-8").splitlines()]
    lines = [ln for ln in lines if ln]
    if not lines:
        return None
    try:
        return HelperResponse.from_exit_code(int(lines[-1]))
    except ValueError:
        logger.warning("Unexpected helper output in %s: %r", path, lines[-1])
        return None


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Output and exit status of a captured run."""

    output: str
    exit_code: int

    @property
    def success(self) -> bool:
        """Return True if command exited with code 0."""
        return self.exit_code == 0


@dataclass(frozen=True, slots=True)
class DetachedProcess:
    """
    Handle to a process started without waiting on it.

    The pid is the only link to the child. If an output file was configured,
    read_result() can be polled to learn how the run ended.
    """

    pid: int
    command_line: str
    output_file: Path | None = None

    def read_result(self) -> HelperResponse | None:
        """Return the decoded exit code from the output file, or None if not written yet."""
        if self.output_file is None:
            return None
        return read_helper_output(self.output_file)


@dataclass(frozen=True, slots=True)
class MachineIdentity:
    """Hardware identity of this machine. Either field may be absent."""

    uuid: str | None = None
    serial: str | None = None


class PrivilegeChecker(Protocol):
    """Returns True when the caller currently holds elevated privilege."""

    def __call__(self) -> bool: ...


class CommandRunner(Protocol):
    """Runs a read-only system utility and returns its standard output."""

    def __call__(self, argv: list[str], *, input: str | None = None) -> str: ...
