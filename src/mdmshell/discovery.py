"""
Machine facts read from local system utilities.

Everything here is read-only and recomputed on each call. When a utility is
missing or a field isn't in its output, the value is None rather than an
error.
"""

from __future__ import annotations

import logging
import plistlib
import re
import subprocess
from typing import Any
from xml.parsers.expat import ExpatError

from mdmshell._types import CommandRunner, MachineIdentity
from mdmshell.settings import ClientSettings

logger = logging.getLogger(__name__)

CONSOLE_USER_QUERY = "show State:/Users/ConsoleUser"
HARDWARE_DATA_TYPE = "SPHardwareDataType"

_NAME_LINE = re.compile(r"^\s+Name\s*:\s*(.*)$")


def run_readonly(argv: list[str], *, input: str | None = None) -> str:
    """
    Run a read-only system utility and return its standard output.

    A utility that can't be started yields empty output.
    """
    try:
        completed = subprocess.run(
            argv,
            input=input,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        logger.debug("Could not run %s: %s", argv[0], e)
        return ""
    return completed.stdout


def parse_console_user(output: str) -> str | None:
    """Pick the Name value out of console state output."""
    for line in output.splitlines():
        match = _NAME_LINE.match(line)
        if match:
            return match.group(1).rstrip() or None
    return None


def parse_hardware_data(raw: bytes) -> dict[str, Any]:
    """
    Return the first item of the first record of hardware inventory output.

    An empty or malformed snapshot gives an empty mapping.
    """
    if not raw.strip():
        return {}
    try:
        records = plistlib.loads(raw)
    except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
        logger.warning("Unreadable hardware inventory: %s", e)
        return {}
    try:
        item = records[0]["_items"][0]
    except (IndexError, KeyError, TypeError):
        return {}
    return item if isinstance(item, dict) else {}


class EnvironmentProbe:
    """Reads the console user and hardware identity of this machine."""

    def __init__(
        self,
        settings: ClientSettings | None = None,
        runner: CommandRunner = run_readonly,
    ) -> None:
        self._settings = settings or ClientSettings()
        self._run = runner

    def console_user(self) -> str | None:
        """Return the user logged in at the console, or None if nobody is."""
        out = self._run([str(self._settings.scutil_path)], input=f"{CONSOLE_USER_QUERY}\n")
        return parse_console_user(out)

    def hardware_data(self) -> dict[str, Any]:
        """One fresh hardware inventory snapshot."""
        out = self._run([str(self._settings.system_profiler_path), HARDWARE_DATA_TYPE, "-xml"])
        return parse_hardware_data(out.encode("utf-8"))

    def hardware_identity(self) -> MachineIdentity:
        """Return the platform UUID and serial number from a single snapshot."""
        data = self.hardware_data()
        return MachineIdentity(
            uuid=data.get("platform_UUID"),
            serial=data.get("serial_number"),
        )
