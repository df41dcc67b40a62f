"""
Fixed locations of the agent, the dialog helper and their local state.

Defaults match the standard install layout. Each path can be overridden
through the environment, which is how tests and unusual installs point the
client somewhere else.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Newer install location first, legacy fallback second.
DEFAULT_AGENT_PATHS: tuple[Path, ...] = (
    Path("/usr/local/jamf/bin/jamf"),
    Path("/usr/sbin/jamf"),
)
DEFAULT_HELPER_PATH = Path(
    "/Library/Application Support/JAMF/bin/jamfHelper.app/Contents/MacOS/jamfHelper"
)
DEFAULT_PREFERENCES_PATH = Path("/Library/Preferences/com.jamfsoftware.jamf.plist")
DEFAULT_SUPPORT_FOLDER = Path("/Library/Application Support/JAMF")
DEFAULT_SCUTIL_PATH = Path("/usr/sbin/scutil")
DEFAULT_SYSTEM_PROFILER_PATH = Path("/usr/sbin/system_profiler")

ENV_PREFIX = "MDMSHELL_"


@dataclass(frozen=True)
class ClientSettings:
    """Paths used by the client. Immutable once built."""

    agent_paths: tuple[Path, ...] = DEFAULT_AGENT_PATHS
    helper_path: Path = DEFAULT_HELPER_PATH
    preferences_path: Path = DEFAULT_PREFERENCES_PATH
    support_folder: Path = DEFAULT_SUPPORT_FOLDER
    scutil_path: Path = DEFAULT_SCUTIL_PATH
    system_profiler_path: Path = DEFAULT_SYSTEM_PROFILER_PATH

    @property
    def receipts_folder(self) -> Path:
        return self.support_folder / "Receipts"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> ClientSettings:
        """
        Build settings from defaults plus MDMSHELL_* environment overrides.

        Recognised variables:
            MDMSHELL_AGENT_PATH: one or more agent paths, separated by os.pathsep,
                checked in order.
            MDMSHELL_HELPER_PATH: dialog helper executable.
            MDMSHELL_PREFERENCES: agent preferences property list.
            MDMSHELL_SUPPORT_FOLDER: agent support folder (holds Receipts/).
            MDMSHELL_SCUTIL: console state query utility.
            MDMSHELL_SYSTEM_PROFILER: hardware inventory utility.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        agent = env.get(f"{ENV_PREFIX}AGENT_PATH")
        if agent:
            kwargs["agent_paths"] = tuple(Path(p) for p in agent.split(os.pathsep) if p)

        for var, attr in (
            ("HELPER_PATH", "helper_path"),
            ("PREFERENCES", "preferences_path"),
            ("SUPPORT_FOLDER", "support_folder"),
            ("SCUTIL", "scutil_path"),
            ("SYSTEM_PROFILER", "system_profiler_path"),
        ):
            value = env.get(f"{ENV_PREFIX}{var}")
            if value:
                kwargs[attr] = Path(value)

        return cls(**kwargs)  # type: ignore[arg-type]


def is_executable(path: Path) -> bool:
    """True if path is a regular file the current user may execute."""
    return path.is_file() and os.access(path, os.X_OK)
