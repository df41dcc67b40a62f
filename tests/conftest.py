"""Pytest configuration and fixtures for mdmshell tests."""

from __future__ import annotations

import stat
from pathlib import Path
from typing import Callable

import pytest

from mdmshell import (
    AgentCommandBuilder,
    AgentRunner,
    ClientSettings,
    DialogCompiler,
    PrivilegePolicy,
)
from mdmshell.execution import CapturedExecution

FAKE_AGENT = """#!/bin/sh
case "$1" in
  version)
    echo "version=10.42.0"
    ;;
  checkJSSConnection)
    echo "Checking availability..."
    exit "$(cat "$(dirname "$0")/connection_status" 2>/dev/null || echo 0)"
    ;;
  *)
    echo "ran: $*"
    echo "warning: from stderr" >&2
    ;;
esac
"""

# Records its arguments, prints the button code and exits with it.
FAKE_HELPER = """#!/bin/sh
printf '%s\\n' "$@" > "$(dirname "$0")/helper_args"
echo "${FAKE_HELPER_EXIT:-2}"
exit "${FAKE_HELPER_EXIT:-2}"
"""


@pytest.fixture
def make_executable(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a shell script under tmp_path and mark it executable."""

    def _make(relative: str, body: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body)
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make


@pytest.fixture
def settings(tmp_path: Path) -> ClientSettings:
    """Settings pointing every path into tmp_path. Nothing is installed yet."""
    return ClientSettings(
        agent_paths=(tmp_path / "new" / "jamf", tmp_path / "legacy" / "jamf"),
        helper_path=tmp_path / "helper" / "jamfHelper",
        preferences_path=tmp_path / "prefs.plist",
        support_folder=tmp_path / "support",
        scutil_path=tmp_path / "bin" / "scutil",
        system_profiler_path=tmp_path / "bin" / "system_profiler",
    )


@pytest.fixture
def agent_path(settings: ClientSettings, make_executable) -> Path:
    """Install the fake agent at the newer location."""
    return make_executable("new/jamf", FAKE_AGENT)


@pytest.fixture
def helper_path(settings: ClientSettings, make_executable) -> Path:
    """Install the fake dialog helper."""
    return make_executable("helper/jamfHelper", FAKE_HELPER)


@pytest.fixture
def echoed() -> list[str]:
    """Collects echoed lines."""
    return []


@pytest.fixture
def unprivileged_builder(settings: ClientSettings, agent_path: Path, echoed: list[str]) -> AgentCommandBuilder:
    return AgentCommandBuilder(settings, PrivilegePolicy.assume(False), echo=echoed.append)


@pytest.fixture
def root_builder(settings: ClientSettings, agent_path: Path, echoed: list[str]) -> AgentCommandBuilder:
    return AgentCommandBuilder(settings, PrivilegePolicy.assume(True), echo=echoed.append)


@pytest.fixture
def root_runner(root_builder: AgentCommandBuilder, echoed: list[str]) -> AgentRunner:
    return AgentRunner(root_builder, CapturedExecution(echo=echoed.append))


@pytest.fixture
def compiler(settings: ClientSettings, helper_path: Path) -> DialogCompiler:
    return DialogCompiler(settings)
