"""Tests for EnvironmentProbe: console user and hardware identity."""

from __future__ import annotations

import plistlib
from pathlib import Path
from typing import Any

import pytest

from mdmshell import ClientSettings, EnvironmentProbe, MachineIdentity
from mdmshell.discovery import parse_console_user, parse_hardware_data, run_readonly

SCUTIL_OUTPUT = """<dictionary> {
  GID : 20
  Name : alice
  SessionInfo : <array> {
    0 : <dictionary> {
      kCGSSessionUserNameKey : alice
    }
  }
  UID : 501
}
"""


def hardware_xml(**fields: Any) -> str:
    item = {"_name": "hardware_overview", "machine_model": "Mac14,2", **fields}
    return plistlib.dumps([{"_dataType": "SPHardwareDataType", "_items": [item]}]).decode()


class FakeRunner:
    """Stands in for the system utilities; records each call."""

    def __init__(self, outputs: dict[str, str]) -> None:
        self.outputs = outputs
        self.calls: list[tuple[list[str], str | None]] = []

    def __call__(self, argv: list[str], *, input: str | None = None) -> str:
        self.calls.append((argv, input))
        return self.outputs.get(Path(argv[0]).name, "")


class TestConsoleUser:
    def test_parses_name(self) -> None:
        assert parse_console_user(SCUTIL_OUTPUT) == "alice"

    def test_no_console_user(self) -> None:
        assert parse_console_user("  No such key\n") is None
        assert parse_console_user("") is None

    def test_probe_sends_query_on_stdin(self, settings: ClientSettings) -> None:
        runner = FakeRunner({"scutil": SCUTIL_OUTPUT})
        assert EnvironmentProbe(settings, runner).console_user() == "alice"
        argv, stdin = runner.calls[0]
        assert argv == [str(settings.scutil_path)]
        assert stdin == "show State:/Users/ConsoleUser\n"

    def test_trailing_whitespace_stripped(self) -> None:
        assert parse_console_user("  Name : bob   \n") == "bob"


class TestHardwareIdentity:
    def test_both_fields(self, settings: ClientSettings) -> None:
        runner = FakeRunner(
            {"system_profiler": hardware_xml(platform_UUID="ABC-123", serial_number="C02XYZ")}
        )
        identity = EnvironmentProbe(settings, runner).hardware_identity()
        assert identity == MachineIdentity(uuid="ABC-123", serial="C02XYZ")
        assert runner.calls == [([str(settings.system_profiler_path), "SPHardwareDataType", "-xml"], None)]

    def test_missing_serial(self, settings: ClientSettings) -> None:
        runner = FakeRunner({"system_profiler": hardware_xml(platform_UUID="ABC-123")})
        identity = EnvironmentProbe(settings, runner).hardware_identity()
        assert identity.uuid == "ABC-123"
        assert identity.serial is None

    def test_missing_uuid(self, settings: ClientSettings) -> None:
        runner = FakeRunner({"system_profiler": hardware_xml(serial_number="C02XYZ")})
        identity = EnvironmentProbe(settings, runner).hardware_identity()
        assert identity.uuid is None
        assert identity.serial == "C02XYZ"

    def test_recomputed_each_call(self, settings: ClientSettings) -> None:
        runner = FakeRunner({"system_profiler": hardware_xml(platform_UUID="ONE")})
        probe = EnvironmentProbe(settings, runner)
        assert probe.hardware_identity().uuid == "ONE"

        runner.outputs["system_profiler"] = hardware_xml(platform_UUID="TWO")
        assert probe.hardware_identity().uuid == "TWO"
        assert len(runner.calls) == 2

    @pytest.mark.parametrize(
        "raw",
        [
            b"",
            b"   \n",
            b"<not a plist",
            plistlib.dumps([]),
            plistlib.dumps([{"_items": []}]),
            plistlib.dumps({"_items": [{}]}),
        ],
    )
    def test_empty_or_odd_snapshots(self, raw: bytes) -> None:
        assert parse_hardware_data(raw) == {}


class TestRunReadonly:
    def test_missing_utility_gives_empty_output(self, tmp_path: Path) -> None:
        assert run_readonly([str(tmp_path / "nope")]) == ""

    def test_passes_input(self) -> None:
        assert run_readonly(["cat"], input="hello\n") == "hello\n"

    def test_probe_with_missing_utilities(self, settings: ClientSettings) -> None:
        probe = EnvironmentProbe(settings)
        assert probe.console_user() is None
        assert probe.hardware_identity() == MachineIdentity()
