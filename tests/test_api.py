"""Tests for the ManagedClient facade and create_client."""

from __future__ import annotations

import plistlib
from pathlib import Path

import pytest

from mdmshell import (
    ClientSettings,
    DetachedProcess,
    InsufficientPrivilege,
    ManagedClient,
    NoReceiptsFolder,
    RecordNotFound,
    create_client,
)
from mdmshell.discovery import EnvironmentProbe


def hardware_runner(uuid: str | None):
    item = {"platform_UUID": uuid} if uuid else {}
    raw = plistlib.dumps([{"_items": [item]}]).decode()

    def run(argv: list[str], *, input: str | None = None) -> str:
        return raw

    return run


@pytest.fixture
def client(settings: ClientSettings) -> ManagedClient:
    return create_client(settings=settings, privilege=lambda: False)


class TestCreateClient:
    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("MDMSHELL_PREFERENCES", str(tmp_path / "p.plist"))
        monkeypatch.setenv("MDMSHELL_AGENT_PATH", f"{tmp_path / 'a'}:{tmp_path / 'b'}")
        client = create_client()
        assert client.settings.preferences_path == tmp_path / "p.plist"
        assert client.settings.agent_paths == (tmp_path / "a", tmp_path / "b")

    def test_injected_privilege(self, client: ManagedClient, agent_path: Path) -> None:
        with pytest.raises(InsufficientPrivilege):
            client.run_agent("recon")
        assert client.run_agent("about") == "ran: about\nwarning: from stderr\n"

    def test_strict_dialog_options(self, settings: ClientSettings, helper_path: Path) -> None:
        from mdmshell import InvalidOptionValue

        strict = create_client(settings=settings, strict_dialog_options=True)
        with pytest.raises(InvalidOptionValue):
            strict.compile_dialog("hud", {"colour": "red"})
        assert create_client(settings=settings).compile_dialog("hud", {"colour": "red"}).args[-1] == "hud"


class TestManagedClient:
    def test_agent_facts(self, client: ManagedClient, agent_path: Path) -> None:
        assert client.installed()
        assert client.agent_version() == "10.42.0"
        assert client.server_available()
        assert client.build_agent_command("version", verbose=True) == f"{agent_path} version -verbose"

    def test_not_installed(self, client: ManagedClient) -> None:
        assert not client.installed()
        assert client.agent_version() is None

    def test_enrolled(self, client: ManagedClient, settings: ClientSettings, agent_path: Path) -> None:
        assert not client.enrolled()
        settings.preferences_path.write_bytes(plistlib.dumps({"jss_url": "https://mdm.example.com:8443/"}))
        assert client.enrolled()
        assert client.resolver.server_port == 8443

    def test_receipts(self, client: ManagedClient, settings: ClientSettings) -> None:
        with pytest.raises(NoReceiptsFolder):
            client.receipts()

        folder = settings.receipts_folder
        folder.mkdir(parents=True)
        (folder / "b.pkg").write_text("")
        (folder / "a.pkg").write_text("")
        (folder / "nested").mkdir()
        assert [p.name for p in client.receipts()] == ["a.pkg", "b.pkg"]

    def test_managed_record(self, client: ManagedClient) -> None:
        client.probe = EnvironmentProbe(client.settings, hardware_runner("UUID-1"))
        assert client.udid() == "UUID-1"
        assert client.managed_record(lambda udid: {"udid": udid}) == {"udid": "UUID-1"}

        def missing(udid: str) -> dict:
            raise RecordNotFound(udid)

        assert client.managed_record(missing) is None

    def test_managed_record_without_uuid(self, client: ManagedClient) -> None:
        client.probe = EnvironmentProbe(client.settings, hardware_runner(None))
        calls: list[str] = []
        assert client.managed_record(calls.append) is None
        assert calls == []

    def test_show_dialog(self, client: ManagedClient, helper_path: Path, tmp_path: Path) -> None:
        assert client.show_dialog("util", {"title": "T"}) == 2
        handle = client.show_dialog("hud", abandon_process=True, output_file=tmp_path / "o")
        assert isinstance(handle, DetachedProcess)
