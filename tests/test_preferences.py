"""Tests for ConfigurationResolver and ServerLocation."""

from __future__ import annotations

import plistlib
from pathlib import Path

import pytest

from mdmshell import ClientSettings, ConfigurationResolver, ServerLocation


def write_prefs(path: Path, fmt: plistlib.PlistFormat = plistlib.FMT_XML, **values: object) -> None:
    path.write_bytes(plistlib.dumps(values, fmt=fmt))


class TestServerLocation:
    @pytest.mark.parametrize(
        ("url", "protocol", "host", "port"),
        [
            ("https://mdm.example.com:8443/", "https", "mdm.example.com", 8443),
            ("http://10.0.0.5:8080/", "http", "10.0.0.5", 8080),
            ("https://mdm.example.com/", "https", "mdm.example.com", 443),
            ("HTTP://mdm.example.com", "http", "mdm.example.com", 80),
        ],
    )
    def test_parse(self, url: str, protocol: str, host: str, port: int) -> None:
        loc = ServerLocation.parse(url)
        assert (loc.url, loc.protocol, loc.host, loc.port) == (url, protocol, host, port)

    def test_unparseable(self) -> None:
        loc = ServerLocation.parse("ftp://files.example.com/")
        assert loc.url == "ftp://files.example.com/"
        assert loc.host is None
        assert loc.port is None


class TestConfigurationResolver:
    def test_missing_file_is_empty_configuration(self, settings: ClientSettings) -> None:
        resolver = ConfigurationResolver(settings)
        assert resolver.preferences() == {}
        assert resolver.management_server_url() is None
        assert resolver.server_host is None
        assert resolver.server_port is None

    def test_resolves_components(self, settings: ClientSettings) -> None:
        write_prefs(settings.preferences_path, jss_url="https://mdm.example.com:8443/")
        resolver = ConfigurationResolver(settings)
        assert resolver.server_protocol == "https"
        assert resolver.server_host == "mdm.example.com"
        assert resolver.server_port == 8443
        assert resolver.management_server_url() == "https://mdm.example.com:8443/"

    def test_binary_plist(self, settings: ClientSettings) -> None:
        write_prefs(settings.preferences_path, fmt=plistlib.FMT_BINARY, jss_url="https://b.example.com/")
        assert ConfigurationResolver(settings).server_host == "b.example.com"

    def test_no_url_key(self, settings: ClientSettings) -> None:
        write_prefs(settings.preferences_path, verifySSLCert="always")
        resolver = ConfigurationResolver(settings)
        assert resolver.preferences() == {"verifySSLCert": "always"}
        assert resolver.management_server_url() is None

    def test_components_cached_until_invalidated(self, settings: ClientSettings) -> None:
        write_prefs(settings.preferences_path, jss_url="https://old.example.com/")
        resolver = ConfigurationResolver(settings)
        assert resolver.server_host == "old.example.com"

        write_prefs(settings.preferences_path, jss_url="https://new.example.com/")
        assert resolver.server_host == "old.example.com"

        resolver.invalidate()
        assert resolver.server_host == "new.example.com"

    def test_refresh(self, settings: ClientSettings) -> None:
        write_prefs(settings.preferences_path, jss_url="https://old.example.com/")
        resolver = ConfigurationResolver(settings)
        assert resolver.server_host == "old.example.com"

        settings.preferences_path.unlink()
        assert resolver.refresh() is None
        assert resolver.server_host is None

    def test_instances_do_not_share_state(self, settings: ClientSettings, tmp_path: Path) -> None:
        other_path = tmp_path / "other.plist"
        write_prefs(settings.preferences_path, jss_url="https://a.example.com/")
        write_prefs(other_path, jss_url="https://b.example.com/")

        first = ConfigurationResolver(settings)
        second = ConfigurationResolver(ClientSettings(preferences_path=other_path))
        assert first.server_host == "a.example.com"
        assert second.server_host == "b.example.com"
        assert first.server_host == "a.example.com"
