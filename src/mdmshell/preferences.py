"""
Management server configuration read from the agent's preferences.

The preferences file is a property list (XML or binary). A missing file means
the machine isn't configured, which is not an error.
"""

from __future__ import annotations

import logging
import plistlib
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mdmshell.settings import ClientSettings

logger = logging.getLogger(__name__)

SERVER_URL_KEY = "jss_url"

_URL_PATTERN = re.compile(r"^(https?)://([^/:]+)(?::(\d+))?(?:/|$)", re.IGNORECASE)
_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True, slots=True)
class ServerLocation:
    """A management server URL split into its parts."""

    url: str
    protocol: str | None
    host: str | None
    port: int | None

    @classmethod
    def parse(cls, url: str) -> ServerLocation:
        """
        Split a server URL. Parts that can't be found are None; a URL
        without an explicit port gets the scheme's default port.
        """
        match = _URL_PATTERN.match(url.strip())
        if not match:
            logger.warning("Unrecognised management server URL: %r", url)
            return cls(url=url, protocol=None, host=None, port=None)
        protocol = match.group(1).lower()
        port = int(match.group(3)) if match.group(3) else _DEFAULT_PORTS[protocol]
        return cls(url=url, protocol=protocol, host=match.group(2), port=port)


def read_preferences(path: Path) -> dict[str, Any]:
    """Parse a property list file; a missing file gives an empty mapping."""
    if not path.is_file():
        return {}
    with path.open("rb") as fh:
        data = plistlib.load(fh)
    return data if isinstance(data, dict) else {}


class ConfigurationResolver:
    """
    Resolves the management server for this machine.

    The decomposed URL is cached on the instance. refresh() re-reads the
    preferences; invalidate() drops the cache so the next access re-reads.

    Example:
        >>> resolver = ConfigurationResolver()
        >>> resolver.server_host
        'mdm.example.com'
    """

    def __init__(self, settings: ClientSettings | None = None) -> None:
        self._settings = settings or ClientSettings()
        self._location: ServerLocation | None = None
        self._resolved = False

    @property
    def path(self) -> Path:
        return self._settings.preferences_path

    def preferences(self) -> dict[str, Any]:
        """The full contents of the preferences file, read fresh."""
        return read_preferences(self.path)

    def refresh(self) -> ServerLocation | None:
        """Re-read the preferences and cache the server location."""
        url = self.preferences().get(SERVER_URL_KEY)
        self._location = ServerLocation.parse(url) if isinstance(url, str) and url else None
        self._resolved = True
        logger.debug("Management server: %s", self._location.url if self._location else None)
        return self._location

    def invalidate(self) -> None:
        """Forget the cached server location."""
        self._location = None
        self._resolved = False

    def location(self) -> ServerLocation | None:
        if not self._resolved:
            return self.refresh()
        return self._location

    def management_server_url(self) -> str | None:
        """Return the configured server URL, or None if not configured."""
        loc = self.refresh()
        return loc.url if loc else None

    @property
    def server_host(self) -> str | None:
        loc = self.location()
        return loc.host if loc else None

    @property
    def server_protocol(self) -> str | None:
        loc = self.location()
        return loc.protocol if loc else None

    @property
    def server_port(self) -> int | None:
        loc = self.location()
        return loc.port if loc else None
