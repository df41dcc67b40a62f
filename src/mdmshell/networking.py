"""
Local network address discovery.
"""

from __future__ import annotations

import logging
import socket
from contextlib import contextmanager
from typing import Iterator

from mdmshell.errors import NetworkUnavailable

logger = logging.getLogger(__name__)

# Never actually contacted: connecting a UDP socket sends nothing, it only
# makes the OS pick the outbound interface and bind a local address.
PROBE_HOST = "192.168.0.0"
PROBE_PORT = 1


class NetworkProbe:
    """
    Finds this machine's primary IP address.

    Attributes:
        reverse_lookup: Whether addresses are resolved to host names. Turned
            off while probing and restored afterwards, on this instance only.
    """

    def __init__(
        self,
        *,
        probe_host: str = PROBE_HOST,
        probe_port: int = PROBE_PORT,
        reverse_lookup: bool = True,
    ) -> None:
        self.probe_host = probe_host
        self.probe_port = probe_port
        self.reverse_lookup = reverse_lookup

    @contextmanager
    def _reverse_lookup_suspended(self) -> Iterator[None]:
        saved = self.reverse_lookup
        self.reverse_lookup = False
        try:
            yield
        finally:
            self.reverse_lookup = saved

    def current_ip_address(self) -> str:
        """
        Return the local address the OS would use for outbound traffic.

        Raises:
            NetworkUnavailable: If there is no route to bind through.
        """
        with self._reverse_lookup_suspended():
            try:
                with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                    sock.connect((self.probe_host, self.probe_port))
                    return self._address_name(sock.getsockname())
            except OSError as e:
                logger.debug("Address probe failed: %s", e)
                raise NetworkUnavailable(f"No network route available: {e}") from e

    def current_hostname(self) -> str:
        """Return the name the current address resolves to, or the address itself."""
        address = self.current_ip_address()
        return self._address_name((address, 0))

    def _address_name(self, sockaddr: tuple[str, int]) -> str:
        flags = socket.NI_NUMERICSERV
        if not self.reverse_lookup:
            flags |= socket.NI_NUMERICHOST
        try:
            host, _ = socket.getnameinfo(sockaddr, flags)
        except OSError:
            return sockaddr[0]
        return host
