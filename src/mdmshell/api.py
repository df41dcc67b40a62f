"""
Main entry point: the ManagedClient facade and create_client factory.

ManagedClient represents the machine this code runs on. It ties together the
environment probes, the configuration resolver, and the agent and dialog
front ends.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Mapping, TypeVar

from mdmshell._types import DetachedProcess, MachineIdentity, PrivilegeChecker, WindowType
from mdmshell.agent import AgentCommandBuilder, AgentRunner, CommandArguments
from mdmshell.dialog.compiler import DialogCompiler, DialogRunner, HelperInvocation
from mdmshell.discovery import EnvironmentProbe
from mdmshell.errors import NoReceiptsFolder, RecordNotFound
from mdmshell.networking import NetworkProbe
from mdmshell.preferences import ConfigurationResolver
from mdmshell.security.policy import PrivilegePolicy
from mdmshell.settings import ClientSettings

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


class ManagedClient:
    """
    The managed computer this code is running on.

    Each instance owns its own cached server configuration, so separate
    sessions don't share state.
    """

    def __init__(
        self,
        settings: ClientSettings,
        *,
        agent: AgentRunner,
        dialogs: DialogRunner,
        probe: EnvironmentProbe,
        resolver: ConfigurationResolver,
        network: NetworkProbe,
    ) -> None:
        self.settings = settings
        self.agent = agent
        self.dialogs = dialogs
        self.probe = probe
        self.resolver = resolver
        self.network = network

    # Environment

    def current_ip_address(self) -> str:
        return self.network.current_ip_address()

    def console_user(self) -> str | None:
        return self.probe.console_user()

    def hardware_identity(self) -> MachineIdentity:
        return self.probe.hardware_identity()

    def udid(self) -> str | None:
        return self.hardware_identity().uuid

    def serial_number(self) -> str | None:
        return self.hardware_identity().serial

    # Configuration

    def management_server_url(self) -> str | None:
        return self.resolver.management_server_url()

    def enrolled(self) -> bool:
        """True if the agent is installed and a management server is configured."""
        return self.installed() and self.management_server_url() is not None

    def receipts(self) -> list[Path]:
        """
        All regular files in the agent's receipts folder.

        Raises:
            NoReceiptsFolder: If the folder doesn't exist.
        """
        folder = self.settings.receipts_folder
        if not folder.is_dir():
            raise NoReceiptsFolder(str(folder))
        return sorted(p for p in folder.iterdir() if p.is_file())

    def managed_record(self, lookup: Callable[[str], RecordT]) -> RecordT | None:
        """
        Fetch this machine's server-side record.

        Args:
            lookup: Called with this machine's UUID; raises RecordNotFound
                when the server has no such record.

        Returns:
            The record, or None if the server doesn't know this machine.
        """
        udid = self.udid()
        if udid is None:
            return None
        try:
            return lookup(udid)
        except RecordNotFound:
            logger.info("No server record for %s", udid)
            return None

    # Agent

    def installed(self) -> bool:
        return self.agent.installed()

    def agent_version(self) -> str | None:
        return self.agent.version()

    def server_available(self) -> bool:
        return self.agent.server_available()

    def build_agent_command(
        self, command: str, args: CommandArguments = None, verbose: bool = False
    ) -> str:
        return self.agent.builder.build(command, args, verbose)

    def run_agent(self, command: str, args: CommandArguments = None, verbose: bool = False) -> str:
        return self.agent.run(command, args, verbose)

    # Dialogs

    def compile_dialog(
        self, window_type: WindowType | str, options: Mapping[str, Any] | None = None, **kwargs: Any
    ) -> HelperInvocation:
        return self.dialogs.compiler.compile(window_type, options, **kwargs)

    def show_dialog(
        self,
        window_type: WindowType | str = WindowType.HUD,
        options: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> int | DetachedProcess:
        return self.dialogs.show(window_type, options, **kwargs)


def create_client(
    *,
    settings: ClientSettings | None = None,
    privilege: PrivilegeChecker | None = None,
    strict_dialog_options: bool = False,
) -> ManagedClient:
    """
    Create a ManagedClient for this machine.

    Args:
        settings: Paths to use. Defaults to ClientSettings.from_env().
        privilege: Reports whether the caller is elevated. Defaults to an
            effective-uid check.
        strict_dialog_options: Reject unknown dialog options instead of
            ignoring them.

    Returns:
        ManagedClient wired with the standard components.

    Example:
        >>> client = create_client()
        >>> client.console_user()
        'alice'
    """
    settings = settings or ClientSettings.from_env()
    policy = PrivilegePolicy(checker=privilege) if privilege else PrivilegePolicy.standard()

    return ManagedClient(
        settings,
        agent=AgentRunner(AgentCommandBuilder(settings, policy)),
        dialogs=DialogRunner(DialogCompiler(settings, strict=strict_dialog_options)),
        probe=EnvironmentProbe(settings),
        resolver=ConfigurationResolver(settings),
        network=NetworkProbe(),
    )
