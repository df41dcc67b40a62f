"""
Command construction and execution for the management agent binary.

The agent is invoked as ``<agent> <command> [args...] [-verbose]`` with
standard error merged into standard output.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Sequence
from pathlib import Path
from typing import Callable, Union

import click

from mdmshell._types import CommandResult
from mdmshell.errors import AgentNotInstalled, InvalidArguments
from mdmshell.execution.captured import CapturedExecution
from mdmshell.security.policy import PrivilegePolicy
from mdmshell.settings import ClientSettings, is_executable

logger = logging.getLogger(__name__)

CommandArguments = Union[str, Sequence[str], None]

VERBOSE_FLAG = "-verbose"


def _normalize_arguments(args: object) -> str:
    """Turn None, a string, or a sequence of strings into one argument string."""
    if args is None:
        return ""
    if isinstance(args, str):
        return args.strip()
    if isinstance(args, (list, tuple)) and all(isinstance(a, str) for a in args):
        return " ".join(args)
    raise InvalidArguments("args must be a String or a sequence of Strings", args)


class AgentCommandBuilder:
    """
    Validates agent invocations and assembles their command lines.

    Example:
        >>> builder = AgentCommandBuilder(ClientSettings(), PrivilegePolicy.standard())
        >>> builder.build("recon", ["-assetTag", "12345"])
        '/usr/local/jamf/bin/jamf recon -assetTag 12345'
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        policy: PrivilegePolicy | None = None,
        *,
        echo: Callable[[str], None] = click.echo,
    ) -> None:
        self._settings = settings or ClientSettings()
        self._policy = policy or PrivilegePolicy.standard()
        self._echo = echo

    @property
    def policy(self) -> PrivilegePolicy:
        return self._policy

    def agent_path(self) -> Path | None:
        """Return the first executable agent location, newest install first."""
        for path in self._settings.agent_paths:
            if is_executable(path):
                return path
        return None

    def installed(self) -> bool:
        return self.agent_path() is not None

    def build(self, command: str, args: CommandArguments = None, verbose: bool = False) -> str:
        """
        Build the command line for an agent command.

        Checks run in order: agent installed, caller privilege, argument
        shape. Nothing is started here.

        Args:
            command: The agent sub-command, e.g. "recon".
            args: Extra arguments, as one pre-joined string or a sequence of
                strings. A string is used as-is, so quoting inside it is the
                caller's concern.
            verbose: Add the agent's verbose flag and echo the final line.

        Returns:
            The complete command line.

        Raises:
            AgentNotInstalled: If no agent binary is executable.
            InsufficientPrivilege: If the command needs root and the caller
                isn't elevated.
            InvalidArguments: If args has any other shape.
        """
        agent = self.agent_path()
        if agent is None:
            raise AgentNotInstalled(tuple(str(p) for p in self._settings.agent_paths))

        self._policy.check_command(command)
        arg_string = _normalize_arguments(args)

        parts = [shlex.quote(str(agent)), command]
        if arg_string:
            parts.append(arg_string)
        cmd = " ".join(parts)

        if verbose and f" {VERBOSE_FLAG}" not in cmd:
            cmd += f" {VERBOSE_FLAG}"
        if verbose:
            self._echo(f"Running: {cmd}")
        return cmd


class AgentRunner:
    """
    Runs agent commands and interprets a few well-known ones.

    Example:
        >>> runner = AgentRunner()
        >>> runner.run("recon", "-assetTag 12345 -department 'IT Support'")
    """

    def __init__(
        self,
        builder: AgentCommandBuilder | None = None,
        executor: CapturedExecution | None = None,
    ) -> None:
        self._builder = builder or AgentCommandBuilder()
        self._executor = executor or CapturedExecution()

    @property
    def builder(self) -> AgentCommandBuilder:
        return self._builder

    def execute(self, command: str, args: CommandArguments = None, verbose: bool = False) -> CommandResult:
        """Build and run an agent command, returning output and exit status."""
        cmd = self._builder.build(command, args, verbose)
        return self._executor.run(cmd, verbose=verbose)

    def run(self, command: str, args: CommandArguments = None, verbose: bool = False) -> str:
        """
        Run an agent command and return its merged stdout and stderr.

        Args:
            command: The agent sub-command.
            args: String or sequence of strings, see AgentCommandBuilder.build.
            verbose: Stream the output to the terminal as well as returning it.

        Returns:
            All output text, decoded as UTF-8.
        """
        return self.execute(command, args, verbose).output

    def installed(self) -> bool:
        return self._builder.installed()

    def version(self) -> str | None:
        """Return the installed agent version, or None if the agent isn't installed."""
        if not self.installed():
            return None
        out = self.run("version").strip()
        _, sep, value = out.partition("=")
        return value.strip() if sep else out or None

    def server_available(self) -> bool:
        """
        Check whether the management server answers right now.

        Exit status 0 from the connection check means available; anything
        else means unavailable.
        """
        result = self.execute("checkJSSConnection", "-retry 1")
        logger.debug("Connection check exited %d", result.exit_code)
        return result.success
